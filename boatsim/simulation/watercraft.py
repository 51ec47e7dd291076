"""
Watercraft Dynamics
===================

Arcade-style boat model driven by throttle/turn input and the wave field.

Each frame integrates, in a fixed order:
- Throttle, boost and turning
- Horizontal translation along the heading
- Buoyancy as a spring toward the local wave height followed by damping
- Pitch and roll alignment to the local surface normal, plus banking
- A small constant heave (bobbing)
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import logging

from .controls import ControlInput
from .vector import Vector3
from .wave_field import WaveField

logger = logging.getLogger(__name__)


# Vibration patterns (milliseconds on/off) sent to the haptic sink
BOOST_HAPTIC_PATTERN = (50,)
RESET_HAPTIC_PATTERN = (100, 50, 100)

HapticSink = Callable[[Tuple[int, ...]], None]


@dataclass
class WatercraftConfig:
    """Configuration for watercraft dynamics."""
    # Propulsion
    max_speed: float = 20.0            # Units/s at full throttle
    acceleration: float = 10.0         # Units/s^2 per unit of throttle
    boost_multiplier: float = 2.0      # Acceleration multiplier while boosting
    passive_speed_decay: float = 0.95  # Per-frame speed ratio with throttle released

    # Steering
    turn_speed: float = 2.0            # rad/s at full stick and full speed
    angular_damping: float = 0.9       # Per-frame yaw-rate ratio with stick released
    deadzone: float = 0.1              # Axis magnitude treated as neutral

    # Buoyancy
    buoyancy_force: float = 15.0       # Spring stiffness toward the surface
    linear_damping: float = 0.95       # Per-frame vertical velocity ratio
    hull_offset: float = 1.0           # Rest height above the surface

    # Attitude
    orientation_rate: float = 3.0      # Exponential approach rate to the surface normal
    bank_factor: float = 0.2           # Roll per unit yaw rate at full speed
    bob_rate: float = 2.0              # Heave phase rate (rad/s)
    bob_amplitude: float = 0.05        # Heave amplitude per frame

    # Spawn
    spawn_position: Tuple[float, float, float] = (0.0, 5.0, 0.0)


@dataclass
class WatercraftState:
    """Current watercraft state."""
    position: Vector3 = field(default_factory=lambda: Vector3(0.0, 5.0, 0.0))
    velocity: Vector3 = field(default_factory=Vector3)

    # Orientation (radians)
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0

    # Rates
    speed: float = 0.0               # Signed, forward positive
    angular_velocity: float = 0.0    # Yaw rate command (rad/s)

    # Smoothing accumulators
    bob_phase: float = 0.0
    pitch_smoothed: float = 0.0
    roll_smoothed: float = 0.0


@dataclass(frozen=True)
class WatercraftPose:
    """Transform published to the renderer and camera rig."""
    position: Vector3
    yaw: float
    pitch: float
    roll: float


class Watercraft:
    """
    Watercraft dynamics model.

    Consumes wave-field queries and a control snapshot each frame and
    owns the resulting position, velocity and orientation.
    """

    def __init__(self, config: Optional[WatercraftConfig] = None,
                 haptic_sink: Optional[HapticSink] = None):
        """
        Initialize watercraft at the spawn pose.

        Args:
            config: Watercraft configuration
            haptic_sink: Optional callback receiving vibration patterns

        Raises:
            ValueError: If max_speed is not positive
        """
        self.config = config or WatercraftConfig()
        if self.config.max_speed <= 0:
            raise ValueError(f"max_speed must be positive, got {self.config.max_speed}")

        self.haptic_sink = haptic_sink
        self.state = WatercraftState()
        self.reset()

    def update(self, dt: float, wave_field: WaveField, controls: ControlInput) -> WatercraftState:
        """
        Advance watercraft state by one frame.

        Args:
            dt: Time step (seconds), already clamped by the frame driver
            wave_field: Surface to float on
            controls: This frame's control snapshot

        Returns:
            Updated watercraft state
        """
        self._apply_throttle(controls, dt)
        self._apply_boost(controls, dt)
        self._apply_turning(controls)
        self._update_yaw(dt)
        self._update_horizontal(dt)
        self._apply_buoyancy(wave_field, dt)
        self._align_to_surface(wave_field, dt)
        self._compose_orientation()
        self._apply_bob(dt)

        if controls.reset_requested:
            self.reset()
            self._pulse(RESET_HAPTIC_PATTERN)

        return self.state

    def _apply_throttle(self, controls: ControlInput, dt: float):
        """Integrate throttle, or let speed decay when released."""
        cfg = self.config
        state = self.state

        if abs(controls.move_y) > cfg.deadzone:
            state.speed += controls.move_y * cfg.acceleration * dt
            state.speed = max(-cfg.max_speed * 0.5, min(cfg.max_speed, state.speed))
        else:
            state.speed *= cfg.passive_speed_decay

    def _apply_boost(self, controls: ControlInput, dt: float):
        """Boost may push speed past the throttle ceiling, up to 1.5x max."""
        if not controls.boost:
            return

        cfg = self.config
        self.state.speed = min(
            self.state.speed + cfg.acceleration * cfg.boost_multiplier * dt,
            cfg.max_speed * 1.5
        )
        self._pulse(BOOST_HAPTIC_PATTERN)

    def _apply_turning(self, controls: ControlInput):
        """Set yaw rate from the stick, or damp it toward zero."""
        cfg = self.config

        if abs(controls.move_x) > cfg.deadzone:
            self.state.angular_velocity = -controls.move_x * cfg.turn_speed
        else:
            self.state.angular_velocity *= cfg.angular_damping

    def _update_yaw(self, dt: float):
        # No turning in place: turn rate scales with speed
        state = self.state
        state.yaw += state.angular_velocity * dt * self.speed_factor

    def _update_horizontal(self, dt: float):
        """Move along the heading at the current speed."""
        state = self.state
        direction_x = math.sin(state.yaw)
        direction_z = math.cos(state.yaw)

        state.velocity.x = direction_x * state.speed
        state.velocity.z = direction_z * state.speed

        state.position.x += state.velocity.x * dt
        state.position.z += state.velocity.z * dt

    def _apply_buoyancy(self, wave_field: WaveField, dt: float):
        """
        Pull altitude toward the local wave height.

        Spring first, then damping, then integration. The order sets the
        settling behaviour and must not change.
        """
        cfg = self.config
        state = self.state

        wave_height = wave_field.height_at(state.position.x, state.position.z)
        target_y = wave_height + cfg.hull_offset

        state.velocity.y += (target_y - state.position.y) * cfg.buoyancy_force * dt
        state.velocity.y *= cfg.linear_damping
        state.position.y += state.velocity.y * dt

    def _align_to_surface(self, wave_field: WaveField, dt: float):
        """Ease pitch and roll toward the attitude of the local surface."""
        state = self.state
        rate = self.config.orientation_rate

        normal = wave_field.normal_at(state.position.x, state.position.z)
        target_pitch = math.atan2(normal.z, normal.y)
        target_roll = math.atan2(-normal.x, normal.y)

        state.pitch_smoothed += (target_pitch - state.pitch_smoothed) * dt * rate
        state.roll_smoothed += (target_roll - state.roll_smoothed) * dt * rate

    def _compose_orientation(self):
        """Scale wave-following by speed and add banking into turns."""
        state = self.state
        speed_factor = self.speed_factor
        follow = 0.3 + 0.7 * speed_factor

        state.pitch = state.pitch_smoothed * follow
        state.roll = (
            state.roll_smoothed * follow +
            state.angular_velocity * self.config.bank_factor * speed_factor
        )

    def _apply_bob(self, dt: float):
        state = self.state
        state.bob_phase += dt * self.config.bob_rate
        state.position.y += math.sin(state.bob_phase) * self.config.bob_amplitude

    def reset(self):
        """
        Return to the spawn pose at rest.

        Only the published transform and the rates are cleared. The pitch
        and roll accumulators and the bob phase carry over, so wave
        following resumes from where it was.
        """
        state = self.state
        state.position = Vector3(*self.config.spawn_position)
        state.velocity = Vector3()
        state.yaw = 0.0
        state.pitch = 0.0
        state.roll = 0.0
        state.speed = 0.0
        state.angular_velocity = 0.0
        logger.debug(f"Watercraft reset to spawn {self.config.spawn_position}")

    def _pulse(self, pattern: Tuple[int, ...]):
        if self.haptic_sink is not None:
            self.haptic_sink(pattern)

    @property
    def speed_factor(self) -> float:
        """Absolute speed as a fraction of max speed."""
        return abs(self.state.speed) / self.config.max_speed

    @property
    def abs_speed(self) -> float:
        return abs(self.state.speed)

    def pose(self) -> WatercraftPose:
        """Snapshot of the current transform."""
        state = self.state
        return WatercraftPose(
            position=state.position.copy(),
            yaw=state.yaw,
            pitch=state.pitch,
            roll=state.roll,
        )
