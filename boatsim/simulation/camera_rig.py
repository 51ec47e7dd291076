"""
Camera Rig
==========

Trailing chase camera. Orbits the watercraft under look-stick control and
follows it with a fixed per-frame interpolation.
"""

import math
from dataclasses import dataclass
from typing import Optional
import logging

from .controls import ControlInput
from .vector import Vector3
from .watercraft import WatercraftPose

logger = logging.getLogger(__name__)


@dataclass
class CameraConfig:
    """Configuration for the chase camera."""
    distance: float = 12.0       # Horizontal distance behind the watercraft
    base_height: float = 6.0     # Height above the watercraft
    orbit_rate: float = 0.05     # Orbit angle change per frame at full stick (rad)
    height_range: float = 5.0    # Extra height at full stick
    smoothing: float = 0.15      # Per-frame lerp fraction (not time-scaled)


@dataclass(frozen=True)
class CameraView:
    """Viewpoint published to the renderer."""
    position: Vector3
    look_target: Vector3


class CameraRig:
    """Smoothed chase camera following a watercraft pose."""

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()
        self.orbit_angle = 0.0
        self.orbit_height = 0.0
        self.camera_position = Vector3()
        self.look_target = Vector3()

    def target_position(self, pose: WatercraftPose) -> Vector3:
        """Where the camera is heading for, given the current orbit."""
        cfg = self.config
        angle = pose.yaw + self.orbit_angle
        offset = Vector3(
            math.sin(angle) * cfg.distance,
            cfg.base_height + self.orbit_height,
            math.cos(angle) * cfg.distance,
        )
        return pose.position + offset

    def update(self, pose: WatercraftPose, controls: ControlInput) -> CameraView:
        """
        Advance the camera by one frame.

        The lerp fraction is applied per call regardless of frame time.

        Args:
            pose: Current watercraft transform (read only)
            controls: This frame's control snapshot (look axes)

        Returns:
            The new viewpoint
        """
        self.orbit_angle += controls.look_x * self.config.orbit_rate
        self.orbit_height = controls.look_y * self.config.height_range

        target = self.target_position(pose)
        self.camera_position = self.camera_position.lerp(target, self.config.smoothing)
        self.look_target = pose.position.copy()

        return self.view()

    def snap(self, pose: WatercraftPose) -> CameraView:
        """Place the camera exactly on its target, skipping the smoothing."""
        self.camera_position = self.target_position(pose)
        self.look_target = pose.position.copy()
        logger.debug("Camera snapped to target")
        return self.view()

    def view(self) -> CameraView:
        return CameraView(
            position=self.camera_position.copy(),
            look_target=self.look_target.copy(),
        )
