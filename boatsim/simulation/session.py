"""
Simulation Session
==================

Owns one wave field, one watercraft and one camera rig, and runs them
through the per-frame pipeline:

    wave field advance -> watercraft update -> camera update -> telemetry

Each step returns a FrameSnapshot for the rendering collaborator.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging

import numpy as np

from .camera_rig import CameraConfig, CameraRig, CameraView
from .controls import ControlInput
from .quality import QualityProfile, QualityTier
from .telemetry import TelemetryReadout
from .watercraft import HapticSink, Watercraft, WatercraftConfig, WatercraftPose
from .wave_field import WaveField, WaveFieldConfig

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    """Configuration for a simulation session."""
    quality_tier: QualityTier = QualityTier.FULL
    wave_config: WaveFieldConfig = field(default_factory=WaveFieldConfig)
    watercraft_config: WatercraftConfig = field(default_factory=WatercraftConfig)
    camera_config: CameraConfig = field(default_factory=CameraConfig)

    # Start the camera on its target instead of sweeping in from the origin
    snap_camera: bool = True

    # Include the surface height grid in every snapshot
    publish_surface: bool = False


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the renderer and display need for one frame."""
    frame: int
    dt: float
    elapsed: float                 # Simulated seconds since session start
    wave_time: float               # Wave field clock
    pose: WatercraftPose
    camera: CameraView
    telemetry: TelemetryReadout
    surface: Optional[np.ndarray] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        data = {
            "frame": self.frame,
            "dt": round(self.dt, 6),
            "elapsed": round(self.elapsed, 4),
            "wave_time": round(self.wave_time, 4),
            "boat": {
                "position": [round(v, 4) for v in self.pose.position.as_tuple()],
                "yaw": round(self.pose.yaw, 5),
                "pitch": round(self.pose.pitch, 5),
                "roll": round(self.pose.roll, 5),
            },
            "camera": {
                "position": [round(v, 4) for v in self.camera.position.as_tuple()],
                "look_target": [round(v, 4) for v in self.camera.look_target.as_tuple()],
            },
            "telemetry": self.telemetry.to_dict(),
        }
        if self.surface is not None:
            data["surface"] = np.round(self.surface, 3).tolist()
        return data


class SimulationSession:
    """
    One running simulation.

    Components are owned by the session and only mutated through ``step``.
    """

    def __init__(self, config: Optional[SessionConfig] = None,
                 haptic_sink: Optional[HapticSink] = None):
        """
        Initialize session.

        Args:
            config: Session configuration
            haptic_sink: Optional callback receiving vibration patterns
        """
        self.config = config or SessionConfig()
        self.profile = QualityProfile.for_tier(self.config.quality_tier)

        self.wave_field = WaveField(self.config.wave_config, self.config.quality_tier)
        self.watercraft = Watercraft(self.config.watercraft_config, haptic_sink=haptic_sink)
        self.camera = CameraRig(self.config.camera_config)

        if self.config.snap_camera:
            self.camera.snap(self.watercraft.pose())

        self.frame = 0
        self.elapsed = 0.0
        self._closed = False

        logger.info(f"Simulation session started (quality={self.profile.tier.value})")

    def step(self, dt: float, controls: ControlInput) -> FrameSnapshot:
        """
        Run one frame of the pipeline.

        Args:
            dt: Clamped frame time (seconds)
            controls: This frame's control snapshot

        Returns:
            Snapshot of the frame for rendering and display

        Raises:
            RuntimeError: If the session has been closed
        """
        if self._closed:
            raise RuntimeError("Simulation session is closed")

        self.wave_field.advance(dt)
        self.watercraft.update(dt, self.wave_field, controls)
        view = self.camera.update(self.watercraft.pose(), controls)
        telemetry = TelemetryReadout.read(self.watercraft, self.wave_field)

        self.frame += 1
        self.elapsed += dt

        surface = None
        if self.config.publish_surface:
            _, _, surface = self.wave_field.sample_grid(self.profile.surface_segments)

        return FrameSnapshot(
            frame=self.frame,
            dt=dt,
            elapsed=self.elapsed,
            wave_time=self.wave_field.time,
            pose=self.watercraft.pose(),
            camera=view,
            telemetry=telemetry,
            surface=surface,
        )

    def telemetry(self) -> TelemetryReadout:
        return TelemetryReadout.read(self.watercraft, self.wave_field)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self):
        """End the session. Further steps are rejected."""
        if self._closed:
            return
        self._closed = True
        logger.info(f"Simulation session closed after {self.frame} frames "
                    f"({self.elapsed:.1f}s simulated)")
