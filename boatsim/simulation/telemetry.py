"""
Telemetry Readout
=================

Read-only values for the on-screen display: speed, local wave height
and the speed bar fill.
"""

from dataclasses import dataclass

from .watercraft import Watercraft
from .wave_field import WaveField


@dataclass(frozen=True)
class TelemetryReadout:
    """One frame of display telemetry."""
    speed: float             # Absolute speed
    wave_height: float       # Surface height under the watercraft
    speed_percent: float     # Speed bar fill, capped at 100

    @classmethod
    def read(cls, watercraft: Watercraft, wave_field: WaveField) -> 'TelemetryReadout':
        """Sample telemetry without touching either model's state."""
        speed = watercraft.abs_speed
        position = watercraft.state.position
        percent = speed / watercraft.config.max_speed * 100
        return cls(
            speed=speed,
            wave_height=wave_field.height_at(position.x, position.z),
            speed_percent=min(percent, 100.0),
        )

    @property
    def speed_text(self) -> str:
        return f"{self.speed:.0f}"

    @property
    def wave_height_text(self) -> str:
        return f"{self.wave_height:.1f}"

    def to_dict(self) -> dict:
        return {
            "speed": round(self.speed, 3),
            "wave_height": round(self.wave_height, 3),
            "speed_percent": round(self.speed_percent, 1),
        }
