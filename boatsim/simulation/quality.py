"""
Quality Tier
============

Boot-time fidelity switch. The tier is decided once by the hosting
application (e.g. from device capability detection) and threaded into
the wave field and any rendering collaborator.
"""

from dataclasses import dataclass
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class QualityTier(Enum):
    """Which procedural terms and rendering detail are evaluated."""
    FULL = "full"          # Swell plus high-frequency detail
    REDUCED = "reduced"    # Swell only (low-power devices)


@dataclass(frozen=True)
class QualityProfile:
    """Rendering-fidelity constants derived from a quality tier."""
    tier: QualityTier
    surface_segments: int          # Ocean mesh subdivisions per side
    fog_far: float                 # Fog end distance
    camera_far: float              # Camera far clip plane
    shadows: bool
    antialias: bool
    flat_shading: bool
    surface_shininess: float
    low_fps_threshold: float = 25.0  # Below this the renderer should degrade

    @property
    def adapts_to_frame_rate(self) -> bool:
        """Only reduced-tier devices drop render resolution under load."""
        return self.tier == QualityTier.REDUCED

    @classmethod
    def for_tier(cls, tier: QualityTier) -> 'QualityProfile':
        """Build the profile for a tier."""
        if tier == QualityTier.FULL:
            return cls(
                tier=tier,
                surface_segments=128,
                fog_far=500.0,
                camera_far=1000.0,
                shadows=True,
                antialias=True,
                flat_shading=False,
                surface_shininess=100.0,
            )
        return cls(
            tier=tier,
            surface_segments=64,
            fog_far=300.0,
            camera_far=500.0,
            shadows=False,
            antialias=False,
            flat_shading=True,
            surface_shininess=50.0,
        )


def parse_tier(name: str) -> QualityTier:
    """
    Parse a tier name as given on the command line.

    Raises:
        ValueError: If the name is not a known tier
    """
    try:
        return QualityTier(name.strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in QualityTier)
        raise ValueError(f"Unknown quality tier '{name}' (expected one of: {valid})")
