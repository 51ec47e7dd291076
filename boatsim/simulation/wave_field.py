"""
Wave Field
==========

Procedural ocean surface. Maps a horizontal position and the running
simulation time to a surface height and normal.

The surface is a closed-form sum of sinusoids, not a solved fluid model:
- Two swell terms (always evaluated)
- Three high-frequency detail terms (FULL quality tier only)

The same closed form backs both the physics queries and the mesh
deformation grid, so the watercraft visibly rests on the rendered surface.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

import numpy as np

from .quality import QualityTier, QualityProfile
from .vector import Vector3

logger = logging.getLogger(__name__)


@dataclass
class WaveFieldConfig:
    """Configuration for the wave field."""
    # Swell (large, slow)
    swell_amplitude: float = 2.5      # Height units
    swell_frequency: float = 0.05     # Radians per unit distance

    # Detail waves (FULL tier only)
    wave_amplitude: float = 1.5
    wave_frequency: float = 0.1
    chop_amplitude: float = 0.3       # Diagonal cross-chop term

    # Clock
    wave_speed: float = 0.5           # Simulation time per unit of real time

    # Normal estimation
    normal_epsilon: float = 0.1       # Forward-difference step

    # Rendered surface extent (square, centred on the origin)
    surface_size: float = 400.0

    def validate(self):
        """
        Check parameter ranges.

        Raises:
            ValueError: If a frequency or speed is not positive or an
                amplitude is negative
        """
        for name in ('swell_frequency', 'wave_frequency', 'wave_speed',
                     'normal_epsilon', 'surface_size'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ('swell_amplitude', 'wave_amplitude', 'chop_amplitude'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")


class WaveField:
    """
    Procedural wave height and normal field.

    Owns only the simulation clock and its parameters; every query is a
    pure function of ``(x, z, time)``.
    """

    def __init__(self, config: Optional[WaveFieldConfig] = None,
                 tier: QualityTier = QualityTier.FULL):
        """
        Initialize wave field.

        Args:
            config: Wave configuration
            tier: Quality tier, fixed for the lifetime of the field
        """
        self.config = config or WaveFieldConfig()
        self.config.validate()
        self.tier = tier
        self.time = 0.0

    def advance(self, dt: float):
        """
        Advance the wave clock.

        Args:
            dt: Elapsed real time (seconds), already clamped by the frame driver
        """
        self.time += dt * self.config.wave_speed

    def height_at(self, x: float, z: float) -> float:
        """Surface height at a horizontal position."""
        return self._surface(x, z, math)

    def normal_at(self, x: float, z: float) -> Vector3:
        """
        Unit surface normal at a horizontal position.

        Estimated by forward differences of ``height_at`` along x and z.
        """
        eps = self.config.normal_epsilon
        h = self.height_at(x, z)
        hx = self.height_at(x + eps, z)
        hz = self.height_at(x, z + eps)

        dx = (hx - h) / eps
        dz = (hz - h) / eps

        return Vector3(-dx, 1.0, -dz).normalized()

    def sample_grid(self, segments: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Sample surface heights on a square vertex grid for mesh deformation.

        Args:
            segments: Subdivisions per side; defaults to the tier's mesh detail

        Returns:
            Tuple of (xs, zs, heights), each shaped (segments+1, segments+1)
        """
        if segments is None:
            segments = QualityProfile.for_tier(self.tier).surface_segments
        if segments < 1:
            raise ValueError(f"segments must be at least 1, got {segments}")

        half = self.config.surface_size / 2
        axis = np.linspace(-half, half, segments + 1)
        xs, zs = np.meshgrid(axis, axis)
        heights = self._surface(xs, zs, np)
        return xs, zs, heights

    def _surface(self, x, z, xp):
        """
        Closed-form surface height.

        ``xp`` is the math backend (``math`` for scalar physics queries,
        ``numpy`` for vertex grids) so both paths share one formula.
        """
        cfg = self.config
        t = self.time

        height = cfg.swell_amplitude * xp.sin(x * cfg.swell_frequency + t)
        height = height + 0.7 * cfg.swell_amplitude * xp.cos(z * cfg.swell_frequency + 0.7 * t)

        if self.tier == QualityTier.FULL:
            height = height + cfg.wave_amplitude * xp.sin(2 * cfg.wave_frequency * x + 2 * t)
            height = height + 0.5 * cfg.wave_amplitude * xp.cos(2 * cfg.wave_frequency * z + 1.5 * t)
            height = height + cfg.chop_amplitude * xp.sin(0.3 * x + 0.3 * z + 3 * t)

        return height

    @classmethod
    def calm(cls, tier: QualityTier = QualityTier.FULL) -> 'WaveField':
        """Create a calm sea."""
        config = WaveFieldConfig(
            swell_amplitude=0.8,
            wave_amplitude=0.4,
            chop_amplitude=0.1,
        )
        return cls(config, tier)

    @classmethod
    def default(cls, tier: QualityTier = QualityTier.FULL) -> 'WaveField':
        """Create the standard sea state."""
        return cls(WaveFieldConfig(), tier)

    @classmethod
    def rough(cls, tier: QualityTier = QualityTier.FULL) -> 'WaveField':
        """Create a rough sea."""
        config = WaveFieldConfig(
            swell_amplitude=4.0,
            wave_amplitude=2.5,
            chop_amplitude=0.6,
            wave_speed=0.7,
        )
        return cls(config, tier)
