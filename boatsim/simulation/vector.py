"""
Vector Math
===========

Minimal 3D vector used for positions, velocities and surface normals.

World axes follow the renderer's convention: x and z span the sea surface,
y points up.
"""

import math
from dataclasses import dataclass


@dataclass
class Vector3:
    """Mutable 3D vector."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> "Vector3":
        return self.__mul__(scalar)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Vector3":
        """
        Unit vector in the same direction.

        A zero-length vector has no direction; the up vector (0, 1, 0)
        is returned instead so callers always get a usable surface normal.
        """
        length = self.length()
        if length == 0.0:
            return Vector3(0.0, 1.0, 0.0)
        return Vector3(self.x / length, self.y / length, self.z / length)

    def lerp(self, target: "Vector3", alpha: float) -> "Vector3":
        """Move ``alpha`` of the way toward ``target`` (per-component)."""
        return Vector3(
            self.x + (target.x - self.x) * alpha,
            self.y + (target.y - self.y) * alpha,
            self.z + (target.z - self.z) * alpha,
        )

    def copy(self) -> "Vector3":
        return Vector3(self.x, self.y, self.z)

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.z)
