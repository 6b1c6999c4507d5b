"""
2D vector type for positions, velocities and accelerations in the plane.

All quantities use game units: au (distance), au/s (velocity), au/s^2
(acceleration). Angles are radians, measured counter-clockwise from +x.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2:
    """
    Immutable 2D vector.

    Arithmetic always returns a new vector, so a Vector2 can be shared between
    bodies and commands without copying.
    """
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector2:
        if scalar == 0:
            raise ValueError("Cannot divide vector by zero")
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def dot(self, other: Vector2) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2) -> float:
        """Z component of the 3D cross product (positive if other is counter-clockwise)."""
        return self.x * other.y - self.y * other.x

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def angle(self) -> float:
        """Heading of this vector in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    def normalized(self) -> Vector2:
        """Unit vector in the same direction, or the zero vector."""
        length = self.length
        if length == 0:
            return Vector2(0.0, 0.0)
        return self / length

    def scaled_to(self, length: float) -> Vector2:
        """Same direction with the given length (zero stays zero)."""
        return self.normalized() * length

    def rotated(self, angle: float) -> Vector2:
        """Rotate counter-clockwise by angle radians."""
        c = math.cos(angle)
        s = math.sin(angle)
        return Vector2(c * self.x - s * self.y, s * self.x + c * self.y)

    def perpendicular(self) -> Vector2:
        """Counter-clockwise perpendicular (same length)."""
        return Vector2(-self.y, self.x)

    def distance_to(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_polar(cls, length: float, angle: float) -> Vector2:
        """Vector of given length pointing along angle."""
        return cls(length * math.cos(angle), length * math.sin(angle))

    @classmethod
    def zero(cls) -> Vector2:
        return cls(0.0, 0.0)

    def __repr__(self) -> str:
        return f"Vector2({self.x:.6g}, {self.y:.6g})"
