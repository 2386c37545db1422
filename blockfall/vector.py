"""Two-dimensional float vectors and the shared screen size."""

from __future__ import annotations

import math
from dataclasses import dataclass

_DEFAULT_WIDTH = 800
_DEFAULT_HEIGHT = 600

_screen_size: tuple[int, int] = (_DEFAULT_WIDTH, _DEFAULT_HEIGHT)


@dataclass(frozen=True)
class Vector2f:
    """An immutable 2D vector of floats."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> Vector2f:
        """Return a vector with both components set to ``value``."""
        return cls(value, value)

    def __add__(self, other: Vector2f) -> Vector2f:
        return Vector2f(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2f) -> Vector2f:
        return Vector2f(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2f:
        return Vector2f(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2f:
        """Divide by ``scalar``; dividing by zero yields the zero vector."""
        if scalar == 0:
            return Vector2f(0.0, 0.0)
        return Vector2f(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2f:
        return Vector2f(-self.x, -self.y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalized(self) -> Vector2f:
        """Return a unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length > 0:
            return Vector2f(self.x / length, self.y / length)
        return self

    def dot(self, other: Vector2f) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2f) -> float:
        return self.x * other.y - self.y * other.x

    def distance(self, other: Vector2f) -> float:
        return math.sqrt(self.distance_squared(other))

    def distance_squared(self, other: Vector2f) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy


def set_screen_size(width: int, height: int) -> None:
    """Record the current screen size."""
    global _screen_size
    _screen_size = (width, height)


def get_screen_size() -> tuple[int, int]:
    """Return the recorded screen size as ``(width, height)``."""
    return _screen_size