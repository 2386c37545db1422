"""Circle and axis-aligned box colliders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from blockfall.vector import Vector2f


@dataclass
class Collider(ABC):
    """A shape positioned at ``center`` that can test overlap with another."""

    center: Vector2f = field(default_factory=Vector2f)

    @abstractmethod
    def intersects(self, other: Collider) -> bool:
        """Return True when this shape overlaps ``other`` (touching counts)."""


@dataclass
class CircleCollider(Collider):
    radius: float = 0.0

    def intersects(self, other: Collider) -> bool:
        if isinstance(other, CircleCollider):
            reach = self.radius + other.radius
            return (other.center - self.center).length_squared() <= reach * reach
        if isinstance(other, BoxCollider):
            return _circle_box(self, other)
        raise TypeError(f"cannot intersect CircleCollider with {type(other).__name__}")


@dataclass
class BoxCollider(Collider):
    half_size: Vector2f = field(default_factory=Vector2f)

    def intersects(self, other: Collider) -> bool:
        if isinstance(other, BoxCollider):
            a_min, a_max = self._bounds()
            b_min, b_max = other._bounds()
            if a_min.x > b_max.x or a_max.x < b_min.x:
                return False
            if a_min.y > b_max.y or a_max.y < b_min.y:
                return False
            return True
        if isinstance(other, CircleCollider):
            return _circle_box(other, self)
        raise TypeError(f"cannot intersect BoxCollider with {type(other).__name__}")

    def _bounds(self) -> tuple[Vector2f, Vector2f]:
        return self.center - self.half_size, self.center + self.half_size


def _circle_box(circle: CircleCollider, box: BoxCollider) -> bool:
    low, high = box._bounds()
    closest_x = max(low.x, min(circle.center.x, high.x))
    closest_y = max(low.y, min(circle.center.y, high.y))
    closest = Vector2f(closest_x, closest_y)
    return circle.center.distance_squared(closest) <= circle.radius * circle.radius


def intersects(lhs: Collider, rhs: Collider) -> bool:
    """Return True when the two colliders overlap."""
    return lhs.intersects(rhs)