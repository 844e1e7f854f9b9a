"""
Planar primitives.

Points live in a local metre-scale plane (see `powerprox.geometry.projection`), so a
single absolute tolerance is enough for every coincidence check in the engine.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

TOLERANCE = 1e-14


@dataclass(frozen=True)
class Point:
    """A cartesian point in metres relative to the projection origin."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return distance(self, other)

    def close_to(self, other: Point, delta: float) -> bool:
        """True when both axes differ by less than `delta`."""
        return abs(self.x - other.x) < delta and abs(self.y - other.y) < delta

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}]"


@dataclass(frozen=True)
class Vector:
    """Displacement between two points."""

    x: float
    y: float

    @classmethod
    def from_points(cls, start: Point, end: Point) -> Vector:
        return cls(x=end.x - start.x, y=end.y - start.y)

    def cross(self, other: Vector) -> float:
        # Positive for a counter-clockwise turn from self to other.
        return self.x * other.y - self.y * other.x

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)


def distance(p: Point, q: Point) -> float:
    """Euclidean distance between two points."""
    dx = q.x - p.x
    dy = q.y - p.y
    return math.sqrt(dx * dx + dy * dy)
