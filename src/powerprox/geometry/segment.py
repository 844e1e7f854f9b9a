"""
Line segment: the atomic unit of every polygon and polyline.
"""

from __future__ import annotations

from powerprox.geometry.basic import TOLERANCE, Point, Vector, distance
from powerprox.geometry.errors import DegenerateSegment


class LineSegment:
    """A straight edge between two distinct points `a` and `b`."""

    __slots__ = ("_a", "_b")

    def __init__(self, a: Point, b: Point):
        if distance(a, b) < TOLERANCE:
            raise DegenerateSegment(a, b, TOLERANCE)
        self._a = a
        self._b = b

    @property
    def a(self) -> Point:
        return self._a

    @property
    def b(self) -> Point:
        return self._b

    def __repr__(self) -> str:
        return f"LineSegment({self._a!r}, {self._b!r})"

    def __str__(self) -> str:
        return f"({self._a} -> {self._b})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LineSegment):
            return NotImplemented
        return self._a == other._a and self._b == other._b

    def __hash__(self) -> int:
        return hash((self._a, self._b))

    def close_to(self, other: LineSegment, delta: float) -> bool:
        return self._a.close_to(other.a, delta) and self._b.close_to(other.b, delta)

    def find_projection(self, point: Point) -> Point:
        """Orthogonal projection of `point` onto the infinite line through a and b."""
        dx = self._b.x - self._a.x
        dy = self._b.y - self._a.y
        # Vertical line x = a.x; the slope form below is undefined.
        if abs(dx) < TOLERANCE:
            return Point(x=self._a.x, y=point.y)
        # y = k * x + c
        k = dy / dx
        c = self._a.y - k * self._a.x
        denom = 1.0 + k * k
        return Point(
            x=(point.x + k * point.y - k * c) / denom,
            y=(k * point.x + k * k * point.y + c) / denom,
        )

    def closest_point_to(self, point: Point) -> Point:
        """Point on the closed segment nearest to `point`.

        Tie-break order matters for collinear input: a point already on the line
        is resolved before the endpoint coincidence checks.
        """
        projection = self.find_projection(point)
        to_projection = Vector.from_points(point, projection)
        if to_projection.magnitude() < TOLERANCE:
            # point is on the line, the cross products below would be zero
            if self._within_span(projection):
                return projection
            return self._nearer_endpoint(point)
        projection_to_a = Vector.from_points(projection, self._a)
        if projection_to_a.magnitude() < TOLERANCE:
            return self._a
        projection_to_b = Vector.from_points(projection, self._b)
        if projection_to_b.magnitude() < TOLERANCE:
            return self._b

        cross_a = to_projection.cross(projection_to_a)
        cross_b = to_projection.cross(projection_to_b)
        if (cross_a > 0.0 and cross_b > 0.0) or (cross_a < 0.0 and cross_b < 0.0):
            # Both endpoints on the same side: projection falls outside [a, b].
            return self._nearer_endpoint(point)
        return projection

    def _nearer_endpoint(self, point: Point) -> Point:
        # a wins ties
        if distance(point, self._a) > distance(point, self._b):
            return self._b
        return self._a

    def _within_span(self, p: Point) -> bool:
        """Bounding-box test; only meaningful for points already on the line."""
        return (
            min(self._a.x, self._b.x) - TOLERANCE <= p.x <= max(self._a.x, self._b.x) + TOLERANCE
            and min(self._a.y, self._b.y) - TOLERANCE <= p.y <= max(self._a.y, self._b.y) + TOLERANCE
        )

    def distance_to_point(self, point: Point) -> float:
        return distance(self.closest_point_to(point), point)
