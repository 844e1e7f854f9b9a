"""
Geometry construction errors.

Every shape validates itself once, at construction time. After that all queries are
total, so these exceptions are only ever raised from constructors.
"""

from __future__ import annotations

from typing import Any, Sequence


class GeometryError(ValueError):
    """Base class for invalid shape input."""


class DegenerateSegment(GeometryError):
    def __init__(self, first: Any, second: Any, tolerance: float):
        self.first = first
        self.second = second
        self.tolerance = tolerance
        super().__init__(
            "can not form a line segment from two points at the same coordinate: "
            f"point0={first} point1={second} tolerance={tolerance}"
        )


class InsufficientPoints(GeometryError):
    def __init__(self, kind: str, required: int, points: Sequence[Any]):
        self.kind = kind
        self.required = required
        self.points = list(points)
        super().__init__(
            f"need at least {required} distinct points to form a {kind}, "
            f"got {_fmt(self.points)}"
        )


class DegenerateShape(GeometryError):
    def __init__(self, points: Sequence[Any]):
        self.points = list(points)
        super().__init__(
            "3 points with the same first and last point collapse to a line, "
            f"not a polygon: {_fmt(self.points)}"
        )


class DiscontinuousChain(GeometryError):
    def __init__(self, index: int, previous: Any, current: Any):
        self.index = index
        self.previous = previous
        self.current = current
        super().__init__(
            "end point of the previous segment must be the start point of the current "
            f"segment at index={index}: previous={previous} current={current}"
        )


class UnclosedLoop(GeometryError):
    def __init__(self, first: Any, last: Any):
        self.first = first
        self.last = last
        super().__init__(
            "end point of the last segment must be the start point of the first "
            f"segment: first={first} last={last}"
        )


def _fmt(points: Sequence[Any]) -> str:
    return "[" + ", ".join(str(p) for p in points) + "]"
