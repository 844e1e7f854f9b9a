"""
Closed polygon (e.g. a suburb catchment boundary).
"""

from __future__ import annotations

from typing import Iterable, Sequence

from powerprox.geometry.basic import TOLERANCE, Point, distance
from powerprox.geometry.errors import (
    DegenerateShape,
    DiscontinuousChain,
    InsufficientPoints,
    UnclosedLoop,
)
from powerprox.geometry.segment import LineSegment


class Polygon:
    """An ordered loop of segments; each end meets the next start, last meets first."""

    __slots__ = ("_segments",)

    def __init__(self, segments: Iterable[LineSegment]):
        segments = tuple(segments)
        if len(segments) < 3:
            raise InsufficientPoints("polygon", 3, [s.a for s in segments])
        _check_loop(segments)
        self._segments = segments

    @classmethod
    def from_segments(cls, segments: Iterable[LineSegment]) -> Polygon:
        return cls(segments)

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> Polygon:
        """Build from ordered vertices (at least 3 distinct), closing the loop if needed."""
        points = list(points)
        if len(points) < 3:
            raise InsufficientPoints("polygon", 3, points)
        if len(points) == 3 and distance(points[0], points[-1]) < TOLERANCE:
            raise DegenerateShape(points)
        loop = points[:-1] if distance(points[-1], points[0]) < TOLERANCE else points
        if _count_distinct(loop) < 3:
            raise InsufficientPoints("polygon", 3, points)

        segments = [LineSegment(points[i - 1], points[i]) for i in range(1, len(points))]
        if distance(points[-1], points[0]) >= TOLERANCE:
            segments.append(LineSegment(points[-1], points[0]))
        return cls(segments)

    @property
    def segments(self) -> tuple[LineSegment, ...]:
        return self._segments

    def __len__(self) -> int:
        return len(self._segments)

    def __str__(self) -> str:
        return "[" + ", ".join(str(s) for s in self._segments) + "]"

    def get_vertices(self) -> list[Point]:
        """Distinct loop vertices in order (the closing vertex is not repeated)."""
        return [s.a for s in self._segments]


def _count_distinct(points: Sequence[Point]) -> int:
    distinct: list[Point] = []
    for p in points:
        if all(distance(p, q) >= TOLERANCE for q in distinct):
            distinct.append(p)
    return len(distinct)


def _check_loop(segments: Sequence[LineSegment]) -> None:
    for idx in range(1, len(segments)):
        previous = segments[idx - 1]
        current = segments[idx]
        if distance(previous.b, current.a) > TOLERANCE:
            raise DiscontinuousChain(idx, previous, current)
    if distance(segments[0].a, segments[-1].b) > TOLERANCE:
        raise UnclosedLoop(segments[0], segments[-1])
