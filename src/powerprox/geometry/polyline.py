"""
Open polyline (e.g. one physical power-line run).
"""

from __future__ import annotations

import math
from typing import Sequence

from powerprox.geometry.basic import Point
from powerprox.geometry.errors import InsufficientPoints
from powerprox.geometry.parallel import parallel_min
from powerprox.geometry.segment import LineSegment


class PolyLine:
    """An ordered open chain of at least one segment."""

    __slots__ = ("_segments",)

    def __init__(self, points: Sequence[Point]):
        points = list(points)
        if len(points) < 2:
            raise InsufficientPoints("polyline", 2, points)
        self._segments = tuple(LineSegment(points[i], points[i + 1]) for i in range(len(points) - 1))

    @property
    def segments(self) -> tuple[LineSegment, ...]:
        return self._segments

    def __len__(self) -> int:
        return len(self._segments)

    def __str__(self) -> str:
        return "[" + ", ".join(str(s) for s in self._segments) + "]"

    def get_vertices(self) -> list[Point]:
        return [self._segments[0].a, *(s.b for s in self._segments)]

    def close_to(self, other: PolyLine, delta: float) -> bool:
        if len(self) != len(other):
            return False
        return all(s.close_to(o, delta) for s, o in zip(self._segments, other.segments))

    def distance_to(self, point: Point, *, workers: int | None = None) -> float:
        """Minimum distance from `point` to any segment.

        Every segment is evaluated. With `workers` > 1 segments are spread over a
        thread pool; the result is identical to the sequential scan.
        """
        segments = self._segments
        if workers is None or workers <= 1:
            best = math.inf
            for segment in segments:
                best = min(best, segment.distance_to_point(point))
            return best
        return parallel_min(len(segments), lambda i: segments[i].distance_to_point(point), workers=workers)
