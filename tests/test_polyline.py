import pytest

from powerprox.geometry.basic import Point
from powerprox.geometry.errors import InsufficientPoints
from powerprox.geometry.polyline import PolyLine

L_SHAPE = PolyLine([Point(0.0, 1.0), Point(0.0, 0.0), Point(1.0, 0.0)])


def test_distance_to_point():
    assert L_SHAPE.distance_to(Point(-0.5, 0.5)) == pytest.approx(0.5, abs=1e-10)


def test_one_point_fails():
    with pytest.raises(InsufficientPoints):
        PolyLine([Point(0.0, 1.0)])


def test_two_points_succeeds():
    line = PolyLine([Point(0.0, 1.0), Point(0.0, 0.0)])
    assert len(line) == 1


def test_get_vertices():
    assert L_SHAPE.get_vertices() == [Point(0.0, 1.0), Point(0.0, 0.0), Point(1.0, 0.0)]


def test_distance_is_idempotent():
    p = Point(3.7, -2.2)
    first = L_SHAPE.distance_to(p)
    assert all(L_SHAPE.distance_to(p) == first for _ in range(5))


def test_distance_takes_minimum_over_all_segments():
    zigzag = PolyLine([Point(float(i), float(i % 2) * 10.0) for i in range(50)])
    # Last segment's endpoint is the only nearby feature.
    assert zigzag.distance_to(Point(49.0, 13.0)) == pytest.approx(3.0)


@pytest.mark.parametrize("workers", [2, 3, 8, 100])
def test_parallel_matches_sequential(workers):
    line = PolyLine([Point(float(i), (i * 7919 % 13) - 6.0) for i in range(200)])
    for p in (Point(-5.0, 3.0), Point(100.5, 40.0), Point(57.3, -1.1)):
        assert line.distance_to(p, workers=workers) == line.distance_to(p)
