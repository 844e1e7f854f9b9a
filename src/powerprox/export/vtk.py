"""
Debug export to legacy ASCII VTK (POLYDATA), viewable in ParaView.

Writes, per suburb, the catchment as one polygon and its power lines as polylines,
plus circles of fixed radii around the queried address for visual scale.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterable, Sequence

from powerprox.catalog.loader import SuburbData
from powerprox.geometry.basic import Point
from powerprox.geometry.polygon import Polygon
from powerprox.geometry.polyline import PolyLine

logger = logging.getLogger(__name__)

_HEADER = "# vtk DataFile Version 1.0\n2D Unstructured Grid of Linear Triangles\nASCII\n\nDATASET POLYDATA\n"


def _points_block(points: Sequence[Point]) -> list[str]:
    out = [f"POINTS {len(points)} float\n"]
    out.extend(f"{p.x}  {p.y}  0.0\n" for p in points)
    out.append("\n")
    return out


def catchment_to_vtk(polygon: Polygon) -> str:
    vertices = polygon.get_vertices()
    parts = [_HEADER, *_points_block(vertices)]
    # Closed cell: every vertex index, then the first one again.
    parts.append(f"POLYGONS 1 {len(vertices) + 2}\n")
    parts.append(f"{len(vertices) + 1}  " + "".join(f"{i}  " for i in range(len(vertices))) + "0\n")
    return "".join(parts)


def high_voltages_to_vtk(lines: Sequence[PolyLine]) -> str:
    vertices = [line.get_vertices() for line in lines]
    flat = [p for vs in vertices for p in vs]
    parts = [_HEADER, *_points_block(flat)]
    parts.append(f"LINES {len(vertices)} {len(flat) + len(vertices)}\n")
    offset = 0
    for vs in vertices:
        parts.append(f"{len(vs)}  " + "".join(f"{offset + i}  " for i in range(len(vs))) + "\n")
        offset += len(vs)
    parts.append("\n")
    return "".join(parts)


def circle_points(origin: Point, radius: float, samples: int = 64) -> list[Point]:
    return [
        Point(
            x=origin.x + math.cos(2.0 * math.pi * i / samples) * radius,
            y=origin.y + math.sin(2.0 * math.pi * i / samples) * radius,
        )
        for i in range(samples)
    ]


def circle_to_vtk(origin: Point, radius: float, samples: int = 64) -> str:
    return catchment_to_vtk(Polygon.from_points(circle_points(origin, radius, samples)))


def export_suburb_to_vtk(
    directory: Path,
    data: Iterable[SuburbData],
    point: Point,
    *,
    radii_m: Sequence[float] = (100.0, 200.0),
    samples: int = 64,
) -> list[Path]:
    """Write every suburb plus address circles into `directory`; returns written paths."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for suburb in data:
        path = directory / f"{suburb.name}_catchment.vtk"
        path.write_text(catchment_to_vtk(suburb.catchment), encoding="utf-8")
        written.append(path)
        if suburb.high_voltage_lines:
            path = directory / f"{suburb.name}_high_voltage.vtk"
            path.write_text(high_voltages_to_vtk(suburb.polylines), encoding="utf-8")
            written.append(path)
    for radius in radii_m:
        path = directory / f"address_{radius:g}m.vtk"
        path.write_text(circle_to_vtk(point, radius, samples), encoding="utf-8")
        written.append(path)
    logger.info("Wrote %d VTK files to %s", len(written), directory)
    return written
