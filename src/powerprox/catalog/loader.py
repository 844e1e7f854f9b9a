"""
Offline suburb data loader.

The data file is a JSON object keyed by suburb name:

    {
      "Rosebery": {
        "suburb_catchment": [[lon, lat], ...],
        "high_voltage_lines": [[[lon, lat, elevation], ...], ...],
        "line_voltages_kv": [132, 33]
      }
    }

`line_voltages_kv` is optional and aligned with `high_voltage_lines`; lines without
an entry have an unknown voltage. Raw records are validated with Pydantic, then
projected and assembled into engine shapes. A catchment that fails validation aborts
loading; a malformed power-line run is skipped.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

from powerprox.core.env import resolve_project_path
from powerprox.geometry.basic import Point
from powerprox.geometry.errors import GeometryError
from powerprox.geometry.polygon import Polygon
from powerprox.geometry.polyline import PolyLine
from powerprox.geometry.projection import GeodeticProjector
from powerprox.ingestion.errors import DataFormatError
from powerprox.ingestion.parsing import HighVoltageLine, project_lon_lat

logger = logging.getLogger(__name__)


class RawSuburbData(BaseModel):
    suburb_catchment: list[list[float]]
    high_voltage_lines: list[list[list[float]]] = Field(default_factory=list)
    line_voltages_kv: list[int] = Field(default_factory=list)


_RAW_ADAPTER = TypeAdapter(dict[str, RawSuburbData])


@dataclass(frozen=True)
class SuburbData:
    name: str
    catchment: Polygon
    high_voltage_lines: list[HighVoltageLine]

    @property
    def polylines(self) -> list[PolyLine]:
        return [hv.line for hv in self.high_voltage_lines]

    def nearest_vertex_distance(self, point: Point) -> float:
        return min(v.distance_to(point) for v in self.catchment.get_vertices())


def parse_suburb_data(name: str, raw: RawSuburbData, projector: GeodeticProjector) -> SuburbData:
    catchment = Polygon.from_points(project_lon_lat(raw.suburb_catchment, projector))
    lines: list[HighVoltageLine] = []
    for idx, raw_line in enumerate(raw.high_voltage_lines):
        try:
            polyline = PolyLine(project_lon_lat(raw_line, projector))
        except GeometryError as exc:
            logger.warning("Skipping malformed power line #%d in %s: %s", idx, name, exc)
            continue
        voltage = raw.line_voltages_kv[idx] if idx < len(raw.line_voltages_kv) else None
        lines.append(HighVoltageLine(id=f"{name}#{idx}", voltage_kv=voltage, line=polyline))
    return SuburbData(name=name, catchment=catchment, high_voltage_lines=lines)


def load_suburb_data(path: str | Path, projector: GeodeticProjector) -> list[SuburbData]:
    """Load and project every suburb in a data file."""
    resolved = resolve_project_path(path)
    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise DataFormatError(f"suburb data file {resolved} is not valid JSON: {exc}") from exc
    raw = _RAW_ADAPTER.validate_python(payload)
    data = [parse_suburb_data(name, record, projector) for name, record in raw.items()]
    logger.debug("Loaded %d suburbs from %s", len(data), resolved)
    return data
