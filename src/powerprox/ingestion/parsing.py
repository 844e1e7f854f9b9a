"""
Turn upstream payloads into engine inputs.

Coordinates arrive as [longitude, latitude(, elevation)] in degrees; they are
projected with the configured `GeodeticProjector` before any shape is built. A
power-line run that fails geometry validation is skipped (with a warning) so one bad
feature does not sink the whole suburb.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Sequence

from powerprox.domain.models import Address, SelectSuburbResponse, SuburbInfo
from powerprox.geometry.basic import Point
from powerprox.geometry.errors import GeometryError
from powerprox.geometry.polyline import PolyLine
from powerprox.geometry.projection import GeodeticProjector
from powerprox.ingestion.errors import DataFormatError

logger = logging.getLogger(__name__)

_POSTCODE_RE = re.compile(r"(\d{4})[, ]+Australia")
_VOLTAGE_RE = re.compile(r"^\s*(\d+)kV\s*$")


@dataclass(frozen=True)
class HighVoltageLine:
    """One power-line run tagged with its id and voltage class (None when unknown)."""

    id: str
    voltage_kv: int | None
    line: PolyLine


def _parse_int(value: str, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DataFormatError(f"failed to parse {what}, expect an integer but got '{value}'") from exc


def get_all_suburbs(raw_suburb_map: Mapping[str, Sequence[str]]) -> list[SuburbInfo]:
    """Parse every suburb entry ([name, postcode, lat, lon]) into `SuburbInfo`."""
    suburbs: list[SuburbInfo] = []
    for code_str, info in raw_suburb_map.items():
        if len(info) != 4:
            raise DataFormatError(f"suburb '{code_str}' must have 4 fields, got {list(info)}")
        name, postcode_str, lat_str, lon_str = info
        try:
            lat = float(lat_str)
            lon = float(lon_str)
        except ValueError as exc:
            raise DataFormatError(f"failed to parse location of suburb '{name}': {lat_str}, {lon_str}") from exc
        suburbs.append(
            SuburbInfo(
                id=_parse_int(code_str, "code in raw_suburb_map"),
                name=name,
                postcode=None if postcode_str == "None" else _parse_int(postcode_str, "suburb_postcode"),
                latitude_deg=lat,
                longitude_deg=lon,
            )
        )
    return suburbs


def parse_postcode(full_address: str) -> int:
    match = _POSTCODE_RE.search(full_address)
    if not match:
        raise DataFormatError(f"failed to capture post code from the address '{full_address}'")
    return int(match.group(1))


def parse_address(address: Address, projector: GeodeticProjector) -> tuple[int, Point]:
    """Return (postcode, projected location) for a geocoded address."""
    postcode = parse_postcode(address.full_address)
    return postcode, projector.project_degrees(address.latitude_deg, address.longitude_deg)


def parse_voltage(label: str) -> int:
    """'132kV' -> 132. Case matters: the service always sends 'kV'."""
    match = _VOLTAGE_RE.match(label)
    if not match:
        raise DataFormatError(f"failed to parse voltage string '{label}'")
    return int(match.group(1))


def project_lon_lat(coordinates: Sequence[Sequence[float]], projector: GeodeticProjector) -> list[Point]:
    """Project [lon, lat, ...] pairs; anything after latitude (elevation) is dropped."""
    points: list[Point] = []
    for coord in coordinates:
        if len(coord) < 2:
            raise DataFormatError(f"coordinate needs at least [lon, lat], got {list(coord)}")
        points.append(projector.project_degrees(coord[1], coord[0]))
    return points


def parse_high_voltage_lines(
    raw: SelectSuburbResponse, projector: GeodeticProjector
) -> dict[int, list[HighVoltageLine]]:
    """Group a suburb's power-line runs by voltage."""
    by_voltage: dict[int, list[HighVoltageLine]] = {}
    for line_id, geometry in raw.selected_lat_lon.items():
        if geometry.type != "LineString":
            raise DataFormatError(f"only LineString is supported for lines, but got '{geometry.type}'")
        labels = raw.selected_popup_info.get(line_id)
        if labels is None:
            raise DataFormatError(f"can not find voltage for id='{line_id}'")
        if len(labels) != 1:
            raise DataFormatError(f"only 1 voltage should be in the map, but got {labels}")
        voltage = parse_voltage(labels[0])

        points = project_lon_lat(geometry.coordinates, projector)
        try:
            polyline = PolyLine(points)
        except GeometryError as exc:
            logger.warning("Skipping malformed power line id=%s: %s", line_id, exc)
            continue
        by_voltage.setdefault(voltage, []).append(
            HighVoltageLine(id=line_id, voltage_kv=voltage, line=polyline)
        )
    return by_voltage
