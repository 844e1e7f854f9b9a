"""
Address -> power-line proximity report.

Flow:
1. Geocode the address and project it onto the local plane.
2. Keep only suburbs within `region.search_radius_m` of the address.
3. Collect their power-line runs, de-duplicating runs shared between suburbs.
4. Per voltage, take the minimum distance over every run.
5. Report a voltage only when it is strictly closer than every higher voltage
   (a far-away 33kV line is irrelevant next to a nearby 132kV one).
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Protocol, Sequence

from powerprox.catalog.loader import SuburbData
from powerprox.config.settings import Settings
from powerprox.core.cache import SECONDS_PER_DAY, FileCache
from powerprox.core.env import resolve_project_path
from powerprox.domain.models import Address, ProximityReport, SelectSuburbResponse, SuburbInfo, VoltageDistance
from powerprox.geometry.basic import Point
from powerprox.geometry.projection import GeodeticProjector, GeoPosition
from powerprox.ingestion.errors import DataFormatError
from powerprox.ingestion.parsing import (
    HighVoltageLine,
    get_all_suburbs,
    parse_address,
    parse_high_voltage_lines,
)

logger = logging.getLogger(__name__)

LinesByVoltage = dict[int | None, list[HighVoltageLine]]


class AddressResolver(Protocol):
    def find_address(self, address: str) -> Address: ...


class SuburbDataSource(Protocol):
    def get_raw_suburb_map(self) -> dict[str, list[str]]: ...

    def select_suburb(self, suburb_id: int, suburb_name: str) -> SelectSuburbResponse: ...


def build_projector(settings: Settings) -> GeodeticProjector:
    """Projector anchored at the configured region origin."""
    origin = GeoPosition.from_degrees(settings.region.origin_lat_deg, settings.region.origin_lon_deg)
    return GeodeticProjector(origin)


def filter_suburbs(
    place: Point,
    suburbs: Iterable[SuburbInfo],
    range_m: float,
    projector: GeodeticProjector,
) -> list[SuburbInfo]:
    """Suburbs whose reference location is strictly within `range_m` of `place`."""
    return [
        s
        for s in suburbs
        if projector.project_degrees(s.latitude_deg, s.longitude_deg).distance_to(place) < range_m
    ]


def aggregate_high_voltage_lines(
    acc: LinesByVoltage,
    lines_by_voltage: Mapping[int | None, Sequence[HighVoltageLine]],
    seen_ids: set[str],
) -> LinesByVoltage:
    """Merge `lines_by_voltage` into `acc`, skipping line ids already in `seen_ids`."""
    for voltage, lines in lines_by_voltage.items():
        fresh: list[HighVoltageLine] = []
        for line in lines:
            if line.id in seen_ids:
                continue
            seen_ids.add(line.id)
            fresh.append(line)
        acc.setdefault(voltage, []).extend(fresh)
    return acc


def min_distance_by_voltage(
    lines_by_voltage: Mapping[int | None, Sequence[HighVoltageLine]],
    place: Point,
    *,
    workers: int | None = None,
) -> dict[int | None, float]:
    """Minimum distance from `place` to any run of each voltage (empty groups are dropped)."""
    distances: dict[int | None, float] = {}
    for voltage, lines in lines_by_voltage.items():
        if not lines:
            continue
        best = math.inf
        for hv in lines:
            best = min(best, hv.line.distance_to(place, workers=workers))
        distances[voltage] = best
    return distances


def summarize(distances: Mapping[int | None, float]) -> list[VoltageDistance]:
    """Walk voltages from highest to lowest, keeping those closer than all higher ones.

    Runs with an unknown voltage can not be ranked and are always reported, last.
    """
    reported: list[VoltageDistance] = []
    closest = math.inf
    for voltage in sorted((v for v in distances if v is not None), reverse=True):
        distance_m = distances[voltage]
        if distance_m < closest:
            closest = distance_m
            reported.append(VoltageDistance(voltage_kv=voltage, distance_m=distance_m))
    if None in distances:
        reported.append(VoltageDistance(voltage_kv=None, distance_m=distances[None]))
    return reported


def _to_report(
    address: Address,
    postcode: int | None,
    place: Point,
    source: str,
    suburb_names: list[str],
    distances: Mapping[int | None, float],
) -> ProximityReport:
    ordered = sorted(distances.items(), key=lambda kv: (kv[0] is None, -(kv[0] or 0)))
    return ProximityReport(
        address=address,
        postcode=postcode,
        x_m=place.x,
        y_m=place.y,
        source=source,
        suburbs_searched=suburb_names,
        distances=[VoltageDistance(voltage_kv=v, distance_m=d) for v, d in ordered],
        reported=summarize(distances),
    )


def _locate(address: Address, projector: GeodeticProjector) -> tuple[int | None, Point]:
    """Postcode (None when the geocoder omits it) and projected location."""
    try:
        return parse_address(address, projector)
    except DataFormatError:
        logger.warning("No postcode found in '%s'", address.full_address)
        return None, projector.project_degrees(address.latitude_deg, address.longitude_deg)


def check_address(
    address_text: str,
    *,
    settings: Settings,
    resolver: AddressResolver,
    data_source: SuburbDataSource,
    projector: GeodeticProjector | None = None,
    range_m: float | None = None,
    workers: int | None = None,
) -> tuple[ProximityReport, Point]:
    """Full online check: geocoder + property data service."""
    projector = projector or build_projector(settings)
    range_m = float(range_m if range_m is not None else settings.region.search_radius_m)
    workers = workers if workers is not None else settings.engine.workers

    address = resolver.find_address(address_text)
    postcode, place = _locate(address, projector)

    suburbs = get_all_suburbs(data_source.get_raw_suburb_map())
    nearby = filter_suburbs(place, suburbs, range_m, projector)
    names = [s.name for s in nearby]
    logger.debug("Suburbs within %.0fm: %s", range_m, names)

    seen_ids: set[str] = set()
    lines: LinesByVoltage = {}
    for suburb in nearby:
        raw = data_source.select_suburb(suburb.id, suburb.name)
        aggregate_high_voltage_lines(lines, parse_high_voltage_lines(raw, projector), seen_ids)
    logger.debug("Suburb info parsed (%d distinct lines)", len(seen_ids))

    distances = min_distance_by_voltage(lines, place, workers=workers)
    logger.debug("Distances found %s", distances)
    return _to_report(address, postcode, place, "service", names, distances), place


def check_address_offline(
    address_text: str,
    *,
    settings: Settings,
    resolver: AddressResolver,
    suburb_data: Sequence[SuburbData],
    projector: GeodeticProjector | None = None,
    range_m: float | None = None,
    workers: int | None = None,
) -> tuple[ProximityReport, Point]:
    """Check against an offline data file; suburbs are kept when any catchment vertex is in range."""
    projector = projector or build_projector(settings)
    range_m = float(range_m if range_m is not None else settings.region.search_radius_m)
    workers = workers if workers is not None else settings.engine.workers

    address = resolver.find_address(address_text)
    postcode, place = _locate(address, projector)

    nearby = [s for s in suburb_data if s.nearest_vertex_distance(place) < range_m]
    seen_ids: set[str] = set()
    lines: LinesByVoltage = {}
    for suburb in nearby:
        grouped: LinesByVoltage = {}
        for hv in suburb.high_voltage_lines:
            grouped.setdefault(hv.voltage_kv, []).append(hv)
        aggregate_high_voltage_lines(lines, grouped, seen_ids)

    distances = min_distance_by_voltage(lines, place, workers=workers)
    logger.debug("Distances found %s", distances)
    return _to_report(address, postcode, place, "catalog", [s.name for s in nearby], distances), place


def build_cache(settings: Settings, *, enabled: bool | None = None) -> FileCache:
    """File cache configured from settings; `enabled` overrides the config flag."""
    return FileCache(
        resolve_project_path(settings.cache.path),
        enabled=settings.cache.enabled if enabled is None else enabled,
        ttl_seconds=settings.cache.ttl_days * SECONDS_PER_DAY,
        version=settings.cache.version,
    )
