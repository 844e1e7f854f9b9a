"""
powerprox CLI entrypoint.

Looks up an address and reports how far it is from nearby high-voltage power lines.
All proximity logic lives in `powerprox.proximity.report`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from powerprox.catalog.loader import load_suburb_data
from powerprox.config.settings import get_settings
from powerprox.core.logging import configure_logging
from powerprox.domain.models import ProximityReport
from powerprox.export.vtk import export_suburb_to_vtk
from powerprox.geometry.errors import GeometryError
from powerprox.ingestion.errors import AddressNotFound, DataFormatError
from powerprox.ingestion.geocode_client import GeocodeClient
from powerprox.ingestion.property_data_client import PropertyDataClient
from powerprox.proximity.report import (
    build_cache,
    build_projector,
    check_address,
    check_address_offline,
)

logger = logging.getLogger(__name__)


def format_report(report: ProximityReport) -> list[str]:
    """Human-readable lines, one per reported voltage."""
    if not report.reported:
        return [f"No high voltage power line found near '{report.address.full_address}'"]
    lines = []
    for item in report.reported:
        label = f"{item.voltage_kv}kV" if item.voltage_kv is not None else "unclassified"
        lines.append(f"{item.distance_m:.0f}m away from {label} power line")
    return lines


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the `check` subcommand."""
    settings = get_settings()
    cache = build_cache(settings, enabled=False if args.no_cache else None)
    projector = build_projector(settings)
    resolver = GeocodeClient(settings, cache)

    if args.data_file:
        report, _ = check_address_offline(
            args.address,
            settings=settings,
            resolver=resolver,
            suburb_data=load_suburb_data(args.data_file, projector),
            projector=projector,
            range_m=args.range_m,
            workers=args.workers,
        )
    else:
        report, _ = check_address(
            args.address,
            settings=settings,
            resolver=resolver,
            data_source=PropertyDataClient(settings, cache),
            projector=projector,
            range_m=args.range_m,
            workers=args.workers,
        )

    if args.json:
        print(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2))
    else:
        for line in format_report(report):
            print(line)
    return 0


def _cmd_export_vtk(args: argparse.Namespace) -> int:
    """Handle the `export-vtk` subcommand."""
    settings = get_settings()
    cache = build_cache(settings, enabled=False if args.no_cache else None)
    projector = build_projector(settings)
    address = GeocodeClient(settings, cache).find_address(args.address)
    place = projector.project_degrees(address.latitude_deg, address.longitude_deg)
    written = export_suburb_to_vtk(
        Path(args.out),
        load_suburb_data(args.data_file, projector),
        place,
        radii_m=settings.export.circle_radii_m,
        samples=settings.export.circle_samples,
    )
    for path in written:
        print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the powerprox CLI."""
    parser = argparse.ArgumentParser(prog="powerprox")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--no-cache", action="store_true", help="Bypass the on-disk response cache")
    sub = parser.add_subparsers(dest="command", required=True)

    chk = sub.add_parser("check", help="Report distances from an address to nearby power lines.")
    chk.add_argument("-a", "--address", required=True, help="Free-text street address")
    chk.add_argument("--range-m", type=float, default=None, help="Suburb search radius (default from config)")
    chk.add_argument("--workers", type=int, default=None, help="Threads per polyline distance query")
    chk.add_argument(
        "--data-file", type=str, default=None, help="Offline suburb data JSON instead of the live service"
    )
    chk.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    chk.set_defaults(func=_cmd_check)

    exp = sub.add_parser("export-vtk", help="Write catchments, power lines and address circles as VTK files.")
    exp.add_argument("-a", "--address", required=True)
    exp.add_argument("--data-file", required=True, type=str)
    exp.add_argument("--out", required=True, type=str, help="Output directory")
    exp.set_defaults(func=_cmd_export_vtk)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m powerprox.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (GeometryError, DataFormatError, AddressNotFound, ValidationError, httpx.HTTPError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
