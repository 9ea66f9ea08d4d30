"""
placecore CLI entrypoint.

Quick local checks of the hours and distance helpers against the place catalog,
without running the API.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from placecore.catalog.loader import find_place, load_places
from placecore.config.settings import get_settings
from placecore.core.geo import GeoPoint
from placecore.core.logging import configure_logging
from placecore.core.time import now_in, parse_datetime
from placecore.distance.format import format_distance
from placecore.distance.proximity import measure, nearby_rows
from placecore.hours.labels import summarize_place


def _cmd_hours(args: argparse.Namespace) -> int:
    """Handle the `hours` subcommand."""
    settings = get_settings()
    places = load_places(args.catalog or settings.catalog.path)
    place = find_place(places, args.place_id)
    if place is None:
        print(f"Unknown place id: {args.place_id}", file=sys.stderr)
        return 2

    tz = place.timezone or settings.app.timezone
    now = parse_datetime(args.at, tz) if args.at else now_in(tz)
    summary = summarize_place(place, now, settings=settings)

    if args.json:
        payload = {"place_id": place.id, "name": place.name, "tags": place.tags, **summary}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    header = summary["status"]
    if summary["next_change"]:
        header = f"{header} · {summary['next_change']}"
    print(f"{place.name}: {header}")
    if summary["fallback_text"]:
        print(f"  {summary['fallback_text']}")
    for row in summary["rows"]:
        marker = "*" if row["is_today"] else " "
        print(f" {marker} {row['label']}  {row['text']}")
    return 0


def _cmd_distance(args: argparse.Namespace) -> int:
    """Handle the `distance` subcommand."""
    settings = get_settings()
    a = GeoPoint(lat=float(args.from_lat), lon=float(args.from_lon))
    b = GeoPoint(lat=float(args.to_lat), lon=float(args.to_lon))
    result = measure(a, b, settings=settings, unit=args.unit)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0
    print(result.text)
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    """Handle the `nearby` subcommand."""
    settings = get_settings()
    cfg = settings.distance
    places = load_places(args.catalog or settings.catalog.path)
    radius = float(args.radius_m) if args.radius_m is not None else cfg.default_radius_m
    origin = GeoPoint(lat=float(args.lat), lon=float(args.lon))
    rows = nearby_rows(origin, places, settings=settings, radius_m=radius, unit=args.unit)
    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
        return 0
    if not rows:
        print(f"No places within {format_distance(radius, args.unit or cfg.unit, cfg.precision_km, cfg.precision_mi)}.")
        return 0
    for i, row in enumerate(rows, start=1):
        print(f"{i:>2}. {row['name']} ({row['distance']})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the placecore CLI."""
    parser = argparse.ArgumentParser(prog="placecore")
    sub = parser.add_subparsers(dest="command", required=True)

    hrs = sub.add_parser("hours", help="Show open/closed status and weekly hours for a catalog place.")
    hrs.add_argument("--place-id", required=True)
    hrs.add_argument("--at", default=None, help="ISO datetime (e.g. 2026-01-05T10:00+05:30); default: now")
    hrs.add_argument("--catalog", default=None, help="Catalog JSON path (default from settings)")
    hrs.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    hrs.set_defaults(func=_cmd_hours)

    dist = sub.add_parser("distance", help="Great-circle distance between two points.")
    dist.add_argument("--from-lat", required=True, type=float)
    dist.add_argument("--from-lon", required=True, type=float)
    dist.add_argument("--to-lat", required=True, type=float)
    dist.add_argument("--to-lon", required=True, type=float)
    dist.add_argument("--unit", choices=["metric", "imperial"], default=None)
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance)

    near = sub.add_parser("nearby", help="List catalog places within a radius, closest first.")
    near.add_argument("--lat", required=True, type=float)
    near.add_argument("--lon", required=True, type=float)
    near.add_argument("--radius-m", type=float, default=None)
    near.add_argument("--unit", choices=["metric", "imperial"], default=None)
    near.add_argument("--catalog", default=None, help="Catalog JSON path (default from settings)")
    near.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    near.set_defaults(func=_cmd_nearby)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m placecore.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
