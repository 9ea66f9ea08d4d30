from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from placecore.config.settings import Settings
from placecore.core.geo import GeoPoint, haversine_m
from placecore.distance.format import format_distance
from placecore.domain.models import DistanceResult, Place, UnitSystem


@dataclass(frozen=True)
class ProximityResult:
    place: Place
    meters: float


def measure(a: GeoPoint, b: GeoPoint, *, settings: Settings, unit: UnitSystem | None = None) -> DistanceResult:
    """Distance between two points, formatted with the configured unit/precision/suffix."""
    cfg = settings.distance
    use_unit = unit or cfg.unit
    meters = haversine_m(a, b)
    text = format_distance(
        meters,
        use_unit,
        cfg.precision_km,
        cfg.precision_mi,
        suffix=cfg.label_suffix or None,
    )
    return DistanceResult(meters=meters, unit=use_unit, text=text)


def calculate_distances(origin: GeoPoint, places: list[Place]) -> list[ProximityResult]:
    """Distances from `origin` to every place that has a location (others are skipped)."""
    out: list[ProximityResult] = []
    for p in places:
        if p.location is None:
            continue
        out.append(ProximityResult(place=p, meters=haversine_m(origin, p.location.to_point())))
    return out


def sort_by_proximity(origin: GeoPoint, places: list[Place]) -> list[ProximityResult]:
    results = calculate_distances(origin, places)
    results.sort(key=lambda r: r.meters)
    return results


def filter_by_radius(origin: GeoPoint, places: list[Place], radius_m: float) -> list[ProximityResult]:
    """Places within `radius_m` (inclusive), closest first."""
    return [r for r in sort_by_proximity(origin, places) if r.meters <= radius_m]


def find_closest(origin: GeoPoint, places: list[Place]) -> ProximityResult | None:
    results = sort_by_proximity(origin, places)
    return results[0] if results else None


def distance_range(meters: float, *, nearby_m: float = 1_000, moderate_m: float = 10_000) -> str:
    if meters <= nearby_m:
        return "nearby"
    if meters <= moderate_m:
        return "moderate"
    return "far"


def group_by_distance_ranges(
    origin: GeoPoint,
    places: list[Place],
    *,
    nearby_m: float = 1_000,
    moderate_m: float = 10_000,
) -> dict[str, list[ProximityResult]]:
    """Bucket places into `nearby` (<= nearby_m), `moderate` (<= moderate_m) and `far`."""
    groups: dict[str, list[ProximityResult]] = {"nearby": [], "moderate": [], "far": []}
    for r in sort_by_proximity(origin, places):
        groups[distance_range(r.meters, nearby_m=nearby_m, moderate_m=moderate_m)].append(r)
    return groups


def nearby_rows(
    origin: GeoPoint,
    places: list[Place],
    *,
    settings: Settings,
    radius_m: float | None = None,
    unit: UnitSystem | None = None,
) -> list[dict[str, Any]]:
    """Display rows for places within `radius_m` (default from settings), closest first.

    Shared by the API and CLI so both render the same unit, precision and suffix.
    """
    cfg = settings.distance
    radius = radius_m if radius_m is not None else cfg.default_radius_m
    use_unit = unit or cfg.unit
    return [
        {
            "id": r.place.id,
            "name": r.place.name,
            "tags": list(r.place.tags),
            "meters": round(r.meters, 1),
            "distance": format_distance(
                r.meters, use_unit, cfg.precision_km, cfg.precision_mi, suffix=cfg.label_suffix or None
            ),
            "range": distance_range(r.meters, nearby_m=cfg.nearby_m, moderate_m=cfg.moderate_m),
        }
        for r in filter_by_radius(origin, places, radius)
    ]
