import math

from placecore.config.settings import Settings
from placecore.core.geo import GeoPoint
from placecore.distance.format import format_distance
from placecore.distance.proximity import (
    distance_range,
    filter_by_radius,
    find_closest,
    group_by_distance_ranges,
    measure,
    nearby_rows,
    sort_by_proximity,
)
from placecore.domain.models import Place, PlaceLocation

ORIGIN = GeoPoint(lat=28.6139, lon=77.2090)


def _place(pid: str, lat: float | None = None, lon: float | None = None) -> Place:
    location = PlaceLocation(lat=lat, lon=lon) if lat is not None and lon is not None else None
    return Place(id=pid, name=pid.title(), location=location)


def test_metric_threshold_between_meters_and_kilometers():
    assert format_distance(999, "metric", 1, 1) == "999 m"
    assert format_distance(1000, "metric", 1, 1) == "1.0 km"
    assert format_distance(12_340, "metric", 2, 1) == "12.34 km"
    assert format_distance(0, "metric", 1, 1) == "0 m"


def test_metric_meters_round_half_up():
    assert format_distance(10.5, "metric", 1, 1) == "11 m"
    assert format_distance(10.49, "metric", 1, 1) == "10 m"


def test_imperial_threshold_between_feet_and_miles():
    # 150 m is about 0.093 mi, below the 0.1 mi cut-over.
    assert format_distance(150, "imperial", 1, 1) == "492 ft"
    assert format_distance(200, "imperial", 1, 1) == "0.1 mi"
    assert format_distance(16_093.44, "imperial", 1, 2) == "10.00 mi"


def test_suffix_is_appended():
    assert format_distance(850, "metric", suffix="away") == "850 m away"
    assert format_distance(2_300, "metric", suffix="away") == "2.3 km away"


def test_non_finite_meters_do_not_raise():
    assert format_distance(math.nan, "metric").endswith("km")
    assert format_distance(math.inf, "imperial").endswith("mi")


def test_measure_uses_configured_unit_and_suffix(monkeypatch):
    # Built directly so PLACECORE_* variables in the environment cannot change the defaults.
    monkeypatch.setenv("PLACECORE_DISTANCE_UNIT", "imperial")
    settings = Settings()
    result = measure(ORIGIN, GeoPoint(lat=19.0760, lon=72.8777), settings=settings)
    assert result.unit == "metric"
    assert result.text.endswith("km away")
    assert 1_140_000 < result.meters < 1_155_000

    imperial = measure(ORIGIN, ORIGIN, settings=settings, unit="imperial")
    assert imperial.text == "0 ft away"


def test_proximity_helpers_skip_places_without_location():
    places = [
        _place("far", 28.70, 77.30),
        _place("unknown"),
        _place("near", 28.6140, 77.2091),
        _place("mid", 28.63, 77.22),
    ]

    ordered = [r.place.id for r in sort_by_proximity(ORIGIN, places)]
    assert ordered == ["near", "mid", "far"]

    within = [r.place.id for r in filter_by_radius(ORIGIN, places, 5_000)]
    assert within == ["near", "mid"]

    closest = find_closest(ORIGIN, places)
    assert closest is not None and closest.place.id == "near"
    assert find_closest(ORIGIN, [_place("unknown")]) is None


def test_group_by_distance_ranges():
    places = [
        _place("near", 28.6140, 77.2091),
        _place("mid", 28.65, 77.25),
        _place("far", 19.0760, 72.8777),
    ]
    groups = group_by_distance_ranges(ORIGIN, places, nearby_m=1_000, moderate_m=10_000)
    assert [r.place.id for r in groups["nearby"]] == ["near"]
    assert [r.place.id for r in groups["moderate"]] == ["mid"]
    assert [r.place.id for r in groups["far"]] == ["far"]


def test_distance_range_boundaries_are_inclusive():
    assert distance_range(1_000) == "nearby"
    assert distance_range(1_000.5) == "moderate"
    assert distance_range(10_000) == "moderate"
    assert distance_range(10_001) == "far"
    assert distance_range(300, nearby_m=200, moderate_m=500) == "moderate"


def test_nearby_rows_apply_unit_suffix_and_tags():
    places = [
        Place(id="cafe", name="Cafe", location=PlaceLocation(lat=28.6140, lon=77.2091), tags=["coffee"]),
        _place("far", 19.0760, 72.8777),
    ]

    rows = nearby_rows(ORIGIN, places, settings=Settings(), radius_m=1_000, unit="imperial")

    assert [r["id"] for r in rows] == ["cafe"]
    assert rows[0]["tags"] == ["coffee"]
    assert rows[0]["distance"].endswith("ft away")
    assert rows[0]["range"] == "nearby"
