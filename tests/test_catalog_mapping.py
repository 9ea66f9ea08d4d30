import json
from datetime import datetime

import pytest

from placecore.catalog.loader import find_place, load_places
from placecore.catalog.mapping import location_from_record, place_from_record, weekly_from_records
from placecore.hours.evaluator import evaluate


def _intervals(weekly, weekday):
    day = weekly.day(weekday)
    return [(str(it.start), str(it.end)) for it in day.intervals] if day else None


@pytest.mark.parametrize(
    "record",
    [
        {"lat": 28.6, "lng": 77.2},
        {"latitude": "28.6", "longitude": "77.2"},
        {"coord_lat": 28.6, "coord_lng": 77.2},
        {"locationLat": 28.6, "locationLng": 77.2},
        {"location": {"lat": 28.6, "lon": 77.2}},
    ],
)
def test_location_aliases_resolve_to_one_shape(record):
    loc = location_from_record(record)
    assert loc is not None
    assert (loc.lat, loc.lon) == (28.6, 77.2)


def test_location_missing_or_out_of_range_is_none():
    assert location_from_record({"lat": 28.6}) is None
    assert location_from_record({"lat": "north", "lng": 77.2}) is None
    assert location_from_record({"lat": 128.6, "lng": 77.2}) is None
    assert location_from_record({"lat": True, "lng": 77.2}) is None


def test_weekly_records_drop_bad_weekdays_and_times():
    weekly = weekly_from_records(
        [
            {"weekday": 1, "intervals": [{"start": "09:00", "end": "17:00"}, {"start": "9am", "end": "5pm"}]},
            {"weekday": "2", "intervals": [{"start": "10:00", "end": "12:00"}]},
            {"weekday": 8, "intervals": [{"start": "10:00", "end": "12:00"}]},
            {"weekday": None},
            {"weekday": "--5", "intervals": [{"start": "10:00", "end": "12:00"}]},
            {"weekday": "²", "intervals": [{"start": "10:00", "end": "12:00"}]},
            "garbage",
            {"weekday": 7, "closed": True},
        ]
    )
    assert [d.weekday for d in weekly.days] == [1, 2, 7]
    assert _intervals(weekly, 1) == [("09:00", "17:00")]
    assert _intervals(weekly, 2) == [("10:00", "12:00")]
    assert weekly.day(7).closed is True
    assert weekly.day(7).intervals == []


def test_weekly_records_drop_malformed_weekday_strings():
    for weekday in ("--5", "²", "3.5", ""):
        weekly = weekly_from_records([{"weekday": weekday, "intervals": [{"start": "10:00", "end": "12:00"}]}])
        assert weekly.is_empty


def test_interval_starting_at_end_of_day_is_dropped():
    weekly = weekly_from_records(
        [
            {"weekday": 1, "intervals": [{"start": "24:00", "end": "24:00"}, {"start": "24:00", "end": "03:00"}]},
        ]
    )

    assert _intervals(weekly, 1) == []
    assert weekly.day(2) is None


def test_overnight_interval_is_split_across_midnight():
    weekly = weekly_from_records([{"weekday": 7, "intervals": [{"start": "22:00", "end": "02:00"}]}])

    assert _intervals(weekly, 7) == [("22:00", "24:00")]
    assert _intervals(weekly, 1) == [("00:00", "02:00")]
    assert weekly.day(1).closed is False

    # Sunday 2026-01-11 23:30 is open, Monday 01:30 is still open, 02:00 is closed.
    assert evaluate(weekly, datetime(2026, 1, 11, 23, 30)).is_open is True
    assert evaluate(weekly, datetime(2026, 1, 12, 1, 30)).is_open is True
    assert evaluate(weekly, datetime(2026, 1, 12, 2, 0)).is_open is False


def test_overnight_split_merges_into_existing_next_day():
    weekly = weekly_from_records(
        [
            {"weekday": 5, "intervals": [{"start": "19:00", "end": "02:00"}]},
            {"weekday": 6, "intervals": [{"start": "10:00", "end": "14:00"}]},
            {"weekday": 7, "intervals": [{"start": "19:00", "end": "00:00"}]},
        ]
    )
    assert _intervals(weekly, 5) == [("19:00", "24:00")]
    assert _intervals(weekly, 6) == [("00:00", "02:00"), ("10:00", "14:00")]
    # A midnight end carries nothing over to Monday.
    assert _intervals(weekly, 7) == [("19:00", "24:00")]
    assert weekly.day(1) is None


def test_place_from_record_resolves_aliases():
    place = place_from_record(
        {
            "place_id": 42,
            "title": "  Night Market ",
            "latitude": "28.6562",
            "longitude": "77.2410",
            "tz": "Asia/Kolkata",
            "categories": ["Market", "outdoor", "market", ""],
            "weeklyHours": [{"weekday": 5, "intervals": [{"start": "19:00", "end": "23:00"}]}],
            "hours": "Fri 7pm-11pm",
        }
    )
    assert place.id == "42"
    assert place.name == "Night Market"
    assert place.location.lat == pytest.approx(28.6562)
    assert place.timezone == "Asia/Kolkata"
    assert place.tags == ["market", "outdoor"]
    assert _intervals(place.weekly_hours, 5) == [("19:00", "23:00")]
    assert place.opening_hours_text == "Fri 7pm-11pm"


def test_place_from_record_ignores_unknown_timezone():
    place = place_from_record({"id": "x", "name": "X", "timezone": "Mars/Olympus"})
    assert place.timezone is None
    assert place.weekly_hours.is_empty


def test_place_from_record_requires_id_and_name():
    with pytest.raises(ValueError, match="missing an id"):
        place_from_record({"name": "No id"})
    with pytest.raises(ValueError, match="missing a name"):
        place_from_record({"id": "abc"})


def test_load_places_maps_every_record(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(
        json.dumps(
            [
                {"id": "a", "name": "A", "lat": 1, "lng": 2},
                {"id": "b", "name": "B", "openingHours": "By appointment"},
            ]
        ),
        encoding="utf-8",
    )
    places = load_places(path)
    assert [p.id for p in places] == ["a", "b"]
    assert find_place(places, "b").opening_hours_text == "By appointment"
    assert find_place(places, "missing") is None


def test_load_places_reports_bad_record_index(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(json.dumps([{"id": "a", "name": "A"}, {"id": "b"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="record #1"):
        load_places(path)


def test_load_places_rejects_non_list_root(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(json.dumps({"places": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="expected a list"):
        load_places(path)


def test_bundled_catalog_loads():
    places = load_places("data/catalogs/places.json")
    assert {p.id for p in places} == {"cafe-aurora", "night-market", "gateway-museum"}
    market = find_place(places, "night-market")
    assert _intervals(market.weekly_hours, 7) == [("00:00", "02:00")]
