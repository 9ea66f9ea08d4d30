"""
Raw place record -> typed `Place` mapping.

Upstream place payloads are loosely shaped: coordinates may arrive as `lat`,
`latitude`, `coord_lat` or `locationLat`, numbers may be strings, and the
structured weekly schedule hides under one of several keys. This module is the
single place where those aliases are resolved. Everything downstream
(evaluator, distance helpers, API) consumes the validated `Place` model.

Leniency stays at this boundary:
- unparseable times and weekdays outside 1..7 are dropped (debug log)
- out-of-range coordinates give `location=None` (warning log)
- overnight spans (`22:00-02:00`) are split across the day boundary
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from placecore.domain.models import (
    END_OF_DAY,
    START_OF_DAY,
    DailyHours,
    HoursInterval,
    Place,
    PlaceLocation,
    WallClockTime,
    WeeklyHours,
)

logger = logging.getLogger(__name__)

LAT_KEYS = ("lat", "latitude", "coord_lat", "coordLat", "location_lat", "locationLat")
LON_KEYS = ("lng", "lon", "longitude", "coord_lng", "coordLng", "location_lng", "locationLng")
NESTED_LOCATION_KEYS = ("location", "coordinates", "coords", "position")
WEEKLY_KEYS = ("hoursWeekly", "hours_weekly", "openingHoursStructured", "weeklyHours")
HOURS_TEXT_KEYS = ("openingHours", "opening_hours", "hours", "hoursText")
TIMEZONE_KEYS = ("timezone", "timeZone", "tz")
ID_KEYS = ("id", "place_id", "placeId", "_id")
NAME_KEYS = ("name", "title", "displayName")
TAG_KEYS = ("tags", "categories")


def _first(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        v = raw.get(k)
        if v is not None:
            return v
    return None


def _to_float(v: Any) -> float | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v.strip())
        except ValueError:
            return None
    return None


def _to_int(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            return None
    return None


def _to_text(v: Any) -> str | None:
    if v is None:
        return None
    text = str(v).strip()
    return text or None


def _parse_time(v: Any) -> WallClockTime | None:
    if not isinstance(v, str):
        return None
    try:
        return WallClockTime.parse(v)
    except ValidationError:
        return None


def location_from_record(raw: Mapping[str, Any]) -> PlaceLocation | None:
    """Resolve coordinates from top-level aliases, then from a nested location mapping."""
    lat = _to_float(_first(raw, LAT_KEYS))
    lon = _to_float(_first(raw, LON_KEYS))
    if lat is None or lon is None:
        for key in NESTED_LOCATION_KEYS:
            nested = raw.get(key)
            if isinstance(nested, Mapping):
                return location_from_record(nested)
        return None
    try:
        return PlaceLocation(lat=lat, lon=lon)
    except ValidationError:
        logger.warning("Dropping out-of-range coordinates lat=%s lon=%s", lat, lon)
        return None


def _next_weekday(weekday: int) -> int:
    return weekday % 7 + 1


def weekly_from_records(entries: Any) -> WeeklyHours:
    """Build `WeeklyHours` from `[{weekday, closed, intervals: [{start, end}]}]` records.

    Entries for the same weekday are merged. An interval whose end is not after
    its start is treated as overnight and split at midnight into today and the
    next weekday.
    Intervals starting at `24:00` have no time on their own day and are dropped.
    """
    if not isinstance(entries, list):
        return WeeklyHours()

    closed_flags: dict[int, list[bool]] = {}
    intervals: dict[int, list[HoursInterval]] = {}

    def _add(weekday: int, start: WallClockTime, end: WallClockTime) -> None:
        if end.minutes <= start.minutes:
            return
        intervals.setdefault(weekday, []).append(HoursInterval(start=start, end=end))

    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        weekday = _to_int(entry.get("weekday"))
        if weekday is None or not 1 <= weekday <= 7:
            logger.debug("Skipping hours entry with invalid weekday: %r", entry.get("weekday"))
            continue
        closed_flags.setdefault(weekday, []).append(entry.get("closed") is True)
        intervals.setdefault(weekday, [])

        raw_intervals = entry.get("intervals")
        if not isinstance(raw_intervals, list):
            continue
        for it in raw_intervals:
            if not isinstance(it, Mapping):
                continue
            start = _parse_time(it.get("start"))
            end = _parse_time(it.get("end"))
            if start is None or end is None or start == END_OF_DAY:
                logger.debug("Skipping unparseable interval on weekday %s: %r", weekday, it)
                continue
            if end.minutes > start.minutes:
                _add(weekday, start, end)
            else:
                _add(weekday, start, END_OF_DAY)
                _add(_next_weekday(weekday), START_OF_DAY, end)

    days = [
        DailyHours(
            weekday=weekday,
            # A day only created by an overnight carry-over has no flags of its own.
            closed=all(closed_flags.get(weekday, [False])),
            intervals=intervals[weekday],
        )
        for weekday in sorted(intervals)
    ]
    return WeeklyHours(days=days)


def _hours_text_from_record(raw: Mapping[str, Any]) -> str | None:
    v = _first(raw, HOURS_TEXT_KEYS)
    return _to_text(v) if isinstance(v, str) else None


def _timezone_from_record(raw: Mapping[str, Any]) -> str | None:
    tz = _to_text(_first(raw, TIMEZONE_KEYS))
    if tz is None:
        return None
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Ignoring unknown timezone %r", tz)
        return None
    return tz


def place_from_record(raw: Mapping[str, Any]) -> Place:
    """Map one loose place record onto `Place`.

    Raises `ValueError` when the record has no usable id or name.
    """
    place_id = _to_text(_first(raw, ID_KEYS))
    if place_id is None:
        raise ValueError("place record is missing an id")
    name = _to_text(_first(raw, NAME_KEYS))
    if name is None:
        raise ValueError(f"place record {place_id!r} is missing a name")

    raw_tags = _first(raw, TAG_KEYS)
    tags: list[str] = []
    if isinstance(raw_tags, list):
        tags = sorted({str(t).strip().lower() for t in raw_tags if t is not None and str(t).strip()})

    return Place(
        id=place_id,
        name=name,
        location=location_from_record(raw),
        weekly_hours=weekly_from_records(_first(raw, WEEKLY_KEYS)),
        opening_hours_text=_hours_text_from_record(raw),
        timezone=_timezone_from_record(raw),
        tags=tags,
    )
