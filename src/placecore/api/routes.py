"""
API routes.

Endpoints:
- GET  `/api/settings`: public display settings (units, clock style, timezone).
- POST `/api/hours/evaluate`: evaluate an ad-hoc weekly schedule.
- POST `/api/distance`: distance between two points, formatted.
- GET  `/api/places/nearby`: catalog places within a radius, closest first.
- GET  `/api/places/{place_id}/hours`: open/closed summary for a catalog place.

The evaluator never reads the clock; when a request omits `at`, the route samples
"now" in the configured zone and passes it in.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from placecore.catalog.loader import find_place, load_places
from placecore.config.overrides import apply_settings_overrides
from placecore.config.settings import Settings, get_settings
from placecore.core.time import now_in, parse_datetime
from placecore.distance.proximity import measure, nearby_rows
from placecore.domain.models import DistanceResult, Place, PlaceLocation, UnitSystem, WeeklyHours
from placecore.hours.labels import summarize, summarize_place

router = APIRouter()


class HoursRequest(BaseModel):
    weekly: WeeklyHours
    at: datetime | None = None
    timezone: str | None = None
    settings_overrides: dict[str, Any] | None = None


class DistanceRequest(BaseModel):
    origin: PlaceLocation
    target: PlaceLocation
    unit: UnitSystem | None = None
    settings_overrides: dict[str, Any] | None = None


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": message})


def _settings_for(overrides: dict[str, Any] | None) -> Settings:
    try:
        return apply_settings_overrides(get_settings(), overrides)
    except ValueError as e:
        raise _bad_request(str(e)) from e


def _check_timezone(tz: str | None) -> str | None:
    if tz is None:
        return None
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise _bad_request(f"unknown timezone: {tz!r}") from e
    return tz


@lru_cache
def _places() -> list[Place]:
    return load_places(get_settings().catalog.path)


def _get_place(place_id: str) -> Place:
    place = find_place(_places(), place_id)
    if place is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": f"unknown place: {place_id}"})
    return place


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return display settings for UI defaults (no file paths)."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name, "timezone": settings.app.timezone},
        "distance": settings.distance.model_dump(mode="json"),
        "hours": settings.hours.model_dump(mode="json"),
    }


@router.post("/api/hours/evaluate")
def post_hours_evaluate(request: HoursRequest) -> dict:
    """Evaluate open/closed state for a schedule sent in the request body."""
    settings = _settings_for(request.settings_overrides)
    tz = _check_timezone(request.timezone)
    now = request.at if request.at is not None else now_in(tz or settings.app.timezone)
    return summarize(request.weekly, now, settings=settings, timezone=tz)


@router.post("/api/distance", response_model=DistanceResult)
def post_distance(request: DistanceRequest) -> DistanceResult:
    """Great-circle distance between two validated points."""
    settings = _settings_for(request.settings_overrides)
    return measure(request.origin.to_point(), request.target.to_point(), settings=settings, unit=request.unit)


@router.get("/api/places/nearby")
def get_places_nearby(lat: float, lon: float, radius_m: float | None = None, unit: UnitSystem | None = None) -> dict:
    """Catalog places within `radius_m` of a point, closest first."""
    settings = get_settings()
    try:
        origin = PlaceLocation(lat=lat, lon=lon)
    except ValueError as e:
        raise _bad_request(str(e)) from e
    radius = radius_m if radius_m is not None else settings.distance.default_radius_m
    rows = nearby_rows(origin.to_point(), _places(), settings=settings, radius_m=radius, unit=unit)
    return {"radius_m": radius, "places": rows}


@router.get("/api/places/{place_id}/hours")
def get_place_hours(place_id: str, at: str | None = None) -> dict:
    """Open/closed summary for a catalog place at `at` (ISO-8601) or now."""
    settings = get_settings()
    place = _get_place(place_id)
    tz = place.timezone or settings.app.timezone
    if at is None:
        now = now_in(tz)
    else:
        try:
            now = parse_datetime(at, tz)
        except ValueError as e:
            raise _bad_request(f"invalid 'at' datetime: {at!r}") from e
    summary = summarize_place(place, now, settings=settings)
    return {"place_id": place.id, "name": place.name, "tags": place.tags, **summary}
