"""
Domain models (Pydantic).

These types are the typed contract between the data-access boundary and the
pure helpers:
- schedule entities (`WallClockTime`, `HoursInterval`, `DailyHours`, `WeeklyHours`)
- evaluation output (`EvaluationResult`, `NextTransition`)
- place records (`Place`, `PlaceLocation`) produced by `placecore.catalog.mapping`
- distance output (`DistanceResult`)

Loose upstream records are coerced into these once, in the catalog layer; the
evaluator and distance helpers only ever see validated instances.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from placecore.core.geo import GeoPoint

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class WallClockTime(BaseModel):
    """An hour/minute pair without date or timezone.

    Accepts `"HH:MM"` strings on input and serializes back to `"HH:MM"`.
    `24:00` is allowed as an end-of-day marker for interval ends.
    """

    model_config = ConfigDict(frozen=True)

    hour: int = Field(..., ge=0, le=24)
    minute: int = Field(0, ge=0, le=59)

    @model_validator(mode="before")
    @classmethod
    def _parse_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            m = _TIME_RE.match(value.strip())
            if m is None:
                raise ValueError(f"expected a HH:MM time, got {value!r}")
            return {"hour": int(m.group(1)), "minute": int(m.group(2))}
        return value

    @model_validator(mode="after")
    def _validate_end_of_day(self) -> "WallClockTime":
        if self.hour == 24 and self.minute != 0:
            raise ValueError("24:00 is the only valid time in hour 24")
        return self

    @model_serializer
    def _to_text(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def minutes(self) -> int:
        """Minutes since midnight (0..1440)."""
        return self.hour * 60 + self.minute

    @classmethod
    def parse(cls, text: str) -> "WallClockTime":
        return cls.model_validate(text)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "WallClockTime":
        """Wall-clock part of `dt`, truncated to the minute."""
        return cls(hour=dt.hour, minute=dt.minute)


END_OF_DAY = WallClockTime(hour=24, minute=0)
START_OF_DAY = WallClockTime(hour=0, minute=0)


class HoursInterval(BaseModel):
    """A half-open opening interval `[start, end)` within a single day."""

    model_config = ConfigDict(frozen=True)

    start: WallClockTime
    end: WallClockTime

    @model_validator(mode="after")
    def _validate_order(self) -> "HoursInterval":
        if self.end.minutes <= self.start.minutes:
            raise ValueError(
                f"interval end must be after start ({self.start}-{self.end}); split overnight spans"
            )
        return self

    def contains(self, t: WallClockTime) -> bool:
        return self.start.minutes <= t.minutes < self.end.minutes


class DailyHours(BaseModel):
    """One weekday's hours. `weekday` is ISO-8601 (1=Mon..7=Sun).

    `weekday` is not range-checked here: entries outside 1..7 are skipped by the
    evaluator rather than rejected.
    """

    weekday: int
    closed: bool = False
    intervals: list[HoursInterval] = Field(default_factory=list)

    def sorted_intervals(self) -> list[HoursInterval]:
        return sorted(self.intervals, key=lambda it: (it.start.minutes, it.end.minutes))


class WeeklyHours(BaseModel):
    """A sparse weekly schedule: at most one entry per ISO weekday."""

    days: list[DailyHours] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, value: Any) -> Any:
        if isinstance(value, list):
            return {"days": value}
        return value

    @model_validator(mode="after")
    def _validate_unique_weekdays(self) -> "WeeklyHours":
        seen: set[int] = set()
        for d in self.days:
            if 1 <= d.weekday <= 7:
                if d.weekday in seen:
                    raise ValueError(f"duplicate entry for weekday {d.weekday}")
                seen.add(d.weekday)
        return self

    @property
    def is_empty(self) -> bool:
        return not self.days

    def day(self, weekday: int) -> DailyHours | None:
        """Entry for an ISO weekday, or None if absent (or out of range)."""
        if not 1 <= weekday <= 7:
            return None
        for d in self.days:
            if d.weekday == weekday:
                return d
        return None


TransitionKind = Literal["opens", "closes"]


class NextTransition(BaseModel):
    """The next open/close change. `day_offset` 0 is today, 1 tomorrow, up to 7."""

    kind: TransitionKind
    time: WallClockTime
    day_offset: int = Field(..., ge=0, le=7)


class EvaluationResult(BaseModel):
    is_open: bool
    next_transition: NextTransition | None = None


class PlaceLocation(BaseModel):
    """Canonical, validated place coordinates in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)


class Place(BaseModel):
    """A place record as the helpers see it (aliases already resolved)."""

    id: str
    name: str
    location: PlaceLocation | None = None
    weekly_hours: WeeklyHours = Field(default_factory=WeeklyHours)
    opening_hours_text: str | None = None
    timezone: str | None = None
    tags: list[str] = Field(default_factory=list)


UnitSystem = Literal["metric", "imperial"]


class DistanceResult(BaseModel):
    """A measured distance plus its display string."""

    meters: float
    unit: UnitSystem
    text: str
