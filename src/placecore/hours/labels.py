"""
Display helpers for open-hours results.

These turn an `EvaluationResult` and a `WeeklyHours` table into the short
strings the hours panel shows:
- the collapsed header ("Open now" / "Closed" plus "Closes 17:00", "Opens 10:00 tomorrow")
- one row per weekday with the intervals text, highlighting today

When a place has no structured schedule, `summarize()` passes the raw
opening-hours text through as `fallback_text`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from placecore.config.settings import ClockStyle, Settings
from placecore.core.time import to_local
from placecore.domain.models import EvaluationResult, Place, WallClockTime, WeeklyHours
from placecore.hours.evaluator import evaluate

_WEEKDAY_LABELS = {1: "Mon", 2: "Tue", 3: "Wed", 4: "Thu", 5: "Fri", 6: "Sat", 7: "Sun"}

NO_HOURS_TEXT = "—"


def weekday_label(weekday: int) -> str:
    return _WEEKDAY_LABELS.get(weekday, "Day")


def format_wall_clock(t: WallClockTime, clock: ClockStyle = "24h") -> str:
    """`09:00` (24h) or `9:00 AM` (12h). `24:00` reads as midnight in 12h."""
    if clock == "24h":
        return str(t)
    hour = t.hour % 24
    suffix = "AM" if hour < 12 else "PM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{t.minute:02d} {suffix}"


def status_label(result: EvaluationResult) -> str:
    return "Open now" if result.is_open else "Closed"


def next_change_label(
    result: EvaluationResult, *, today_weekday: int, clock: ClockStyle = "24h"
) -> str | None:
    """Label for the next transition, or None when the place never opens."""
    nxt = result.next_transition
    if nxt is None:
        return None
    when = format_wall_clock(nxt.time, clock)
    if nxt.kind == "closes":
        return f"Closes {when}"
    if nxt.day_offset == 0:
        return f"Opens {when}"
    if nxt.day_offset == 1:
        return f"Opens {when} tomorrow"
    target = (today_weekday - 1 + nxt.day_offset) % 7 + 1
    return f"Opens {when} {weekday_label(target)}"


def weekly_rows(
    weekly: WeeklyHours, *, today_weekday: int, clock: ClockStyle = "24h"
) -> list[dict[str, Any]]:
    """One display row per weekday (Mon..Sun), absent days included."""
    rows: list[dict[str, Any]] = []
    for weekday in range(1, 8):
        day = weekly.day(weekday)
        if day is not None and day.closed and not day.intervals:
            text = "Closed"
        elif day is None or not day.intervals:
            text = NO_HOURS_TEXT
        else:
            text = ", ".join(
                f"{format_wall_clock(it.start, clock)} – {format_wall_clock(it.end, clock)}"
                for it in day.sorted_intervals()
            )
        rows.append(
            {
                "weekday": weekday,
                "label": weekday_label(weekday),
                "text": text,
                "is_today": weekday == today_weekday,
            }
        )
    return rows


def summarize(
    weekly: WeeklyHours,
    now: datetime,
    *,
    settings: Settings,
    timezone: str | None = None,
    fallback_text: str | None = None,
) -> dict[str, Any]:
    """Evaluate and render everything the hours panel needs in one payload."""
    clock = settings.hours.clock
    today = to_local(now, timezone).isoweekday()
    result = evaluate(weekly, now, timezone=timezone)
    return {
        "is_open": result.is_open,
        "status": status_label(result),
        "next_change": next_change_label(result, today_weekday=today, clock=clock),
        "next_transition": (
            result.next_transition.model_dump(mode="json") if result.next_transition else None
        ),
        "rows": [] if weekly.is_empty else weekly_rows(weekly, today_weekday=today, clock=clock),
        "fallback_text": fallback_text if weekly.is_empty else None,
    }


def summarize_place(place: Place, now: datetime, *, settings: Settings) -> dict[str, Any]:
    """`summarize()` for a catalog place, using its own timezone when known."""
    return summarize(
        place.weekly_hours,
        now,
        settings=settings,
        timezone=place.timezone,
        fallback_text=place.opening_hours_text,
    )
