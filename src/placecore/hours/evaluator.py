"""
Weekly open-hours evaluator.

Given a weekly schedule and a timestamp, decide whether the place is open and
what the next change is ("Closes 17:00", "Opens 10:00 tomorrow").

Rules:
- Intervals are half-open `[start, end)`; only hour and minute of `now` count.
- Intervals are authoritative: a day is closed iff it has no intervals.
- Overlapping intervals containing `now`: the latest `end` is the closing time.
- The forward scan covers offsets 1..7, so a place open only on today's weekday
  (earlier in the day) reports that slot a week ahead.
- Weekday entries outside 1..7 are ignored.

The function is pure; callers pass `now` explicitly.
"""

from __future__ import annotations

from datetime import datetime

from placecore.core.time import to_local
from placecore.domain.models import (
    DailyHours,
    EvaluationResult,
    HoursInterval,
    NextTransition,
    WallClockTime,
    WeeklyHours,
)


def _index_by_weekday(weekly: WeeklyHours) -> dict[int, DailyHours]:
    return {d.weekday: d for d in weekly.days if 1 <= d.weekday <= 7}


def _shift_weekday(weekday: int, offset: int) -> int:
    return (weekday - 1 + offset) % 7 + 1


def _earliest_start(intervals: list[HoursInterval]) -> WallClockTime:
    return min(intervals, key=lambda it: it.start.minutes).start


def evaluate(weekly: WeeklyHours, now: datetime, *, timezone: str | None = None) -> EvaluationResult:
    """Evaluate open/closed state of `weekly` at `now`.

    If `timezone` is given and `now` is aware, `now` is converted to that zone
    first; a naive `now` is taken as the place's local time.
    """
    if weekly.is_empty:
        return EvaluationResult(is_open=False, next_transition=None)

    local = to_local(now, timezone)
    today = local.isoweekday()
    t = WallClockTime.from_datetime(local)
    days = _index_by_weekday(weekly)

    today_intervals = days[today].intervals if today in days else []

    containing = [it for it in today_intervals if it.contains(t)]
    if containing:
        closing = max(containing, key=lambda it: it.end.minutes)
        return EvaluationResult(
            is_open=True,
            next_transition=NextTransition(kind="closes", time=closing.end, day_offset=0),
        )

    later = [it for it in today_intervals if it.start.minutes > t.minutes]
    if later:
        return EvaluationResult(
            is_open=False,
            next_transition=NextTransition(kind="opens", time=_earliest_start(later), day_offset=0),
        )

    for offset in range(1, 8):
        day = days.get(_shift_weekday(today, offset))
        if day is None or not day.intervals:
            continue
        return EvaluationResult(
            is_open=False,
            next_transition=NextTransition(
                kind="opens", time=_earliest_start(day.intervals), day_offset=offset
            ),
        )

    return EvaluationResult(is_open=False, next_transition=None)


def is_open_at(weekly: WeeklyHours, now: datetime, *, timezone: str | None = None) -> bool:
    return evaluate(weekly, now, timezone=timezone).is_open
