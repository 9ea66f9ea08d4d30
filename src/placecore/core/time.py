"""
Time parsing and timezone normalization.

Hours evaluation works on local wall-clock time at the place, so callers need a
single way to turn "now" (or a user-supplied ISO string) into an aware datetime
in the right zone. The evaluator itself never reads the clock; only the outer
surfaces (API/CLI) call `now_in()`.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def parse_datetime(value: str, timezone: str) -> datetime:
    """Parse ISO-8601 datetime string and ensure tzinfo is present.

    Notes:
    - Accepts a trailing `Z` (UTC) and converts it to `+00:00` for `fromisoformat`.
    - If the parsed value is naive, the provided `timezone` is attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    return ensure_tz(dt, timezone)


def to_local(dt: datetime, timezone: str | None) -> datetime:
    """Convert an aware `dt` into `timezone`; naive values are taken as already local."""
    if timezone is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(ZoneInfo(timezone))


def now_in(timezone: str) -> datetime:
    """Current time as an aware datetime in `timezone`."""
    return datetime.now(ZoneInfo(timezone))
