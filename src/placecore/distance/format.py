"""
Distance display formatting.

Metric: under 1000 m shows whole meters ("850 m"), otherwise kilometers with
`precision_km` decimals ("1.2 km").
Imperial: under 0.1 mi shows whole feet ("492 ft"), otherwise miles with
`precision_mi` decimals ("0.1 mi").

Whole numbers round half up. Non-finite input renders as-is and never raises.
"""

from __future__ import annotations

import math

from placecore.domain.models import UnitSystem

MILES_PER_KM = 0.621371
FEET_PER_METER = 3.28084
FEET_THRESHOLD_MI = 0.1


def _round_half_up(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    return str(int(math.floor(value + 0.5)))


def meters_to_miles(meters: float) -> float:
    return meters / 1000.0 * MILES_PER_KM


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def format_distance(
    meters: float,
    unit: UnitSystem = "metric",
    precision_km: int = 1,
    precision_mi: int = 1,
    *,
    suffix: str | None = None,
) -> str:
    """Render `meters` for display; `suffix` (e.g. "away") is appended when given."""
    if unit == "imperial":
        miles = meters_to_miles(meters)
        if miles < FEET_THRESHOLD_MI:
            text = f"{_round_half_up(meters_to_feet(meters))} ft"
        else:
            text = f"{miles:.{precision_mi}f} mi"
    elif meters < 1000:
        text = f"{_round_half_up(meters)} m"
    else:
        text = f"{meters / 1000.0:.{precision_km}f} km"

    if suffix:
        return f"{text} {suffix}"
    return text
