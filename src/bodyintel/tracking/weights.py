"""Weigh-in helpers: rolling averages, period filtering and unit conversion.

Weights are stored in kilograms. Pounds only exist at the display edge.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence, TypeVar

from bodyintel.tracking.models import WeighIn
from bodyintel.tracking.rounding import round_to

KG_TO_LBS = 2.20462
LBS_TO_KG = 0.453592

VALID_WEIGHT_UNITS = ("kg", "lbs")

# Default rolling window (days)
DEFAULT_WINDOW_DAYS = 7

Dated = TypeVar("Dated")


def in_trailing_period(day: date, today: date, period_days: int) -> bool:
    """Check whether a date falls in the trailing period ending today.

    The period is (today - period_days, today]: the end is inclusive and
    the start is exclusive, so a 7-day period covers exactly 7 dates.
    """
    start = today - timedelta(days=period_days)
    return start < day <= today


def sorted_in_period(records: Sequence[Dated], today: date, period_days: int) -> list[Dated]:
    """Filter dated records to the trailing period, oldest first."""
    return sorted(
        (r for r in records if in_trailing_period(r.date, today, period_days)),  # type: ignore[attr-defined]
        key=lambda r: r.date,  # type: ignore[attr-defined]
    )


def rolling_weight_average(
    weigh_ins: Sequence[WeighIn],
    target_date: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[float]:
    """Average weight over the window ending at target_date.

    Includes every weigh-in dated in [target_date - window_days, target_date].

    Args:
        weigh_ins: Weigh-in series in any order
        target_date: Last day of the window
        window_days: Window length in days (default 7)

    Returns:
        Mean weight in kg rounded to 2 decimals, or None if fewer than two
        weigh-ins fall in the window
    """
    window_start = target_date - timedelta(days=window_days)
    in_window = [w.weight for w in weigh_ins if window_start <= w.date <= target_date]

    if len(in_window) < 2:
        return None

    return round_to(sum(in_window) / len(in_window), 2)


def convert_weight(weight_kg: float, unit: str) -> float:
    """Convert a stored kilogram weight into the display unit."""
    if unit == "lbs":
        return weight_kg * KG_TO_LBS
    return weight_kg


def convert_to_kg(weight: float, from_unit: str) -> float:
    """Convert a weight in the given unit back to kilograms for storage."""
    if from_unit == "lbs":
        return weight * LBS_TO_KG
    return weight


def format_weight(weight_kg: float, unit: str, decimals: int = 1) -> str:
    """Format a weight with its unit label, e.g. '80.0 kg'."""
    return f"{convert_weight(weight_kg, unit):.{decimals}f} {unit}"


def format_weight_change(change_kg: float, unit: str, decimals: int = 1) -> str:
    """Format a signed weight change, e.g. '+1.2 lbs' or '-0.5 kg'."""
    converted = convert_weight(change_kg, unit)
    sign = "+" if converted > 0 else ""
    return f"{sign}{converted:.{decimals}f} {unit}"
