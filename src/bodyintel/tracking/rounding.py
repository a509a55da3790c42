"""Rounding helpers shared by the tracking calculations.

Scores and calorie totals round halves up (2.5 -> 3, -2.5 -> -2) rather
than using banker's rounding, so a score of 79.5 lands in the 80 band.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding up."""
    return int(math.floor(value + 0.5))


def round_to(value: float, places: int = 1) -> float:
    """Round to a fixed number of decimal places, with .5 rounding up."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
