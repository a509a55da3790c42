"""Accumulated energy deficit over a trailing period.

Each logged day contributes:
    deficit_day = (BMR + active energy) - calories eaten

Active energy comes from the wearable snapshot when it has one, otherwise
from manually entered workout calories. Days with nothing eaten are treated
as "not logged" rather than "ate nothing" and are skipped entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Sequence

from bodyintel.tracking.models import DailyLog, FoodItem
from bodyintel.tracking.servings import daily_calories
from bodyintel.tracking.weights import sorted_in_period

logger = logging.getLogger(__name__)

DEFAULT_PERIOD_DAYS = 30


@dataclass(frozen=True)
class DeficitSummary:
    """Deficit accumulated over the qualifying days of a period."""

    accumulated_deficit: float  # kcal, positive = deficit, negative = surplus
    days_with_data: int

    @property
    def has_data(self) -> bool:
        return self.days_with_data > 0


def accumulate_deficit(
    logs: Sequence[DailyLog],
    catalog: Mapping[str, FoodItem],
    bmr: float,
    today: date,
    period_days: int = DEFAULT_PERIOD_DAYS,
) -> DeficitSummary:
    """Sum daily deficits over the trailing period.

    Args:
        logs: Daily logs in any order
        catalog: Food items keyed by id
        bmr: Basal metabolic rate in kcal/day
        today: Last day of the period
        period_days: Period length in days (default 30)

    Returns:
        DeficitSummary; zero deficit and zero days when BMR is not positive
        or no day in the period has food logged
    """
    if bmr <= 0:
        logger.debug("BMR %s is not positive, skipping deficit accumulation", bmr)
        return DeficitSummary(accumulated_deficit=0.0, days_with_data=0)

    accumulated = 0.0
    days_with_data = 0

    for log in sorted_in_period(logs, today, period_days):
        consumed = daily_calories(log, catalog)
        if consumed == 0:
            continue

        tdee = bmr + log.active_energy
        accumulated += tdee - consumed
        days_with_data += 1

    logger.debug(
        "Accumulated %.0f kcal deficit over %d of %d days",
        accumulated,
        days_with_data,
        period_days,
    )
    return DeficitSummary(accumulated_deficit=accumulated, days_with_data=days_with_data)
