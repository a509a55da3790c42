"""Wearable-based TDEE and its calibration against the scale.

Daily TDEE from a wearable is:
    TDEE = (resting energy + active energy) x TEF multiplier

The TEF multiplier (default 1.10) adds the thermic effect of food, which
wearables do not measure. Over a period it can be calibrated by comparing
the wearable TDEE with an "observed" TDEE derived from what was eaten and
how the weight trend moved:
    observed TDEE = avg calories eaten + 7700 x kg lost / days

Weight change uses 7-day rolling averages at both ends of the period to
damp daily water swings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Mapping, Optional, Sequence

from bodyintel.tracking.models import DailyLog, FoodItem, HealthMetricsSnapshot, WeighIn
from bodyintel.tracking.rounding import clamp, round_half_up, round_to
from bodyintel.tracking.servings import daily_calories
from bodyintel.tracking.weights import DEFAULT_WINDOW_DAYS, rolling_weight_average

logger = logging.getLogger(__name__)

KCAL_PER_KG = 7700
DEFAULT_TEF_MULTIPLIER = 1.10
TEF_MULTIPLIER_RANGE = (1.0, 1.25)

DEFAULT_CALIBRATION_DAYS = 14
MIN_CALIBRATION_DAYS = 7

# Relative gap between wearable and observed TDEE that calls for calibration
CALIBRATION_THRESHOLD = 0.10


@dataclass(frozen=True)
class DailyTdee:
    """TDEE breakdown for one day."""

    date: Optional[date]
    resting_energy: float
    active_energy: float
    raw_tdee: float  # before TEF
    tdee: int  # after TEF
    tef_multiplier: float
    calories_eaten: int
    deficit: int
    projected_weekly_loss_kg: float
    has_wearable_data: bool

    @property
    def data_source(self) -> str:
        return "wearable" if self.has_wearable_data else "none"


@dataclass(frozen=True)
class ObservedTdee:
    """TDEE reconciled from intake and the weight trend."""

    observed_tdee: int
    wearable_avg_tdee: int
    avg_calories_eaten: int
    weight_change_kg: float  # positive = loss
    days_analyzed: int
    suggested_tef_multiplier: float
    calibration_needed: bool
    confidence: str  # 'low', 'medium' or 'high'


@dataclass
class TdeeCalibrationResult:
    """Wearable TDEE history with its calibration against observed TDEE."""

    tef_multiplier: float
    period_days: int
    days: list[DailyTdee] = field(default_factory=list)
    avg_resting_energy: float = 0.0
    avg_active_energy: float = 0.0
    avg_raw_tdee: float = 0.0
    avg_tdee: int = 0
    observed: Optional[ObservedTdee] = None

    @property
    def is_available(self) -> bool:
        return self.observed is not None

    @property
    def suggested_tef_multiplier(self) -> Optional[float]:
        return self.observed.suggested_tef_multiplier if self.observed else None

    @property
    def calibration_needed(self) -> bool:
        return self.observed.calibration_needed if self.observed else False

    @property
    def confidence(self) -> Optional[str]:
        return self.observed.confidence if self.observed else None


def daily_tdee(
    health_metrics: Optional[HealthMetricsSnapshot],
    tef_multiplier: float = DEFAULT_TEF_MULTIPLIER,
    calories_eaten: int = 0,
    day: Optional[date] = None,
) -> DailyTdee:
    """Calculate one day's TDEE from wearable data.

    Args:
        health_metrics: Wearable snapshot for the day, if any
        tef_multiplier: Thermic effect of food multiplier
        calories_eaten: Calories eaten that day
        day: Date the figures belong to

    Returns:
        DailyTdee with raw and TEF-adjusted TDEE, deficit and the weekly
        loss that deficit would project to
    """
    resting = (health_metrics.resting_energy or 0.0) if health_metrics else 0.0
    active = (health_metrics.active_energy or 0.0) if health_metrics else 0.0

    raw_tdee = resting + active
    tdee = round_half_up(raw_tdee * tef_multiplier)
    deficit = tdee - calories_eaten

    return DailyTdee(
        date=day,
        resting_energy=resting,
        active_energy=active,
        raw_tdee=raw_tdee,
        tdee=tdee,
        tef_multiplier=tef_multiplier,
        calories_eaten=calories_eaten,
        deficit=deficit,
        projected_weekly_loss_kg=round_to(deficit * 7 / KCAL_PER_KG, 2),
        has_wearable_data=resting > 0,
    )


def _wearable_logs(logs: Sequence[DailyLog], today: date, days: int) -> list[DailyLog]:
    """Logs dated in [today - days, today] that carry resting energy."""
    start = today - timedelta(days=days)
    return sorted(
        (log for log in logs if start <= log.date <= today and log.resting_energy > 0),
        key=lambda log: log.date,
    )


def daily_tdee_history(
    logs: Sequence[DailyLog],
    catalog: Mapping[str, FoodItem],
    today: date,
    tef_multiplier: float = DEFAULT_TEF_MULTIPLIER,
    days: int = DEFAULT_CALIBRATION_DAYS,
) -> list[DailyTdee]:
    """Per-day TDEE for every wearable-tracked day in the period, oldest first."""
    return [
        daily_tdee(
            log.health_metrics,
            tef_multiplier=tef_multiplier,
            calories_eaten=daily_calories(log, catalog),
            day=log.date,
        )
        for log in _wearable_logs(logs, today, days)
    ]


def average_tdee(
    logs: Sequence[DailyLog],
    today: date,
    tef_multiplier: float = DEFAULT_TEF_MULTIPLIER,
    days: int = 7,
) -> tuple[int, int]:
    """Average TEF-adjusted wearable TDEE.

    Returns:
        Tuple of (average TDEE, number of days with wearable data)
    """
    tracked = _wearable_logs(logs, today, days)
    if not tracked:
        return 0, 0

    total = sum(daily_tdee(log.health_metrics, tef_multiplier).tdee for log in tracked)
    return round_half_up(total / len(tracked)), len(tracked)


def _calibration_confidence(days_analyzed: int) -> str:
    if days_analyzed >= 14:
        return "high"
    if days_analyzed >= 10:
        return "medium"
    return "low"


def observed_tdee(
    logs: Sequence[DailyLog],
    weigh_ins: Sequence[WeighIn],
    catalog: Mapping[str, FoodItem],
    today: date,
    tef_multiplier: float = DEFAULT_TEF_MULTIPLIER,
    period_days: int = DEFAULT_CALIBRATION_DAYS,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[ObservedTdee]:
    """Reconcile wearable TDEE with intake and the weight trend.

    Args:
        logs: Daily logs in any order
        weigh_ins: Weigh-in series in any order
        catalog: Food items keyed by id
        today: Last day of the period
        tef_multiplier: TEF multiplier currently applied to wearable data
        period_days: Period length in days (default 14)
        window_days: Rolling weight average window at each end (default 7)

    Returns:
        ObservedTdee, or None when either end of the period lacks a rolling
        weight average or fewer than 7 days have wearable data
    """
    period_start = today - timedelta(days=period_days)
    start_weight = rolling_weight_average(weigh_ins, period_start, window_days)
    end_weight = rolling_weight_average(weigh_ins, today, window_days)

    if start_weight is None or end_weight is None:
        logger.debug("No rolling weight average at one end of the calibration period")
        return None

    tracked = _wearable_logs(logs, today, period_days)
    if len(tracked) < MIN_CALIBRATION_DAYS:
        logger.debug("Only %d wearable days, need %d", len(tracked), MIN_CALIBRATION_DAYS)
        return None

    days_analyzed = len(tracked)
    days = [daily_tdee(log.health_metrics, tef_multiplier) for log in tracked]

    total_eaten = sum(daily_calories(log, catalog) for log in tracked)
    avg_calories_eaten = round_half_up(total_eaten / days_analyzed)
    wearable_avg_tdee = round_half_up(sum(d.tdee for d in days) / days_analyzed)
    raw_avg_tdee = sum(d.raw_tdee for d in days) / days_analyzed

    weight_change_kg = start_weight - end_weight
    energy_from_weight_change = KCAL_PER_KG * weight_change_kg / days_analyzed
    observed = round_half_up(avg_calories_eaten + energy_from_weight_change)

    if raw_avg_tdee > 0:
        suggested = round_to(observed / raw_avg_tdee, 2)
    else:
        suggested = tef_multiplier
    suggested = clamp(suggested, *TEF_MULTIPLIER_RANGE)

    if observed > 0:
        calibration_needed = abs(wearable_avg_tdee - observed) / observed > CALIBRATION_THRESHOLD
    else:
        # A non-positive observed TDEE can never agree with the wearable
        calibration_needed = True

    return ObservedTdee(
        observed_tdee=observed,
        wearable_avg_tdee=wearable_avg_tdee,
        avg_calories_eaten=avg_calories_eaten,
        weight_change_kg=round_to(weight_change_kg, 2),
        days_analyzed=days_analyzed,
        suggested_tef_multiplier=suggested,
        calibration_needed=calibration_needed,
        confidence=_calibration_confidence(days_analyzed),
    )


def calibrate_tdee(
    logs: Sequence[DailyLog],
    weigh_ins: Sequence[WeighIn],
    catalog: Mapping[str, FoodItem],
    today: date,
    tef_multiplier: float = DEFAULT_TEF_MULTIPLIER,
    period_days: int = DEFAULT_CALIBRATION_DAYS,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> TdeeCalibrationResult:
    """Build the full TDEE calibration for a period.

    The per-day breakdown and averages are always filled in; the observed
    reconciliation is None when there is not enough data for it.
    """
    days = daily_tdee_history(logs, catalog, today, tef_multiplier, period_days)
    result = TdeeCalibrationResult(
        tef_multiplier=tef_multiplier,
        period_days=period_days,
        days=days,
        observed=observed_tdee(
            logs, weigh_ins, catalog, today, tef_multiplier, period_days, window_days
        ),
    )

    if days:
        count = len(days)
        result.avg_resting_energy = round_to(sum(d.resting_energy for d in days) / count, 1)
        result.avg_active_energy = round_to(sum(d.active_energy for d in days) / count, 1)
        result.avg_raw_tdee = round_to(sum(d.raw_tdee for d in days) / count, 1)
        result.avg_tdee = round_half_up(sum(d.tdee for d in days) / count)

    return result
