"""Weight-change quality from body composition scans.

Compares the oldest and newest scan of the period and attributes the weight
change to fat, muscle and water. The period is first resolved into one of
three regimes (losing, gaining, stable) using a 0.1 kg noise floor, and each
regime has its own scoring rules:

- Losing: what share of the loss was fat ("fat-loss efficiency").
- Gaining: what share of the gain was muscle.
- Stable: whether fat went down without muscle going with it (recomposition).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional, Sequence

from bodyintel.tracking.models import BodyCompositionScan, QualityStatus
from bodyintel.tracking.rounding import clamp, round_half_up
from bodyintel.tracking.weights import sorted_in_period

logger = logging.getLogger(__name__)

# Changes smaller than this (kg) are treated as scale/scan noise
NOISE_FLOOR_KG = 0.1

# Efficiency thresholds (percent) for each regime: (excellent, good)
LOSS_THRESHOLDS = (80, 60)
GAIN_THRESHOLDS = (70, 50)


class WeightTrend(Enum):
    """Direction of the weight change between two scans."""
    LOSING = "losing"
    GAINING = "gaining"
    STABLE = "stable"


@dataclass(frozen=True)
class CompositionDeltas:
    """Changes between two scans. Positive values mean the amount went down.

    A component delta is None when either scan did not report it.
    """

    total_weight_lost: float
    fat_lost: Optional[float]
    muscle_lost: Optional[float]
    water_change: Optional[float]

    @property
    def trend(self) -> WeightTrend:
        if self.total_weight_lost > NOISE_FLOOR_KG:
            return WeightTrend.LOSING
        if self.total_weight_lost < -NOISE_FLOOR_KG:
            return WeightTrend.GAINING
        return WeightTrend.STABLE


@dataclass(frozen=True)
class QualityResult:
    """Outcome of the composition quality evaluation."""

    status: QualityStatus
    efficiency: int  # percent, 0-100
    deltas: Optional[CompositionDeltas]
    trend: Optional[WeightTrend]

    @property
    def has_data(self) -> bool:
        return self.deltas is not None


def _difference(older: Optional[float], newer: Optional[float]) -> Optional[float]:
    if older is None or newer is None:
        return None
    return older - newer


def composition_deltas(
    oldest: BodyCompositionScan,
    newest: BodyCompositionScan,
) -> CompositionDeltas:
    """Compute the changes between two scans (positive = lost)."""
    return CompositionDeltas(
        total_weight_lost=oldest.weight - newest.weight,
        fat_lost=_difference(oldest.fat_mass, newest.fat_mass),
        muscle_lost=_difference(oldest.muscle_mass, newest.muscle_mass),
        water_change=_difference(oldest.water_weight, newest.water_weight),
    )


def _grade(efficiency: int, thresholds: tuple[int, int]) -> QualityStatus:
    excellent, good = thresholds
    if efficiency >= excellent:
        return QualityStatus.EXCELLENT
    if efficiency >= good:
        return QualityStatus.GOOD
    return QualityStatus.CONCERNING


def _percent(part: float, whole: float) -> int:
    return int(clamp(round_half_up(part / whole * 100), 0, 100))


def _score_losing(deltas: CompositionDeltas) -> tuple[QualityStatus, int]:
    """Losing weight: the share of the loss that came from fat."""
    fat_lost = deltas.fat_lost
    if fat_lost is None:
        return QualityStatus.INSUFFICIENT_DATA, 0
    if fat_lost > 0:
        efficiency = _percent(fat_lost, deltas.total_weight_lost)
        return _grade(efficiency, LOSS_THRESHOLDS), efficiency

    # Weight went down but fat did not: the loss was muscle or water
    return QualityStatus.CONCERNING, 0


def _score_gaining(deltas: CompositionDeltas) -> tuple[QualityStatus, int]:
    """Gaining weight: the share of the gain that was muscle."""
    if deltas.muscle_lost is None:
        return QualityStatus.INSUFFICIENT_DATA, 0
    muscle_gained = -deltas.muscle_lost
    fat_decreased = deltas.fat_lost is not None and deltas.fat_lost > 0

    if muscle_gained > 0:
        if fat_decreased:
            # Recomposition while gaining
            return QualityStatus.EXCELLENT, 100
        efficiency = _percent(muscle_gained, -deltas.total_weight_lost)
        return _grade(efficiency, GAIN_THRESHOLDS), efficiency

    return QualityStatus.CONCERNING, 0


def _score_stable(deltas: CompositionDeltas) -> tuple[QualityStatus, int]:
    """Stable weight: look for recomposition. Needs both fat and muscle mass."""
    fat_lost = deltas.fat_lost
    muscle_lost = deltas.muscle_lost
    if fat_lost is None or muscle_lost is None:
        return QualityStatus.INSUFFICIENT_DATA, 0

    if fat_lost > NOISE_FLOOR_KG and muscle_lost <= 0:
        return QualityStatus.EXCELLENT, 100

    if muscle_lost > 0 and fat_lost > muscle_lost:
        return QualityStatus.GOOD, _percent(fat_lost, fat_lost + muscle_lost)

    if abs(fat_lost) < NOISE_FLOOR_KG and abs(muscle_lost) < NOISE_FLOOR_KG:
        # Maintaining
        return QualityStatus.GOOD, 0

    return QualityStatus.CONCERNING, 0


_SCORERS: dict[WeightTrend, Callable[[CompositionDeltas], tuple[QualityStatus, int]]] = {
    WeightTrend.LOSING: _score_losing,
    WeightTrend.GAINING: _score_gaining,
    WeightTrend.STABLE: _score_stable,
}


def score_deltas(deltas: CompositionDeltas) -> QualityResult:
    """Score a set of composition changes under its weight regime."""
    trend = deltas.trend
    status, efficiency = _SCORERS[trend](deltas)
    logger.debug("Composition regime %s scored %s (%d%%)", trend.value, status.value, efficiency)
    return QualityResult(status=status, efficiency=efficiency, deltas=deltas, trend=trend)


def evaluate_quality(
    scans: Sequence[BodyCompositionScan],
    today: date,
    period_days: int = 30,
) -> QualityResult:
    """Evaluate weight-change quality over the trailing period.

    Args:
        scans: Body composition scans in any order
        today: Last day of the period
        period_days: Period length in days

    Returns:
        QualityResult; insufficient-data when fewer than two scans fall in
        the period
    """
    period_scans = sorted_in_period(scans, today, period_days)
    if len(period_scans) < 2:
        return QualityResult(
            status=QualityStatus.INSUFFICIENT_DATA,
            efficiency=0,
            deltas=None,
            trend=None,
        )

    return score_deltas(composition_deltas(period_scans[0], period_scans[-1]))
