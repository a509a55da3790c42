"""Metabolic adaptation detection from scan-measured BMR.

BMR is expected to fall by roughly 7 kcal/day for every kg of body weight
lost. A drop well beyond that suggests adaptive thermogenesis.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from bodyintel.tracking.models import BodyCompositionScan, MetabolicStatus
from bodyintel.tracking.rounding import round_half_up
from bodyintel.tracking.weights import sorted_in_period

KCAL_BMR_PER_KG = 7

# Weight loss (kg) needed before a BMR drop is judged against the loss
MIN_LOSS_KG = 0.2

# Drops within this much of expected are healthy (kcal/day)
TOLERANCE_KCAL = 30

# Drops this far beyond expected are adaptation (kcal/day)
ADAPTATION_MARGIN_KCAL = 50


@dataclass(frozen=True)
class MetabolicResult:
    """BMR trend between the oldest and newest BMR-bearing scans."""

    status: MetabolicStatus
    current_bmr: float
    previous_bmr: float
    bmr_change: float  # negative = BMR dropped
    expected_bmr_change: int
    has_data: bool


def expected_bmr_change(total_weight_lost: float) -> int:
    """BMR change (kcal/day) explained by a given weight loss in kg."""
    return -round_half_up(total_weight_lost * KCAL_BMR_PER_KG)


def classify_bmr_change(
    bmr_change: float,
    expected_change: int,
    total_weight_lost: float,
) -> MetabolicStatus:
    """Decide whether a BMR change points to metabolic adaptation."""
    if total_weight_lost > MIN_LOSS_KG:
        unexpected_drop = abs(bmr_change) - abs(expected_change)
        if unexpected_drop < TOLERANCE_KCAL:
            return MetabolicStatus.HEALTHY
        if bmr_change < expected_change - ADAPTATION_MARGIN_KCAL:
            return MetabolicStatus.ADAPTING
        return MetabolicStatus.HEALTHY

    if abs(bmr_change) <= TOLERANCE_KCAL:
        return MetabolicStatus.HEALTHY
    if bmr_change < -ADAPTATION_MARGIN_KCAL:
        return MetabolicStatus.ADAPTING
    return MetabolicStatus.HEALTHY


def detect_metabolic_adaptation(
    scans: Sequence[BodyCompositionScan],
    today: date,
    period_days: int = 30,
) -> MetabolicResult:
    """Compare the BMR trend over the period with the weight lost.

    Weight loss is taken from the oldest and newest scan in the period;
    the BMR change from the oldest and newest scan that report a BMR.

    Args:
        scans: Body composition scans in any order
        today: Last day of the period
        period_days: Period length in days

    Returns:
        MetabolicResult; insufficient-data unless at least two scans in the
        period carry a BMR
    """
    period_scans = sorted_in_period(scans, today, period_days)
    bmr_scans = [s for s in period_scans if s.has_bmr]

    if len(bmr_scans) < 2:
        return MetabolicResult(
            status=MetabolicStatus.INSUFFICIENT_DATA,
            current_bmr=0.0,
            previous_bmr=0.0,
            bmr_change=0.0,
            expected_bmr_change=0,
            has_data=False,
        )

    total_weight_lost = period_scans[0].weight - period_scans[-1].weight
    previous_bmr = bmr_scans[0].bmr or 0.0
    current_bmr = bmr_scans[-1].bmr or 0.0
    bmr_change = current_bmr - previous_bmr
    expected_change = expected_bmr_change(total_weight_lost)

    return MetabolicResult(
        status=classify_bmr_change(bmr_change, expected_change, total_weight_lost),
        current_bmr=current_bmr,
        previous_bmr=previous_bmr,
        bmr_change=bmr_change,
        expected_bmr_change=expected_change,
        has_data=True,
    )
