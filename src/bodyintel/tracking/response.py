"""Response score: actual vs. expected weight change.

The expected loss comes from the accumulated deficit using the usual
approximation of 7700 kcal per kg of body weight. The actual loss compares
the first and last weigh-in of the period (raw endpoints, no smoothing).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from bodyintel.tracking.models import ResponseStatus, WeighIn
from bodyintel.tracking.rounding import round_half_up
from bodyintel.tracking.weights import sorted_in_period

KCAL_PER_KG = 7700

# Expected losses at or below this are too small to score against
MIN_EXPECTED_LOSS_KG = 0.1

# Response score band considered on track
NORMAL_SCORE_RANGE = (80, 120)


@dataclass(frozen=True)
class ResponseResult:
    """Expected vs. actual weight loss for a period."""

    expected_weight_loss: float  # kg
    actual_weight_loss: float  # kg, positive = lost
    response_score: int
    response_status: ResponseStatus
    weigh_in_count: int


def expected_weight_loss(accumulated_deficit: float) -> float:
    """Weight loss in kg implied by a deficit; never negative."""
    return max(0.0, accumulated_deficit / KCAL_PER_KG)


def classify_response(score: int) -> ResponseStatus:
    """Map a response score onto its status band."""
    low, high = NORMAL_SCORE_RANGE
    if low <= score <= high:
        return ResponseStatus.NORMAL
    if score < low:
        return ResponseStatus.SLOW
    return ResponseStatus.FAST


def evaluate_response(
    accumulated_deficit: float,
    weigh_ins: Sequence[WeighIn],
    today: date,
    period_days: int = 30,
) -> ResponseResult:
    """Compare the weight change implied by a deficit with the scale.

    Args:
        accumulated_deficit: Total deficit over the period (kcal)
        weigh_ins: Weigh-in series in any order
        today: Last day of the period
        period_days: Period length in days

    Returns:
        ResponseResult. The score is only computed when more than 0.1 kg of
        loss is expected and at least two weigh-ins fall in the period;
        otherwise the status is insufficient-data and the score is 0.
    """
    expected = expected_weight_loss(accumulated_deficit)
    period_weigh_ins = sorted_in_period(weigh_ins, today, period_days)

    actual = 0.0
    if len(period_weigh_ins) >= 2:
        actual = period_weigh_ins[0].weight - period_weigh_ins[-1].weight

    if expected > MIN_EXPECTED_LOSS_KG and len(period_weigh_ins) >= 2:
        score = round_half_up(actual / expected * 100)
        status = classify_response(score)
    else:
        score = 0
        status = ResponseStatus.INSUFFICIENT_DATA

    return ResponseResult(
        expected_weight_loss=expected,
        actual_weight_loss=actual,
        response_score=score,
        response_status=status,
        weigh_in_count=len(period_weigh_ins),
    )
