"""Human-readable interpretations of report statuses.

These map a status (plus the numbers behind it) to a short label and
message for direct display. They hold no business logic beyond wording.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bodyintel.tracking.confidence import CONFIDENCE_MESSAGES
from bodyintel.tracking.models import (
    ConfidenceLevel,
    MetabolicStatus,
    QualityStatus,
    ResponseStatus,
)

GREEN = "#10b981"
AMBER = "#f59e0b"
PURPLE = "#8b5cf6"
RED = "#ef4444"
GRAY = "#6b7280"


@dataclass(frozen=True)
class Interpretation:
    """Display label, message and color for a status."""

    status: str
    message: str
    color: str


def interpret_response(score: int, status: ResponseStatus) -> Interpretation:
    """Explain a response score."""
    if status == ResponseStatus.NORMAL:
        return Interpretation(
            status="On Track",
            message="Your body is responding as expected to your calorie deficit.",
            color=GREEN,
        )
    if status == ResponseStatus.SLOW:
        if score < 50:
            message = "Water retention or metabolic adaptation may be occurring. Stay consistent!"
        else:
            message = "Slightly slower than expected. This is normal and may correct itself."
        return Interpretation(status="Slower Than Expected", message=message, color=AMBER)
    if status == ResponseStatus.FAST:
        if score > 150:
            message = "You may be losing water weight or muscle. Consider slowing down."
        else:
            message = "Slightly faster than expected. Monitor your muscle retention."
        return Interpretation(status="Faster Than Expected", message=message, color=PURPLE)

    return Interpretation(
        status="Insufficient Data",
        message="Log at least 7 days of food and 2 weigh-ins to see your body response.",
        color=GRAY,
    )


def interpret_quality(
    efficiency: int,
    status: QualityStatus,
    total_weight_lost: float = 0.0,
    fat_lost: Optional[float] = None,
    muscle_lost: Optional[float] = None,
) -> Interpretation:
    """Explain a weight-change quality status.

    The weight and composition deltas pick the wording for recomposition,
    bulking and maintenance, which share statuses with weight loss.
    """
    if status == QualityStatus.INSUFFICIENT_DATA:
        return Interpretation(
            status="Insufficient Data",
            message=(
                "Need 2+ InBody scans reporting fat and muscle mass to analyze "
                "the quality of your weight change."
            ),
            color=GRAY,
        )

    gaining = total_weight_lost < -0.1
    stable = abs(total_weight_lost) <= 0.1

    if status == QualityStatus.EXCELLENT:
        if gaining:
            return Interpretation(
                status="Quality Bulk",
                message=f"{efficiency}% of your weight gain is muscle. Great lean gains!",
                color=GREEN,
            )
        if stable:
            if fat_lost is not None and fat_lost > 0:
                message = (
                    f"You lost {fat_lost:.1f} kg of fat at a stable weight: "
                    "textbook body recomposition."
                )
            else:
                message = "You're losing fat while keeping muscle: textbook body recomposition."
            return Interpretation(status="Excellent Recomp", message=message, color=GREEN)
        return Interpretation(
            status="Excellent",
            message=f"{efficiency}% of your weight loss is from fat. You're preserving muscle well!",
            color=GREEN,
        )

    if status == QualityStatus.GOOD:
        if stable and efficiency == 0:
            return Interpretation(
                status="Maintaining",
                message="Weight and body composition are holding steady.",
                color=GREEN,
            )
        if gaining:
            return Interpretation(
                status="Good",
                message=f"{efficiency}% of your gain is muscle. Keep protein high to improve it.",
                color=AMBER,
            )
        return Interpretation(
            status="Good",
            message=(
                f"{efficiency}% from fat. Consider adding resistance training "
                "to preserve more muscle."
            ),
            color=AMBER,
        )

    if gaining:
        message = "Most of your weight gain is not muscle. Review your surplus and training."
    elif stable:
        message = "Weight is stable but you're losing muscle or gaining fat. Prioritize protein."
    elif muscle_lost is not None and muscle_lost > 0:
        message = (
            f"Only {efficiency}% from fat and {muscle_lost:.1f} kg of muscle lost. "
            "Slow down and add protein."
        )
    else:
        message = f"Only {efficiency}% from fat. You may be losing muscle. Slow down and add protein."
    return Interpretation(status="Needs Attention", message=message, color=RED)


def interpret_metabolic(
    status: MetabolicStatus,
    bmr_change: float,
    expected_bmr_change: float = 0,
) -> Interpretation:
    """Explain a metabolic adaptation status.

    The adapting message reports the drop beyond what the weight lost
    explains, not the whole BMR change.
    """
    if status == MetabolicStatus.HEALTHY:
        return Interpretation(
            status="Healthy",
            message="No signs of metabolic adaptation. Your metabolism is responding normally.",
            color=GREEN,
        )
    if status == MetabolicStatus.ADAPTING:
        excess = abs(bmr_change) - abs(expected_bmr_change)
        return Interpretation(
            status="Adapting",
            message=(
                f"BMR dropped {abs(bmr_change):.0f} cal, {excess:.0f} cal more than "
                "your weight loss explains. "
                "Consider a diet break or refeed."
            ),
            color=AMBER,
        )
    return Interpretation(
        status="Insufficient Data",
        message="Need 2+ InBody scans with BMR to track metabolic adaptation.",
        color=GRAY,
    )


CONFIDENCE_LABELS = {
    ConfidenceLevel.HIGH: ("High", GREEN),
    ConfidenceLevel.MEDIUM: ("Good", GREEN),
    ConfidenceLevel.LOW: ("Early", AMBER),
    ConfidenceLevel.VERY_LOW: ("Very Early", GRAY),
}


def interpret_confidence(level: ConfidenceLevel) -> Interpretation:
    """Explain a confidence tier."""
    label, color = CONFIDENCE_LABELS[level]
    return Interpretation(status=label, message=CONFIDENCE_MESSAGES[level], color=color)
