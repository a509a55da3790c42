"""Data confidence tiers from the number of logged days."""

from __future__ import annotations

from dataclasses import dataclass

from bodyintel.tracking.models import ConfidenceLevel

# Minimum logged days for each tier, highest first
CONFIDENCE_THRESHOLDS = (
    (14, ConfidenceLevel.HIGH),
    (7, ConfidenceLevel.MEDIUM),
    (3, ConfidenceLevel.LOW),
)

CONFIDENCE_MESSAGES = {
    ConfidenceLevel.VERY_LOW: (
        "Very early data. Log food for at least 3 days before reading much into these numbers."
    ),
    ConfidenceLevel.LOW: (
        "Early estimate. Daily water and food weight swings can dominate until 7 days are logged."
    ),
    ConfidenceLevel.MEDIUM: (
        "Good data. Trends are meaningful and will sharpen after 14 days of logging."
    ),
    ConfidenceLevel.HIGH: "High confidence based on 14+ days of logged food.",
}


@dataclass(frozen=True)
class ConfidenceRating:
    """Confidence tier with its advisory message."""

    level: ConfidenceLevel
    message: str

    @property
    def has_enough_data(self) -> bool:
        return self.level in (ConfidenceLevel.MEDIUM, ConfidenceLevel.HIGH)


def confidence_level(days_with_data: int) -> ConfidenceLevel:
    """Map a count of logged days to a confidence tier."""
    for min_days, level in CONFIDENCE_THRESHOLDS:
        if days_with_data >= min_days:
            return level
    return ConfidenceLevel.VERY_LOW


def rate_confidence(days_with_data: int) -> ConfidenceRating:
    """Rate the reliability of an analysis.

    Args:
        days_with_data: Days in the period with food logged

    Returns:
        ConfidenceRating: very-low below 3 days, low for 3-6, medium for
        7-13 and high from 14 days
    """
    level = confidence_level(days_with_data)
    return ConfidenceRating(level=level, message=CONFIDENCE_MESSAGES[level])
