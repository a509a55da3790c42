"""Body intelligence report: how the body is responding to the diet.

Combines the independent analyses over one trailing period:

- accumulated deficit and the response score it implies,
- weight-change quality from composition scans,
- metabolic adaptation from scan-measured BMR,
- a confidence tier from the number of logged days.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Mapping, Optional, Sequence

from bodyintel.tracking.confidence import rate_confidence
from bodyintel.tracking.deficit import DEFAULT_PERIOD_DAYS, accumulate_deficit
from bodyintel.tracking.metabolic import detect_metabolic_adaptation
from bodyintel.tracking.models import (
    BodyCompositionScan,
    BodyIntelligenceReport,
    DailyLog,
    FoodItem,
    WeighIn,
)
from bodyintel.tracking.quality import evaluate_quality
from bodyintel.tracking.response import evaluate_response
from bodyintel.tracking.rounding import round_half_up, round_to

logger = logging.getLogger(__name__)


def _round_optional(value: Optional[float]) -> Optional[float]:
    return None if value is None else round_to(value, 1)


def calculate_body_intelligence(
    logs: Sequence[DailyLog],
    weigh_ins: Sequence[WeighIn],
    scans: Sequence[BodyCompositionScan],
    catalog: Mapping[str, FoodItem],
    bmr: float,
    today: date,
    period_days: int = DEFAULT_PERIOD_DAYS,
) -> BodyIntelligenceReport:
    """Analyze the trailing period ending today.

    Args:
        logs: Daily food logs
        weigh_ins: Weigh-ins in kg
        scans: Body composition scans
        catalog: Food items keyed by id
        bmr: Basal metabolic rate in kcal/day
        today: Last day of the period (never read from the clock)
        period_days: Period length in days (default 30)

    Returns:
        BodyIntelligenceReport. When BMR is not positive or no day in the
        period has food logged, the zeroed insufficient-data report.
    """
    deficit = accumulate_deficit(logs, catalog, bmr, today, period_days)
    if not deficit.has_data:
        return BodyIntelligenceReport.insufficient(today, period_days)

    response = evaluate_response(deficit.accumulated_deficit, weigh_ins, today, period_days)
    quality = evaluate_quality(scans, today, period_days)
    metabolic = detect_metabolic_adaptation(scans, today, period_days)
    confidence = rate_confidence(deficit.days_with_data)

    deltas = quality.deltas
    report = BodyIntelligenceReport(
        accumulated_deficit=round_half_up(deficit.accumulated_deficit),
        expected_weight_loss=round_to(response.expected_weight_loss, 1),
        actual_weight_loss=round_to(response.actual_weight_loss, 1),
        response_score=response.response_score,
        response_status=response.response_status,
        fat_lost=_round_optional(deltas.fat_lost) if deltas else None,
        muscle_lost=_round_optional(deltas.muscle_lost) if deltas else None,
        water_change=_round_optional(deltas.water_change) if deltas else None,
        total_weight_lost=round_to(deltas.total_weight_lost, 1) if deltas else 0.0,
        fat_loss_efficiency=quality.efficiency,
        quality_status=quality.status,
        has_composition_data=quality.has_data,
        current_bmr=metabolic.current_bmr,
        previous_bmr=metabolic.previous_bmr,
        bmr_change=round_half_up(metabolic.bmr_change),
        expected_bmr_change=metabolic.expected_bmr_change,
        metabolic_status=metabolic.status,
        has_bmr_data=metabolic.has_data,
        period_days=period_days,
        start_date=today - timedelta(days=period_days),
        end_date=today,
        days_with_data=deficit.days_with_data,
        confidence=confidence.level,
        confidence_message=confidence.message,
        has_enough_data=confidence.has_enough_data,
    )

    logger.debug(
        "Body intelligence: response=%s quality=%s metabolic=%s confidence=%s",
        report.response_status.value,
        report.quality_status.value,
        report.metabolic_status.value,
        report.confidence.value,
    )
    return report
