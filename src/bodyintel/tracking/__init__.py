"""Body intelligence and energy calibration.

Pure functions that reconcile logged food, wearable activity energy,
weigh-ins and body composition scans into derived indicators.

Key components:
- Serving normalization and daily totals
- Accumulated deficit and response score (7700 kcal/kg)
- Weight-change quality across losing, gaining and stable regimes
- Metabolic adaptation from scan-measured BMR
- Wearable TDEE calibrated against the weight trend
"""

from __future__ import annotations

from bodyintel.tracking.body_intelligence import calculate_body_intelligence
from bodyintel.tracking.models import (
    BodyCompositionScan,
    BodyIntelligenceReport,
    ConfidenceLevel,
    DailyLog,
    FoodItem,
    HealthMetricsSnapshot,
    LogEntry,
    MetabolicStatus,
    QualityStatus,
    ResponseStatus,
    WeighIn,
)
from bodyintel.tracking.tdee_calibration import TdeeCalibrationResult, calibrate_tdee

__all__ = [
    "BodyCompositionScan",
    "BodyIntelligenceReport",
    "ConfidenceLevel",
    "DailyLog",
    "FoodItem",
    "HealthMetricsSnapshot",
    "LogEntry",
    "MetabolicStatus",
    "QualityStatus",
    "ResponseStatus",
    "TdeeCalibrationResult",
    "WeighIn",
    "calculate_body_intelligence",
    "calibrate_tdee",
]
