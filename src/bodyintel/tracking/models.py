"""Data models for food logging, weigh-ins and body composition scans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Optional, Union

# Valid units for validation
VALID_LOG_UNITS = ("serving", "g", "ml", "oz")
VALID_SERVING_UNITS = ("g", "ml", "oz")


class ResponseStatus(Enum):
    """How the body responded to the accumulated deficit."""
    NORMAL = "normal"
    SLOW = "slow"
    FAST = "fast"
    INSUFFICIENT_DATA = "insufficient-data"


class QualityStatus(Enum):
    """Quality of a weight change judged from composition scans."""
    EXCELLENT = "excellent"
    GOOD = "good"
    CONCERNING = "concerning"
    INSUFFICIENT_DATA = "insufficient-data"


class MetabolicStatus(Enum):
    """Whether BMR is drifting beyond what weight loss explains."""
    HEALTHY = "healthy"
    ADAPTING = "adapting"
    INSUFFICIENT_DATA = "insufficient-data"


class ConfidenceLevel(Enum):
    """Reliability tier driven by the number of logged days."""
    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class FoodItem:
    """A catalog food with nutrition per serving."""

    item_id: str
    name: str
    calories: float
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    serving_size: Optional[float] = None  # default of 100 applied at lookup
    serving_unit: str = "g"  # 'g', 'ml' or 'oz'
    deleted: bool = False

    def __post_init__(self) -> None:
        if self.serving_unit not in VALID_SERVING_UNITS:
            raise ValueError(
                f"serving_unit must be one of {VALID_SERVING_UNITS}, got '{self.serving_unit}'"
            )


@dataclass(frozen=True)
class LogEntry:
    """A single food entry in a daily log."""

    item_id: str
    quantity: float = 1.0
    unit: str = "serving"  # 'serving', 'g', 'ml' or 'oz'

    def __post_init__(self) -> None:
        if self.unit not in VALID_LOG_UNITS:
            raise ValueError(f"unit must be one of {VALID_LOG_UNITS}, got '{self.unit}'")

    @classmethod
    def from_raw(cls, raw: Union[str, dict[str, Any], "LogEntry"]) -> "LogEntry":
        """Normalize a stored entry into a LogEntry.

        Legacy logs store a bare item identifier, which means one serving.
        Newer logs store a mapping with the item id, quantity and unit.

        Args:
            raw: Bare identifier, mapping, or an existing LogEntry

        Returns:
            Canonical LogEntry
        """
        if isinstance(raw, LogEntry):
            return raw
        if isinstance(raw, str):
            return cls(item_id=raw)

        item_id = raw.get("item_id", raw.get("mealId", raw.get("meal_id")))
        if item_id is None:
            raise ValueError(f"Log entry has no item id: {raw!r}")
        quantity = raw.get("quantity")
        return cls(
            item_id=str(item_id),
            quantity=1.0 if quantity is None else float(quantity),
            unit=raw.get("unit") or "serving",
        )


@dataclass(frozen=True)
class HealthMetricsSnapshot:
    """Wearable activity data for one day."""

    resting_energy: Optional[float] = None  # kcal
    active_energy: Optional[float] = None  # kcal
    steps: Optional[int] = None
    exercise_minutes: Optional[float] = None
    stand_hours: Optional[float] = None


@dataclass(frozen=True)
class DailyLog:
    """Everything logged for one calendar date."""

    date: date
    entries: tuple[LogEntry, ...] = ()
    health_metrics: Optional[HealthMetricsSnapshot] = None
    workout_calories: float = 0.0  # manual fallback without wearable data

    @classmethod
    def from_raw(
        cls,
        log_date: date,
        entries: list[Union[str, dict[str, Any], LogEntry]],
        health_metrics: Optional[HealthMetricsSnapshot] = None,
        workout_calories: float = 0.0,
    ) -> "DailyLog":
        """Build a log, normalizing every entry at the boundary."""
        return cls(
            date=log_date,
            entries=tuple(LogEntry.from_raw(e) for e in entries),
            health_metrics=health_metrics,
            workout_calories=workout_calories,
        )

    @property
    def active_energy(self) -> float:
        """Wearable active energy, falling back to manual workout calories."""
        if self.health_metrics is not None and self.health_metrics.active_energy:
            return self.health_metrics.active_energy
        return self.workout_calories or 0.0

    @property
    def resting_energy(self) -> float:
        """Wearable resting energy, or 0 without a snapshot."""
        if self.health_metrics is None:
            return 0.0
        return self.health_metrics.resting_energy or 0.0


@dataclass(frozen=True)
class WeighIn:
    """A body weight reading, always stored in kilograms."""

    date: date
    weight: float

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")


@dataclass(frozen=True)
class BodyCompositionScan:
    """A body composition scan (e.g. InBody) report.

    Optional measurements are None when the scan did not report them.
    """

    date: date
    weight: float
    body_fat_percent: float
    muscle_mass: Optional[float] = None
    skeletal_muscle: Optional[float] = None
    bmr: Optional[float] = None
    fat_mass: Optional[float] = None
    visceral_fat: Optional[float] = None
    water_weight: Optional[float] = None
    trunk_fat_mass: Optional[float] = None
    body_age: Optional[int] = None
    protein_mass: Optional[float] = None
    bone_mass: Optional[float] = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")

    @property
    def has_bmr(self) -> bool:
        return self.bmr is not None and self.bmr > 0


@dataclass
class BodyIntelligenceReport:
    """Derived indicators for one analysis period."""

    # Response score
    accumulated_deficit: int
    expected_weight_loss: float  # kg
    actual_weight_loss: float  # kg, positive = lost
    response_score: int
    response_status: ResponseStatus

    # Weight quality (from composition scans)
    fat_lost: Optional[float]  # kg, None when a scan lacks fat mass
    muscle_lost: Optional[float]  # kg, negative = gained
    water_change: Optional[float]  # kg
    total_weight_lost: float  # kg, negative = gained
    fat_loss_efficiency: int
    quality_status: QualityStatus
    has_composition_data: bool

    # Metabolic health
    current_bmr: float
    previous_bmr: float
    bmr_change: int
    expected_bmr_change: int
    metabolic_status: MetabolicStatus
    has_bmr_data: bool

    # Period analyzed
    period_days: int
    start_date: date
    end_date: date
    days_with_data: int

    # Data confidence
    confidence: ConfidenceLevel
    confidence_message: str
    has_enough_data: bool

    @classmethod
    def insufficient(cls, today: date, period_days: int) -> "BodyIntelligenceReport":
        """Return the zeroed report used whenever no day carries data."""
        from bodyintel.tracking.confidence import rate_confidence

        rating = rate_confidence(0)
        return cls(
            accumulated_deficit=0,
            expected_weight_loss=0.0,
            actual_weight_loss=0.0,
            response_score=0,
            response_status=ResponseStatus.INSUFFICIENT_DATA,
            fat_lost=None,
            muscle_lost=None,
            water_change=None,
            total_weight_lost=0.0,
            fat_loss_efficiency=0,
            quality_status=QualityStatus.INSUFFICIENT_DATA,
            has_composition_data=False,
            current_bmr=0.0,
            previous_bmr=0.0,
            bmr_change=0,
            expected_bmr_change=0,
            metabolic_status=MetabolicStatus.INSUFFICIENT_DATA,
            has_bmr_data=False,
            period_days=period_days,
            start_date=today - timedelta(days=period_days),
            end_date=today,
            days_with_data=0,
            confidence=rating.level,
            confidence_message=rating.message,
            has_enough_data=rating.has_enough_data,
        )


@dataclass
class History:
    """All series needed for an analysis, as loaded from a history file."""

    foods: list[FoodItem] = field(default_factory=list)
    logs: list[DailyLog] = field(default_factory=list)
    weigh_ins: list[WeighIn] = field(default_factory=list)
    scans: list[BodyCompositionScan] = field(default_factory=list)
    height_cm: Optional[float] = None
    age: Optional[int] = None
    sex: Optional[str] = None
