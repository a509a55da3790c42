"""Load tracking history from exported JSON/YAML files and CSV weigh-ins.

History file format (JSON or YAML; camelCase keys from the app export are
accepted alongside snake_case):

    foods:
      - {id: oats, name: Oats, calories: 380, protein: 13, servingSize: 100}
    logs:
      - date: 2025-01-01
        meals: [oats, {mealId: oats, quantity: 50, unit: g}]
        workoutCalories: 200
        healthMetrics: {restingEnergy: 1650, activeEnergy: 420}
    weigh_ins:
      - {date: 2025-01-01, weight: 80.2}
    scans:
      - {date: 2025-01-01, weight: 80.2, bodyFatPercent: 24, fatMass: 19.2, bmr: 1700}
    profile: {height_cm: 178, age: 35, sex: male}
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import yaml

from bodyintel.tracking.models import (
    BodyCompositionScan,
    DailyLog,
    FoodItem,
    HealthMetricsSnapshot,
    History,
    WeighIn,
)
from bodyintel.tracking.weights import VALID_WEIGHT_UNITS, convert_to_kg

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_keys(raw: dict[str, Any]) -> dict[str, Any]:
    """Convert camelCase keys to snake_case (existing snake_case is kept)."""
    return {_CAMEL_BOUNDARY.sub("_", key).lower(): value for key, value in raw.items()}


def _require_mapping(raw: Any, kind: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValueError(f"{kind} must be a mapping, got {type(raw).__name__}: {raw!r}")
    return raw


def _records(data: dict[str, Any], *keys: str) -> list[Any]:
    """First non-empty section among keys; a section must be a list."""
    for key in keys:
        section = data.get(key)
        if section:
            if not isinstance(section, list):
                raise ValueError(f"Section '{key}' must be a list, got {type(section).__name__}")
            return section
    return []


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def parse_food(raw: dict[str, Any]) -> FoodItem:
    """Build a FoodItem from a mapping."""
    data = _snake_keys(_require_mapping(raw, "Food"))
    item_id = data.get("item_id", data.get("id"))
    if item_id is None:
        raise ValueError(f"Food has no id: {raw!r}")
    return FoodItem(
        item_id=str(item_id),
        name=data.get("name") or str(item_id),
        calories=float(data.get("calories") or 0),
        protein=float(data.get("protein") or 0),
        carbs=float(data.get("carbs") or 0),
        fat=float(data.get("fat") or 0),
        fiber=float(data.get("fiber") or 0),
        sugar=float(data.get("sugar") or 0),
        serving_size=_optional_float(data.get("serving_size")),
        serving_unit=data.get("serving_unit") or "g",
        deleted=bool(data.get("deleted") or data.get("deleted_at")),
    )


def parse_health_metrics(raw: Optional[dict[str, Any]]) -> Optional[HealthMetricsSnapshot]:
    """Build a HealthMetricsSnapshot from a mapping, if present."""
    if not raw:
        return None
    data = _snake_keys(_require_mapping(raw, "Health metrics"))
    steps = data.get("steps")
    return HealthMetricsSnapshot(
        resting_energy=_optional_float(data.get("resting_energy")),
        active_energy=_optional_float(data.get("active_energy")),
        steps=int(steps) if steps is not None else None,
        exercise_minutes=_optional_float(data.get("exercise_minutes")),
        stand_hours=_optional_float(data.get("stand_hours")),
    )


def parse_log(raw: dict[str, Any]) -> DailyLog:
    """Build a DailyLog from a mapping, normalizing legacy entries."""
    data = _snake_keys(_require_mapping(raw, "Log"))
    if "date" not in data:
        raise ValueError(f"Log has no date: {raw!r}")
    entries = data.get("entries", data.get("meals")) or []
    return DailyLog.from_raw(
        _parse_date(data["date"]),
        entries,
        health_metrics=parse_health_metrics(data.get("health_metrics")),
        workout_calories=float(data.get("workout_calories") or 0),
    )


def parse_weigh_in(raw: dict[str, Any]) -> WeighIn:
    """Build a WeighIn from a mapping; weight is taken as kilograms."""
    _require_mapping(raw, "Weigh-in")
    if "date" not in raw or raw.get("weight") is None:
        raise ValueError(f"Weigh-in needs a date and weight: {raw!r}")
    return WeighIn(date=_parse_date(raw["date"]), weight=float(raw["weight"]))


def parse_scan(raw: dict[str, Any]) -> BodyCompositionScan:
    """Build a BodyCompositionScan from a mapping."""
    data = _snake_keys(_require_mapping(raw, "Scan"))
    if "date" not in data or data.get("weight") is None:
        raise ValueError(f"Scan needs a date and weight: {raw!r}")
    body_age = data.get("body_age")
    return BodyCompositionScan(
        date=_parse_date(data["date"]),
        weight=float(data["weight"]),
        body_fat_percent=float(data.get("body_fat_percent") or 0),
        muscle_mass=_optional_float(data.get("muscle_mass")),
        skeletal_muscle=_optional_float(data.get("skeletal_muscle")),
        bmr=_optional_float(data.get("bmr")),
        fat_mass=_optional_float(data.get("fat_mass")),
        visceral_fat=_optional_float(data.get("visceral_fat")),
        water_weight=_optional_float(data.get("water_weight")),
        trunk_fat_mass=_optional_float(data.get("trunk_fat_mass")),
        body_age=int(body_age) if body_age is not None else None,
        protein_mass=_optional_float(data.get("protein_mass")),
        bone_mass=_optional_float(data.get("bone_mass")),
    )


def parse_history(data: dict[str, Any]) -> History:
    """Build a History from a parsed history document."""
    data = _snake_keys(data)
    profile = _snake_keys(_require_mapping(data.get("profile") or {}, "Profile"))
    age = profile.get("age")

    history = History(
        foods=[parse_food(f) for f in _records(data, "foods", "meals")],
        logs=[parse_log(log) for log in _records(data, "logs", "daily_logs")],
        weigh_ins=[parse_weigh_in(w) for w in _records(data, "weigh_ins")],
        scans=[parse_scan(s) for s in _records(data, "scans", "in_body_scans")],
        height_cm=_optional_float(profile.get("height_cm")),
        age=int(age) if age is not None else None,
        sex=profile.get("sex") or profile.get("gender"),
    )
    logger.debug(
        "Loaded %d foods, %d logs, %d weigh-ins, %d scans",
        len(history.foods),
        len(history.logs),
        len(history.weigh_ins),
        len(history.scans),
    )
    return history


def load_history(path: Path) -> History:
    """Load a history file (JSON or YAML).

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        History with every record parsed

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping or a record is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"History file not found: {path}")

    with open(path) as f:
        try:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Invalid history file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"History file must contain a mapping, got {type(data).__name__}")

    return parse_history(data)


class WeighInCsvLoader:
    """Handles importing weigh-ins from CSV files."""

    REQUIRED_COLUMNS = ["date", "weight"]
    OPTIONAL_COLUMNS = ["unit"]

    def __init__(self, default_unit: str = "kg"):
        """Initialize the loader.

        Args:
            default_unit: Unit for rows without a unit column ('kg' or 'lbs')
        """
        if default_unit not in VALID_WEIGHT_UNITS:
            raise ValueError(
                f"default_unit must be one of {VALID_WEIGHT_UNITS}, got '{default_unit}'"
            )
        self.default_unit = default_unit

    def load_from_csv(self, csv_path: Path) -> tuple[list[WeighIn], dict[str, int]]:
        """Load weigh-ins from a CSV file.

        CSV format:
            date,weight,unit
            2025-01-15,80.4,kg
            2025-01-16,176.9,lbs

        Args:
            csv_path: Path to the CSV file

        Returns:
            Tuple of (weigh-ins in kg, counts dict with 'loaded',
            'skipped_missing_weight', 'skipped_invalid_date' and
            'skipped_invalid_unit')

        Raises:
            ValueError: If required columns are missing
        """
        df = pd.read_csv(csv_path)

        # Validate required columns
        missing = set(self.REQUIRED_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Required columns are: {self.REQUIRED_COLUMNS}"
            )

        weigh_ins: list[WeighIn] = []
        skipped_missing_weight = 0
        skipped_invalid_date = 0
        skipped_invalid_unit = 0

        for _, row in df.iterrows():
            weight = row["weight"]

            # Skip if missing weight
            if pd.isna(weight):
                skipped_missing_weight += 1
                continue

            try:
                measured_at = _parse_date(row["date"])
            except ValueError:
                skipped_invalid_date += 1
                continue

            unit = self.default_unit
            if "unit" in df.columns and not pd.isna(row["unit"]):
                unit = str(row["unit"]).strip().lower()
            if unit not in VALID_WEIGHT_UNITS:
                skipped_invalid_unit += 1
                continue

            weigh_ins.append(WeighIn(date=measured_at, weight=convert_to_kg(float(weight), unit)))

        if skipped_missing_weight or skipped_invalid_date or skipped_invalid_unit:
            logger.warning(
                "Skipped %d rows without weight, %d with invalid dates "
                "and %d with unknown units in %s",
                skipped_missing_weight,
                skipped_invalid_date,
                skipped_invalid_unit,
                csv_path,
            )

        return weigh_ins, {
            "loaded": len(weigh_ins),
            "skipped_missing_weight": skipped_missing_weight,
            "skipped_invalid_date": skipped_invalid_date,
            "skipped_invalid_unit": skipped_invalid_unit,
        }


def merge_weigh_ins(existing: list[WeighIn], imported: list[WeighIn]) -> list[WeighIn]:
    """Merge weigh-in series, keeping one reading per date (imported wins)."""
    by_date = {w.date: w for w in existing}
    for w in imported:
        by_date[w.date] = w
    return sorted(by_date.values(), key=lambda w: w.date)
