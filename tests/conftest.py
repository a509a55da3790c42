"""Pytest fixtures for bodyintel tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

import pytest

from bodyintel.tracking.models import (
    BodyCompositionScan,
    DailyLog,
    FoodItem,
    HealthMetricsSnapshot,
    WeighIn,
)
from bodyintel.tracking.servings import build_catalog

TODAY = date(2025, 6, 30)


@pytest.fixture
def today() -> date:
    """Fixed analysis date so period windows are deterministic."""
    return TODAY


@pytest.fixture
def catalog() -> dict[str, FoodItem]:
    """Small food catalog with round calorie values."""
    return build_catalog([
        FoodItem(item_id="meal", name="Test meal", calories=500, protein=30, carbs=50, fat=15,
                 serving_size=100),
        FoodItem(item_id="snack", name="Snack bar", calories=200, protein=10, carbs=25, fat=7,
                 serving_size=50),
        FoodItem(item_id="gone", name="Deleted food", calories=300, deleted=True),
    ])


@pytest.fixture
def make_log():
    """Factory for a daily log dated N days before TODAY."""

    def _make(
        days_ago: int,
        meals: float = 1.0,
        snacks: int = 0,
        resting_energy: Optional[float] = None,
        active_energy: Optional[float] = None,
        workout_calories: float = 0.0,
    ) -> DailyLog:
        entries: list = []
        if meals:
            entries.append({"item_id": "meal", "quantity": meals, "unit": "serving"})
        entries.extend(["snack"] * snacks)

        metrics = None
        if resting_energy is not None or active_energy is not None:
            metrics = HealthMetricsSnapshot(
                resting_energy=resting_energy,
                active_energy=active_energy,
            )
        return DailyLog.from_raw(
            TODAY - timedelta(days=days_ago),
            entries,
            health_metrics=metrics,
            workout_calories=workout_calories,
        )

    return _make


@pytest.fixture
def make_weigh_in():
    """Factory for a weigh-in dated N days before TODAY."""

    def _make(days_ago: int, weight: float) -> WeighIn:
        return WeighIn(date=TODAY - timedelta(days=days_ago), weight=weight)

    return _make


@pytest.fixture
def make_scan():
    """Factory for a body composition scan dated N days before TODAY."""

    def _make(
        days_ago: int,
        weight: float,
        fat_mass: Optional[float] = None,
        muscle_mass: Optional[float] = None,
        bmr: Optional[float] = None,
        water_weight: Optional[float] = None,
        body_fat_percent: Optional[float] = None,
    ) -> BodyCompositionScan:
        if body_fat_percent is None:
            body_fat_percent = fat_mass / weight * 100 if fat_mass is not None and weight else 0.0
        return BodyCompositionScan(
            date=TODAY - timedelta(days=days_ago),
            weight=weight,
            body_fat_percent=body_fat_percent,
            fat_mass=fat_mass,
            muscle_mass=muscle_mass,
            bmr=bmr,
            water_weight=water_weight,
        )

    return _make
