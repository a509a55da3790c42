"""Serving normalization and daily consumption totals.

A log entry records a quantity in servings, grams, millilitres or ounces.
Catalog nutrition is per serving, so each entry is converted into a serving
multiplier before its calories and macros are added to the day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from bodyintel.tracking.models import DailyLog, FoodItem
from bodyintel.tracking.rounding import round_half_up

logger = logging.getLogger(__name__)

GRAMS_PER_OUNCE = 28.35
DEFAULT_SERVING_SIZE = 100.0


@dataclass(frozen=True)
class NutritionTotals:
    """Summed nutrition for one day."""

    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    fiber: int = 0
    sugar: int = 0


def serving_multiplier(
    quantity: float,
    unit: str,
    serving_size: Optional[float] = None,
) -> float:
    """Convert a logged quantity into a multiplier of the item's serving.

    Millilitres are treated as grams (1 ml = 1 g). This is a simplification,
    not a density conversion.

    Args:
        quantity: Logged amount
        unit: 'serving', 'g', 'ml' or 'oz'
        serving_size: Item serving size in grams (default 100)

    Returns:
        Multiplier applied to per-serving nutrition

    Example:
        >>> serving_multiplier(150, "g", 100)
        1.5
        >>> serving_multiplier(1, "oz", 28.35)
        1.0
    """
    if unit == "serving":
        return quantity

    size = serving_size or DEFAULT_SERVING_SIZE

    if unit in ("g", "ml"):
        return quantity / size
    if unit == "oz":
        return (quantity * GRAMS_PER_OUNCE) / size

    return quantity


def build_catalog(items: Iterable[FoodItem]) -> dict[str, FoodItem]:
    """Index food items by id for log lookups."""
    return {item.item_id: item for item in items}


def daily_totals(log: DailyLog, catalog: Mapping[str, FoodItem]) -> NutritionTotals:
    """Sum calories and macros for every entry in a daily log.

    Entries pointing at a missing or soft-deleted food contribute nothing.
    Each entry is rounded before summing, so the day total matches the sum
    of the per-entry figures shown to the user.

    Args:
        log: Daily log to total
        catalog: Food items keyed by id

    Returns:
        NutritionTotals for the day
    """
    calories = protein = carbs = fat = fiber = sugar = 0

    for entry in log.entries:
        item = catalog.get(entry.item_id)
        if item is None or item.deleted:
            logger.debug("Skipping entry for unknown food %s on %s", entry.item_id, log.date)
            continue

        multiplier = serving_multiplier(entry.quantity, entry.unit, item.serving_size)
        calories += round_half_up(item.calories * multiplier)
        protein += round_half_up(item.protein * multiplier)
        carbs += round_half_up(item.carbs * multiplier)
        fat += round_half_up(item.fat * multiplier)
        fiber += round_half_up(item.fiber * multiplier)
        sugar += round_half_up(item.sugar * multiplier)

    return NutritionTotals(
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=fiber,
        sugar=sugar,
    )


def daily_calories(log: DailyLog, catalog: Mapping[str, FoodItem]) -> int:
    """Total calories eaten on a logged day."""
    return daily_totals(log, catalog).calories
