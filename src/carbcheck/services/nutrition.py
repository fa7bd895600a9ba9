"""Nutrient scaling and meal aggregation."""

import logging
from collections.abc import Sequence

from carbcheck.domain.errors import InvalidGrams
from carbcheck.domain.foods import FoodRecord
from carbcheck.domain.nutrition import MacroDistribution, MealTotals, ScaledNutrition

CARB_KCAL_PER_G = 4
PROTEIN_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

_logger = logging.getLogger(__name__)


def scale(record: FoodRecord, grams: float) -> ScaledNutrition:
    """Scale a food's per-100g nutrients to an actual gram amount.

    Calories come from the record when the dataset supplied an energy value,
    otherwise they are derived from the scaled macros.

    Raises:
        InvalidGrams: if grams is negative.
    """
    if grams < 0:
        raise InvalidGrams(f"Grams must be >= 0, got {grams}")
    factor = grams / 100.0
    carbs = record.carbs_per_100g * factor
    fiber = record.fiber_per_100g * factor
    protein = record.protein_per_100g * factor
    fat = record.fat_per_100g * factor
    if record.calories_per_100g is not None:
        calories = record.calories_per_100g * factor
    else:
        calories = estimate_calories(carbs, protein, fat)
    return ScaledNutrition(
        food_name=record.description,
        grams=grams,
        carbs=carbs,
        fiber=fiber,
        net_carbs=max(0.0, carbs - fiber),
        protein=protein,
        fat=fat,
        calories=calories,
    )


def aggregate(items: Sequence[ScaledNutrition]) -> MealTotals:
    """Sum scaled items into meal totals; an empty meal is all zeros."""
    totals = {
        "carbs": 0.0,
        "fiber": 0.0,
        "net_carbs": 0.0,
        "protein": 0.0,
        "fat": 0.0,
        "calories": 0.0,
    }
    for item in items:
        totals["carbs"] += item.carbs
        totals["fiber"] += item.fiber
        totals["net_carbs"] += item.net_carbs
        totals["protein"] += item.protein
        totals["fat"] += item.fat
        totals["calories"] += item.calories
    if items:
        _logger.debug(
            "Meal totals: items=%s carbs=%.1f calories=%.0f",
            len(items),
            totals["carbs"],
            totals["calories"],
        )
    return MealTotals(
        items=list(items),
        total_carbs=totals["carbs"],
        total_fiber=totals["fiber"],
        total_net_carbs=totals["net_carbs"],
        total_protein=totals["protein"],
        total_fat=totals["fat"],
        total_calories=totals["calories"],
        item_count=len(items),
        distribution=macro_distribution(
            totals["carbs"], totals["protein"], totals["fat"]
        ),
    )


def macro_distribution(carbs: float, protein: float, fat: float) -> MacroDistribution:
    """Return each macro's share of derived calories, all zero when empty."""
    carb_kcal = carbs * CARB_KCAL_PER_G
    protein_kcal = protein * PROTEIN_KCAL_PER_G
    fat_kcal = fat * FAT_KCAL_PER_G
    total = carb_kcal + protein_kcal + fat_kcal
    if total <= 0:
        return MacroDistribution()
    return MacroDistribution(
        carbs_pct=carb_kcal / total * 100,
        protein_pct=protein_kcal / total * 100,
        fat_pct=fat_kcal / total * 100,
    )


def estimate_calories(carbs: float, protein: float, fat: float) -> float:
    return (
        carbs * CARB_KCAL_PER_G + protein * PROTEIN_KCAL_PER_G + fat * FAT_KCAL_PER_G
    )


def rescale(item: ScaledNutrition, grams: float) -> ScaledNutrition:
    """Return the same food at a different gram weight.

    Raises:
        InvalidGrams: if grams is negative.
    """
    if grams < 0:
        raise InvalidGrams(f"Grams must be >= 0, got {grams}")
    factor = grams / item.grams if item.grams else 1.0
    return item.model_copy(
        update={
            "grams": grams,
            "carbs": item.carbs * factor,
            "fiber": item.fiber * factor,
            "net_carbs": item.net_carbs * factor,
            "protein": item.protein * factor,
            "fat": item.fat * factor,
            "calories": item.calories * factor,
        }
    )


def normalize_to_100g(item: ScaledNutrition) -> ScaledNutrition:
    return rescale(item, 100.0)


def validate_nutrition(item: ScaledNutrition) -> str | None:
    """Return a message describing an inconsistent item, or None."""
    if item.grams <= 0:
        return "Grams must be greater than 0"
    if item.fiber > item.carbs:
        return "Fiber cannot exceed carbs"
    if abs(item.net_carbs - max(0.0, item.carbs - item.fiber)) > 1e-9:
        return "Net carbs must equal carbs minus fiber"
    return None
