"""Serving size calculations.

Portion labels come in two families. Size labels (Small/Medium/Large, plus
"Serving") scale the food's standard serving. Unit labels ("100 g",
"1 cup cooked") name an absolute gram weight per unit. Both end up as grams
here, so nutrient scaling only ever sees one unit system.
"""

import logging
import re

from carbcheck.domain.errors import InvalidQuantity, InvalidServingSize
from carbcheck.domain.foods import FoodRecord
from carbcheck.domain.portions import (
    LARGE,
    MEDIUM,
    PORTION_MULTIPLIERS,
    SERVING,
    SMALL,
)
from carbcheck.services.aliases import household_units, is_valid_portion

_GRAM_LABEL = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(?:g|gram|grams)\s*$", re.IGNORECASE
)

_logger = logging.getLogger(__name__)


def portion_multiplier(label: str) -> float:
    """Return the size multiplier for a label, 1.0 when unrecognised."""
    if label == SERVING:
        return 1.0
    return PORTION_MULTIPLIERS.get(label, 1.0)


def grams_for(record: FoodRecord, portion_label: str, quantity: int) -> float:
    """Return the gram weight of ``quantity`` portions of a food.

    Raises:
        InvalidQuantity: if quantity is not positive.
        InvalidServingSize: if the record's standard serving is not positive.
    """
    return calculate_grams(
        record.standard_serving_grams,
        portion_label,
        quantity,
        unit_grams=unit_grams_for(record, portion_label),
    )


def calculate_grams(
    standard_serving_grams: float,
    portion_label: str,
    quantity: int,
    unit_grams: float | None = None,
) -> float:
    """Return standard x multiplier x quantity, or unit grams x quantity.

    Raises:
        InvalidQuantity: if quantity is not positive.
        InvalidServingSize: if the standard serving is not positive.
    """
    if quantity <= 0:
        raise InvalidQuantity(f"Quantity must be greater than 0, got {quantity}")
    if standard_serving_grams <= 0:
        raise InvalidServingSize(
            f"Standard serving must be > 0, got {standard_serving_grams:g}"
        )
    if unit_grams is not None:
        return round(unit_grams * quantity, 1)
    if not is_valid_portion(portion_label) and portion_label != SERVING:
        _logger.warning(
            "Unknown portion label %r, using standard serving", portion_label
        )
    grams = standard_serving_grams * portion_multiplier(portion_label) * quantity
    return round(grams, 1)


def unit_grams_for(record: FoodRecord, portion_label: str) -> float | None:
    """Return grams per unit for absolute unit labels, else None."""
    if is_valid_portion(portion_label) or portion_label == SERVING:
        return None
    match = _GRAM_LABEL.match(portion_label)
    if match:
        return float(match.group(1))
    return household_units(record.description).get(portion_label)


def unit_options(record: FoodRecord) -> dict[str, float]:
    """Return every selectable label for a food with its gram weight."""
    options = {SERVING: record.standard_serving_grams}
    options.update(household_units(record.description))
    return options


def portion_percentage(label: str) -> int:
    return int(portion_multiplier(label) * 100)


def portion_description(label: str) -> str:
    """Return e.g. ``Small (67%)``."""
    return f"{label} ({portion_percentage(label)}%)"


def comparison(standard_grams: float, first: str, second: str) -> str:
    """Return e.g. ``Medium (158g) vs Large (237g)``."""
    first_grams = standard_grams * portion_multiplier(first)
    second_grams = standard_grams * portion_multiplier(second)
    return f"{first} ({first_grams:.0f}g) vs {second} ({second_grams:.0f}g)"


def portion_options(standard_grams: float) -> dict[str, float]:
    return {
        label: standard_grams * multiplier
        for label, multiplier in PORTION_MULTIPLIERS.items()
    }


def total_portions(label: str, quantity: int) -> float:
    return portion_multiplier(label) * quantity


def adjustment_factor(from_label: str, to_label: str) -> float:
    """Return how many times larger ``to_label`` is than ``from_label``."""
    from_multiplier = portion_multiplier(from_label)
    if from_multiplier == 0:
        return 1.0
    return portion_multiplier(to_label) / from_multiplier


def validate_calculation(
    standard_serving_grams: float, portion_label: str, quantity: int
) -> str | None:
    """Return an error message for invalid inputs, or None."""
    if standard_serving_grams <= 0:
        return "Standard serving must be greater than 0"
    if not is_valid_portion(portion_label):
        return f"Invalid portion size: {portion_label}"
    if quantity <= 0:
        return "Quantity must be greater than 0"
    return None


def recommended_portions(
    *, diabetic: bool = False, low_calorie: bool = False
) -> list[str]:
    """Return the portion sizes worth offering for a dietary goal."""
    if diabetic or low_calorie:
        return [SMALL, MEDIUM]
    return [SMALL, MEDIUM, LARGE]
