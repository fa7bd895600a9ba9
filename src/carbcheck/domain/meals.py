"""Domain models for meal estimates."""

from pydantic import Field

from carbcheck.domain.base import ValueModel
from carbcheck.domain.glucose import GlucoseImpactEstimate
from carbcheck.domain.nutrition import MealTotals


class SkippedItem(ValueModel):
    """A meal item that could not be resolved and was left out."""

    food_description: str
    reason: str


class MealEstimate(ValueModel):
    """Nutrition totals and glucose impact for the resolvable part of a meal."""

    totals: MealTotals
    glucose: GlucoseImpactEstimate | None = None
    skipped: list[SkippedItem] = Field(default_factory=list)
