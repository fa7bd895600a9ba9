"""Nutrition value objects produced by scaling and aggregation."""

from pydantic import Field

from carbcheck.domain.base import ValueModel


class ScaledNutrition(ValueModel):
    """Nutrients for an actual gram amount of one food."""

    food_name: str
    grams: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fiber: float = Field(ge=0)
    net_carbs: float = Field(ge=0)
    protein: float = Field(ge=0)
    fat: float = Field(ge=0)
    calories: float = Field(ge=0)

    def short_description(self) -> str:
        """Return the food name with its rounded gram weight."""
        return f"{self.food_name} ({self.grams:.0f}g)"

    def macro_string(self) -> str:
        """Return a one-line carbs/protein/fat breakdown."""
        return (
            f"Carbs: {self.carbs:.1f}g | "
            f"Protein: {self.protein:.1f}g | "
            f"Fat: {self.fat:.1f}g"
        )


class MacroDistribution(ValueModel):
    """Share of calories contributed by each macronutrient, in percent."""

    carbs_pct: float = 0.0
    protein_pct: float = 0.0
    fat_pct: float = 0.0


class MealTotals(ValueModel):
    """Element-wise totals over the scaled items of a meal."""

    items: list[ScaledNutrition] = Field(default_factory=list)
    total_carbs: float = 0.0
    total_fiber: float = 0.0
    total_net_carbs: float = 0.0
    total_protein: float = 0.0
    total_fat: float = 0.0
    total_calories: float = 0.0
    item_count: int = 0
    distribution: MacroDistribution = Field(default_factory=MacroDistribution)

    def summary(self) -> str:
        """Return a compact summary of the meal."""
        return (
            f"{self.item_count} items | {self.total_calories:.0f} kcal | "
            f"{self.total_carbs:.1f}g carbs"
        )
