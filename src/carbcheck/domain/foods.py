"""Food catalog domain models."""

from pydantic import Field

from carbcheck.domain.base import ValueModel


class FoodRecord(ValueModel):
    """A catalog food with its standard serving and per-100g macros."""

    id: str
    description: str
    category: str = ""
    standard_serving_grams: float = Field(default=100.0, gt=0)
    standard_serving_unit: str = "g"
    # to_camel would upper-case the "g" after the digits.
    carbs_per_100g: float = Field(default=0.0, ge=0, alias="carbsPer100g")
    protein_per_100g: float = Field(default=0.0, ge=0, alias="proteinPer100g")
    fat_per_100g: float = Field(default=0.0, ge=0, alias="fatPer100g")
    fiber_per_100g: float = Field(default=0.0, ge=0, alias="fiberPer100g")
    calories_per_100g: float | None = Field(
        default=None, ge=0, alias="caloriesPer100g"
    )

    def label(self) -> str:
        """Return a short display label with the standard serving."""
        serving = f"{self.standard_serving_grams:g}"
        return f"{self.description} ({serving}{self.standard_serving_unit})"
