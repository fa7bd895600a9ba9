"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from carbcheck.domain.portions import DEFAULT_PORTION, PortionSelection


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MealItemRequest(_Request):
    """One plate item as sent by the app."""

    food_description: str
    portion_label: str = DEFAULT_PORTION
    quantity: int = 1

    def to_selection(self) -> PortionSelection:
        return PortionSelection(
            food_description=self.food_description,
            portion_label=self.portion_label,
            quantity=self.quantity,
        )


class MealEstimateRequest(_Request):
    """Plate contents plus optional glucose inputs."""

    items: list[MealItemRequest] = Field(default_factory=list)
    baseline_glucose: float | None = None
    sensitivity: float | None = None
    remote_fallback: bool = False


class GlucoseEstimateRequest(_Request):
    """Direct glucose estimate for a carbohydrate amount."""

    carbs: float
    baseline_glucose: float
    sensitivity: float | None = None
