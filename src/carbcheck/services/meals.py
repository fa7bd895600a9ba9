"""Meal estimation: resolve selections, scale, aggregate, estimate glucose."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from carbcheck.domain.errors import CarbCheckError, FoodNotFound
from carbcheck.domain.foods import FoodRecord
from carbcheck.domain.glucose import GlucoseImpactEstimate
from carbcheck.domain.meals import MealEstimate, SkippedItem
from carbcheck.domain.nutrition import ScaledNutrition
from carbcheck.domain.portions import PORTION_MULTIPLIERS, PortionSelection
from carbcheck.services import nutrition, servings
from carbcheck.services.catalog import FoodCatalog
from carbcheck.services.glucose import GlucoseImpactService
from carbcheck.services.remote_foods import RemoteFoodService

_logger = logging.getLogger(__name__)


@dataclass
class MealService:
    """Computes nutrition and glucose impact for a plate of selections.

    Items that cannot be resolved or validated are skipped and reported; the
    estimate covers the remaining items.
    """

    catalog: FoodCatalog
    glucose_service: GlucoseImpactService
    remote_foods: RemoteFoodService | None = None

    def scale_selection(
        self, selection: PortionSelection, record: FoodRecord | None = None
    ) -> ScaledNutrition:
        """Resolve one selection to scaled nutrients.

        Raises:
            FoodNotFound: if the food is not in the catalog.
            InvalidQuantity: if the quantity is not positive.
        """
        food = record or self.catalog.resolve(selection.food_description)
        if food is None:
            raise FoodNotFound(selection.food_description)
        grams = servings.grams_for(food, selection.portion_label, selection.quantity)
        return nutrition.scale(food, grams)

    def estimate(
        self,
        selections: Sequence[PortionSelection],
        baseline_glucose: float | None = None,
        sensitivity: float | None = None,
    ) -> MealEstimate:
        """Estimate a meal from the local catalog only."""
        records = [self.catalog.resolve(item.food_description) for item in selections]
        return self._build(selections, records, baseline_glucose, sensitivity)

    async def estimate_with_fallback(
        self,
        selections: Sequence[PortionSelection],
        baseline_glucose: float | None = None,
        sensitivity: float | None = None,
    ) -> MealEstimate:
        """Estimate a meal, looking up catalog misses remotely when configured."""
        records: list[FoodRecord | None] = []
        for item in selections:
            record = self.catalog.resolve(item.food_description)
            if record is None and self.remote_foods is not None:
                record = await self._find_remote(item.food_description)
            records.append(record)
        return self._build(selections, records, baseline_glucose, sensitivity)

    def portion_options(self, description: str) -> dict[str, ScaledNutrition]:
        """Return scaled nutrients for each size label of one food.

        Raises:
            FoodNotFound: if the food is not in the catalog.
        """
        food = self.catalog.resolve(description)
        if food is None:
            raise FoodNotFound(description)
        return {
            label: self.scale_selection(
                PortionSelection(food.description, label, 1), food
            )
            for label in PORTION_MULTIPLIERS
        }

    def compare_portions(
        self, description: str, first: str, second: str
    ) -> dict[str, ScaledNutrition]:
        """Return scaled nutrients for two portion labels of one food."""
        food = self.catalog.resolve(description)
        if food is None:
            raise FoodNotFound(description)
        return {
            label: self.scale_selection(
                PortionSelection(food.description, label, 1), food
            )
            for label in (first, second)
        }

    def _build(
        self,
        selections: Sequence[PortionSelection],
        records: Sequence[FoodRecord | None],
        baseline_glucose: float | None,
        sensitivity: float | None,
    ) -> MealEstimate:
        scaled: list[ScaledNutrition] = []
        skipped: list[SkippedItem] = []
        for selection, record in zip(selections, records, strict=True):
            try:
                if record is None:
                    raise FoodNotFound(selection.food_description)
                scaled.append(self.scale_selection(selection, record))
            except CarbCheckError as exc:
                _logger.warning(
                    "Skipping meal item %r: %s", selection.food_description, exc
                )
                skipped.append(
                    SkippedItem(
                        food_description=selection.food_description,
                        reason=str(exc),
                    )
                )

        totals = nutrition.aggregate(scaled)
        glucose: GlucoseImpactEstimate | None = None
        if baseline_glucose is not None:
            glucose = self.glucose_service.estimate_meal(
                scaled, baseline_glucose, sensitivity
            )
        return MealEstimate(totals=totals, glucose=glucose, skipped=skipped)

    async def _find_remote(self, description: str) -> FoodRecord | None:
        if self.remote_foods is None:
            return None
        try:
            return await self.remote_foods.find(description)
        except httpx.HTTPError as exc:
            _logger.warning("Remote lookup failed for %r: %s", description, exc)
            return None
