"""Tests for meal estimation."""

import asyncio
from dataclasses import dataclass

import httpx
import pytest

from carbcheck.adapters.fdc_client import FdcClient
from carbcheck.domain.errors import FoodNotFound
from carbcheck.domain.glucose import RiskLevel
from carbcheck.domain.portions import PortionSelection
from carbcheck.services.cache import InMemoryCache
from carbcheck.services.catalog import FoodCatalog
from carbcheck.services.glucose import GlucoseImpactService
from carbcheck.services.meals import MealService
from carbcheck.services.remote_foods import RemoteFoodService

RICE = "Rice, white, cooked"


@dataclass
class UnreachableFdcClient(FdcClient):
    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        raise httpx.ConnectError("connection refused")

    async def get_food(self, fdc_id: str) -> dict[str, object]:
        raise httpx.ConnectError("connection refused")


def test_estimate_single_serving_of_rice(meal_service: MealService) -> None:
    result = meal_service.estimate([PortionSelection(RICE)], baseline_glucose=100.0)

    assert result.totals.item_count == 1
    assert result.totals.items[0].grams == 158.0
    assert round(result.totals.total_carbs, 1) == 44.2
    assert result.glucose is not None
    assert result.glucose.glucose_rise == pytest.approx(53.1)
    assert result.glucose.risk_level is RiskLevel.MEDIUM
    assert result.skipped == []


def test_estimate_without_baseline_skips_glucose(meal_service: MealService) -> None:
    result = meal_service.estimate([PortionSelection(RICE, "Large", 2)])

    assert result.glucose is None
    assert result.totals.items[0].grams == 474.0


def test_empty_meal_has_zero_totals_and_no_impact(meal_service: MealService) -> None:
    result = meal_service.estimate([], baseline_glucose=95.0)

    assert result.totals.item_count == 0
    assert result.totals.total_carbs == 0.0
    assert result.glucose is not None
    assert result.glucose.estimated_peak_glucose == 95.0
    assert result.glucose.risk_description == "No food - no glucose impact"


def test_unresolvable_items_are_skipped(meal_service: MealService) -> None:
    result = meal_service.estimate(
        [
            PortionSelection(RICE),
            PortionSelection("Unknown dish"),
            PortionSelection("Apple, raw", quantity=0),
        ],
        baseline_glucose=100.0,
    )

    assert result.totals.item_count == 1
    assert [item.food_description for item in result.skipped] == [
        "Unknown dish",
        "Apple, raw",
    ]
    assert result.skipped[0].reason == "Food not found: Unknown dish"


def test_aliases_and_unit_labels_resolve(meal_service: MealService) -> None:
    result = meal_service.estimate(
        [PortionSelection("white rice", "1 bowl"), PortionSelection("apples")]
    )

    grams = [item.grams for item in result.totals.items]
    assert grams == [200.0, 182.0]


def test_scale_selection_raises_for_missing_food(meal_service: MealService) -> None:
    with pytest.raises(FoodNotFound):
        meal_service.scale_selection(PortionSelection("Unknown dish"))


def test_portion_options(meal_service: MealService) -> None:
    options = meal_service.portion_options("rice")

    assert list(options) == ["Small", "Medium", "Large"]
    assert options["Medium"].grams == 158.0
    assert options["Large"].grams == 237.0


def test_compare_portions(meal_service: MealService) -> None:
    comparison = meal_service.compare_portions("Apple, raw", "Small", "Large")

    assert comparison["Small"].grams == pytest.approx(121.9)
    assert comparison["Large"].grams == 273.0


def test_fallback_uses_remote_food(
    catalog: FoodCatalog, remote_foods: RemoteFoodService
) -> None:
    service = MealService(
        catalog=catalog,
        glucose_service=GlucoseImpactService(),
        remote_foods=remote_foods,
    )

    result = asyncio.run(
        service.estimate_with_fallback(
            [PortionSelection(RICE), PortionSelection("Quinoa")], 100.0
        )
    )

    assert [item.food_name for item in result.totals.items] == [
        RICE,
        "Quinoa, cooked",
    ]
    assert result.totals.items[1].grams == 185.0
    assert result.skipped == []


def test_fallback_skips_items_when_remote_fails(catalog: FoodCatalog) -> None:
    remote = RemoteFoodService(
        fdc_client=UnreachableFdcClient(),
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )
    service = MealService(
        catalog=catalog,
        glucose_service=GlucoseImpactService(),
        remote_foods=remote,
    )

    result = asyncio.run(service.estimate_with_fallback([PortionSelection("Quinoa")]))

    assert result.totals.item_count == 0
    assert result.skipped[0].food_description == "Quinoa"
