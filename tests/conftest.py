"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from carbcheck.adapters.catalog_source import InMemoryCatalogSource
from carbcheck.adapters.fdc_client import FdcClient
from carbcheck.config import Settings
from carbcheck.containers import AppContainer
from carbcheck.services.cache import InMemoryCache
from carbcheck.services.catalog import FoodCatalog
from carbcheck.services.glucose import GlucoseImpactService
from carbcheck.services.meals import MealService
from carbcheck.services.remote_foods import RemoteFoodService


def nutrient(number: str, nutrient_id: int, amount: float) -> dict[str, object]:
    """Build a Foundation-style nutrient entry carrying both codes."""
    return {"nutrient": {"id": nutrient_id, "number": number}, "amount": amount}


def food_entry(  # noqa: PLR0913
    fdc_id: int,
    description: str,
    *,
    carbs: float,
    protein: float,
    fat: float,
    fiber: float | None = None,
    calories: float | None = None,
    portion_grams: float | None = None,
) -> dict[str, object]:
    nutrients = [
        nutrient("205", 1005, carbs),
        nutrient("203", 1003, protein),
        nutrient("204", 1004, fat),
    ]
    if fiber is not None:
        nutrients.append(nutrient("291", 1079, fiber))
    if calories is not None:
        nutrients.append(nutrient("208", 1008, calories))
    entry: dict[str, object] = {
        "fdcId": fdc_id,
        "description": description,
        "foodNutrients": nutrients,
    }
    if portion_grams is not None:
        entry["foodPortions"] = [
            {"gramWeight": portion_grams, "measureUnit": {"name": "cup"}}
        ]
    return entry


def sample_payload() -> dict[str, object]:
    return {
        "FoundationFoods": [
            food_entry(
                1,
                "Rice, white, cooked",
                carbs=28.0,
                protein=2.7,
                fat=0.3,
                fiber=0.4,
                calories=130.0,
                portion_grams=158.0,
            ),
            food_entry(
                2,
                "Apple, raw",
                carbs=13.8,
                protein=0.26,
                fat=0.17,
                fiber=2.4,
                calories=52.0,
                portion_grams=182.0,
            ),
            food_entry(
                3,
                "Apple juice",
                carbs=11.3,
                protein=0.1,
                fat=0.13,
                fiber=0.2,
                calories=46.0,
                portion_grams=248.0,
            ),
            food_entry(
                4,
                "Pineapple, raw",
                carbs=13.1,
                protein=0.54,
                fat=0.12,
                fiber=1.4,
                calories=50.0,
                portion_grams=165.0,
            ),
            food_entry(
                5,
                "Chicken breast, roasted",
                carbs=0.0,
                protein=31.0,
                fat=3.6,
                calories=165.0,
                portion_grams=140.0,
            ),
            food_entry(
                6,
                "Bread, white",
                carbs=49.2,
                protein=8.9,
                fat=3.6,
                fiber=2.4,
                portion_grams=30.0,
            ),
        ]
    }


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 173944,
                    "description": "Quinoa, cooked",
                    "foodNutrients": [
                        {"nutrientNumber": "205", "value": 21.3},
                        {"nutrientNumber": "203", "value": 4.4},
                        {"nutrientNumber": "204", "value": 1.9},
                    ],
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 173944,
            "description": "Quinoa, cooked",
            "foodCategory": {"description": "Cereal Grains and Pasta"},
            "foodNutrients": [
                {"nutrient": {"id": 1005, "number": "205"}, "amount": 21.3},
                {"nutrient": {"id": 1003, "number": "203"}, "amount": 4.4},
                {"nutrient": {"id": 1004, "number": "204"}, "amount": 1.92},
                {"nutrient": {"id": 1079, "number": "291"}, "amount": 2.8},
                {"nutrient": {"id": 1008, "number": "208"}, "amount": 120},
            ],
            "foodPortions": [{"gramWeight": 185, "measureUnit": {"name": "cup"}}],
        }
    )
    search_calls: int = 0
    food_calls: int = 0

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_food(self, fdc_id: str) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(fdc_api_key=None, remote_fallback=False)


@pytest.fixture
def catalog() -> FoodCatalog:
    food_catalog = FoodCatalog()
    food_catalog.load(InMemoryCatalogSource(sample_payload()))
    return food_catalog


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def remote_foods(fdc_client: FakeFdcClient) -> RemoteFoodService:
    return RemoteFoodService(
        fdc_client=fdc_client, cache=InMemoryCache(), retry_delay_seconds=0
    )


@pytest.fixture
def meal_service(catalog: FoodCatalog) -> MealService:
    return MealService(catalog=catalog, glucose_service=GlucoseImpactService())


@pytest.fixture
def container(
    settings: Settings,
    catalog: FoodCatalog,
    remote_foods: RemoteFoodService,
) -> AppContainer:
    glucose_service = GlucoseImpactService(
        default_sensitivity=settings.default_glucose_sensitivity
    )
    meal_service = MealService(
        catalog=catalog,
        glucose_service=glucose_service,
        remote_foods=remote_foods,
    )

    async def close_resources() -> None:
        await asyncio.sleep(0)

    return AppContainer(
        settings=settings,
        catalog=catalog,
        catalog_source=InMemoryCatalogSource(sample_payload()),
        glucose_service=glucose_service,
        meal_service=meal_service,
        remote_foods=remote_foods,
        close_resources=close_resources,
    )
