"""Tests for the remote FoodData Central fallback."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest

from carbcheck.adapters.fdc_client import FdcClient
from carbcheck.services.cache import InMemoryCache
from carbcheck.services.remote_foods import RemoteFoodService
from tests.conftest import FakeFdcClient


@dataclass
class FlakyFdcClient(FakeFdcClient):
    failures: int = 1

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.search_calls += 1
        if self.search_calls <= self.failures:
            request = httpx.Request("POST", "https://api.test/foods/search")
            raise httpx.HTTPStatusError(
                "server error",
                request=request,
                response=httpx.Response(503, request=request),
            )
        return self.search_payload


@dataclass
class RecordingFdcClient(FdcClient):
    page_sizes: list[int] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.page_sizes.append(page_size)
        return {"foods": []}

    async def get_food(self, fdc_id: str) -> dict[str, object]:
        raise AssertionError("get_food should not be called")


def test_search_uses_cache(
    remote_foods: RemoteFoodService, fdc_client: FakeFdcClient
) -> None:
    results = asyncio.run(remote_foods.search("quinoa", limit=1))
    assert results[0].id == "173944"
    assert fdc_client.search_calls == 1

    cached = asyncio.run(remote_foods.search("Quinoa", limit=1))
    assert cached[0].id == "173944"
    assert fdc_client.search_calls == 1


def test_get_food_uses_cache(
    remote_foods: RemoteFoodService, fdc_client: FakeFdcClient
) -> None:
    first = asyncio.run(remote_foods.get_food("173944"))
    second = asyncio.run(remote_foods.get_food("173944"))

    assert first == second
    assert first.standard_serving_grams == 185.0
    assert first.category == "Cereal Grains and Pasta"
    assert fdc_client.food_calls == 1


def test_find_returns_detailed_record(remote_foods: RemoteFoodService) -> None:
    record = asyncio.run(remote_foods.find("quinoa"))

    assert record is not None
    assert record.fiber_per_100g == 2.8
    assert record.calories_per_100g == 120.0


def test_find_returns_none_without_results() -> None:
    client = RecordingFdcClient()
    service = RemoteFoodService(fdc_client=client, cache=InMemoryCache())

    assert asyncio.run(service.find("nothing")) is None
    assert client.page_sizes == [1]


def test_find_falls_back_to_search_entry_when_details_unusable() -> None:
    client = FakeFdcClient(food_payload={"fdcId": 173944, "foodNutrients": []})
    service = RemoteFoodService(fdc_client=client, cache=InMemoryCache())

    record = asyncio.run(service.find("quinoa"))

    assert record is not None
    assert record.carbs_per_100g == 21.3
    assert record.standard_serving_grams == 100.0


def test_search_skips_unusable_entries() -> None:
    client = FakeFdcClient(
        search_payload={
            "foods": [
                {"fdcId": 1, "description": "Water", "foodNutrients": []},
                {
                    "fdcId": 2,
                    "description": "Rice",
                    "foodNutrients": [{"nutrientNumber": "205", "value": 28}],
                },
            ]
        }
    )
    service = RemoteFoodService(fdc_client=client, cache=InMemoryCache())

    results = asyncio.run(service.search("rice"))

    assert [food.description for food in results] == ["Rice"]


def test_search_retries_once() -> None:
    client = FlakyFdcClient(failures=1)
    service = RemoteFoodService(
        fdc_client=client, cache=InMemoryCache(), debug=True, retry_delay_seconds=0
    )

    results = asyncio.run(service.search("quinoa"))

    assert len(results) == 1
    assert client.search_calls == 2


def test_search_raises_after_retries_exhausted() -> None:
    client = FlakyFdcClient(failures=5)
    service = RemoteFoodService(
        fdc_client=client, cache=InMemoryCache(), retry_delay_seconds=0
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(service.search("quinoa"))
    assert client.search_calls == 2
