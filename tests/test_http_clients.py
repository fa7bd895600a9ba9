"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from carbcheck.adapters.fdc_client import HttpxFdcClient


def test_fdc_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": []})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=async_client,
    )

    search = asyncio.run(client.search_foods("rice", page_size=5))
    food = asyncio.run(client.get_food("1"))

    assert search == {"foods": []}
    assert food["fdcId"] == 1
    search_request, food_request = seen
    assert search_request.method == "POST"
    assert search_request.url.params["api_key"] == "key"
    body = json.loads(search_request.content.decode())
    assert body["query"] == "rice"
    assert body["pageSize"] == 5
    assert "Branded" not in body["dataType"]
    assert food_request.url.path == "/food/1"
    assert food_request.url.params["format"] == "full"


def test_fdc_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "down"})

    transport = httpx.MockTransport(handler)
    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_foods("rice"))


def test_fdc_client_create_strips_trailing_slash() -> None:
    client = HttpxFdcClient.create(api_key="key", base_url="https://api.test/v1/")

    assert client.base_url == "https://api.test/v1"
    asyncio.run(client.close())
