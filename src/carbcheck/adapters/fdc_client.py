"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_DATA_TYPES = ("Foundation", "SR Legacy", "Survey (FNDDS)")
REQUEST_TIMEOUT_SECONDS = 15


class FdcClient(Protocol):
    """Interface for FoodData Central lookups."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by name and return the raw response document."""

    async def get_food(self, fdc_id: str) -> dict[str, object]:
        """Fetch one food with its nutrients and portions."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FoodData Central client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        """Create a client that owns its httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS),
        )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search generic (non-branded) foods by name."""
        response = await self.http_client.post(
            f"{self.base_url}/foods/search",
            params={"api_key": self.api_key},
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": list(SEARCH_DATA_TYPES),
                "requireAllWords": False,
            },
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, fdc_id: str) -> dict[str, object]:
        """Fetch full details for a food id."""
        response = await self.http_client.get(
            f"{self.base_url}/food/{fdc_id}",
            params={"api_key": self.api_key, "format": "full"},
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        await self.http_client.aclose()
