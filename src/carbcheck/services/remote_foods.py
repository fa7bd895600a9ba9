"""Optional FoodData Central fallback for foods missing from the catalog."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from carbcheck.adapters.fdc_client import FdcClient
from carbcheck.adapters.fdc_dataset import FoodFormatError, parse_food
from carbcheck.domain.foods import FoodRecord
from carbcheck.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)


@dataclass
class RemoteFoodService:
    """Looks foods up remotely and converts them into catalog records."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 5) -> list[FoodRecord]:
        """Search remote foods, dropping entries without usable nutrients."""
        cache_key = f"fdc:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = _to_records(payload.get("foods") or [])
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Remote search: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: str) -> FoodRecord:
        """Fetch one food with its portions.

        Raises:
            FoodFormatError: if the payload has no usable nutrients.
        """
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodRecord):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        record = parse_food(payload).record
        self.cache.set(cache_key, record, ttl_seconds=self.food_ttl_seconds)
        return record

    async def find(self, name: str) -> FoodRecord | None:
        """Return the best remote match for a food name, if any."""
        results = await self.search(name, limit=1)
        if not results:
            return None
        try:
            return await self.get_food(results[0].id)
        except (FoodFormatError, ValidationError) as exc:
            _logger.warning(
                "Remote food %s unusable, using search entry: %s", name, exc
            )
            return results[0]

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call the remote API with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "Remote %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        _status_code_from_exception(exc),
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _to_records(entries: list[object]) -> list[FoodRecord]:
    records: list[FoodRecord] = []
    for entry in entries:
        try:
            records.append(parse_food(entry).record)
        except (FoodFormatError, ValidationError) as exc:
            _logger.warning("Skipping remote food entry: %s", exc)
    return records


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
