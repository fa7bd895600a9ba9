"""Tests for container wiring."""

import asyncio

from carbcheck.config import Settings
from carbcheck.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.meal_service.catalog is container.catalog
    assert not container.catalog.is_loaded
    assert container.remote_foods is None
    asyncio.run(container.close_resources())


def test_build_container_enables_remote_lookup_with_api_key() -> None:
    container = build_container(Settings(fdc_api_key="fdc-key", remote_fallback=True))

    assert container.remote_foods is not None
    assert container.meal_service.remote_foods is container.remote_foods
    asyncio.run(container.close_resources())


def test_container_catalog_loads_bundled_dataset(settings: Settings) -> None:
    container = build_container(settings)

    container.catalog.load(container.catalog_source)

    assert container.catalog.is_loaded
    assert container.catalog.get_by_description("Banana, raw") is not None
