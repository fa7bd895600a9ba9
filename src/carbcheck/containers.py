"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from carbcheck.adapters.catalog_source import CatalogSource, JsonFileCatalogSource
from carbcheck.adapters.fdc_client import HttpxFdcClient
from carbcheck.config import Settings
from carbcheck.services.cache import InMemoryCache
from carbcheck.services.catalog import FoodCatalog
from carbcheck.services.glucose import GlucoseImpactService
from carbcheck.services.meals import MealService
from carbcheck.services.remote_foods import RemoteFoodService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: FoodCatalog
    catalog_source: CatalogSource
    glucose_service: GlucoseImpactService
    meal_service: MealService
    remote_foods: RemoteFoodService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    The catalog is created empty; callers load it (``catalog.load``) before
    serving lookups.
    """
    resolved_settings = settings or Settings()
    catalog = FoodCatalog()
    catalog_source = JsonFileCatalogSource(resolved_settings.catalog_path)
    glucose_service = GlucoseImpactService(
        default_sensitivity=resolved_settings.default_glucose_sensitivity
    )

    fdc_client: HttpxFdcClient | None = None
    remote_foods: RemoteFoodService | None = None
    if resolved_settings.remote_enabled and resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        remote_foods = RemoteFoodService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
            debug=resolved_settings.debug,
        )

    meal_service = MealService(
        catalog=catalog,
        glucose_service=glucose_service,
        remote_foods=remote_foods,
    )

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        catalog_source=catalog_source,
        glucose_service=glucose_service,
        meal_service=meal_service,
        remote_foods=remote_foods,
        close_resources=close_resources,
    )
