"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from carbcheck.api.foods import require_catalog
from carbcheck.api.foods import router as foods_router
from carbcheck.api.models import GlucoseEstimateRequest, MealEstimateRequest
from carbcheck.app_logging import configure_logging
from carbcheck.containers import AppContainer
from carbcheck.domain.errors import (
    CatalogLoadError,
    CatalogNotLoaded,
    FoodNotFound,
    InvalidInput,
)
from carbcheck.services import glucose


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            state_container.catalog.load(state_container.catalog_source)
        except CatalogLoadError:
            logger.exception("Failed to load food catalog")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(foods_router)

    @app.exception_handler(InvalidInput)
    async def invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(FoodNotFound)
    async def food_not_found(request: Request, exc: FoodNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CatalogNotLoaded)
    async def catalog_not_loaded(
        request: Request, exc: CatalogNotLoaded
    ) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Health check with catalog readiness."""
        state_container: AppContainer = request.app.state.container
        return {
            "status": "ok",
            "catalogLoaded": state_container.catalog.is_loaded,
            "foods": state_container.catalog.count(),
        }

    @app.post("/meals/estimate", dependencies=[Depends(require_catalog)])
    async def estimate_meal(
        payload: MealEstimateRequest, request: Request
    ) -> dict[str, object]:
        """Estimate nutrition totals and glucose impact for a plate."""
        state_container: AppContainer = request.app.state.container
        selections = [item.to_selection() for item in payload.items]
        meal_service = state_container.meal_service
        if payload.remote_fallback and state_container.remote_foods is not None:
            result = await meal_service.estimate_with_fallback(
                selections, payload.baseline_glucose, payload.sensitivity
            )
        else:
            result = meal_service.estimate(
                selections, payload.baseline_glucose, payload.sensitivity
            )
        return result.to_json_dict()

    @app.post("/glucose/estimate")
    async def estimate_glucose(
        payload: GlucoseEstimateRequest, request: Request
    ) -> dict[str, object]:
        """Estimate glucose impact for a carbohydrate amount."""
        state_container: AppContainer = request.app.state.container
        sensitivity = payload.sensitivity
        if sensitivity is None:
            sensitivity = state_container.glucose_service.default_sensitivity
        result = glucose.estimate(payload.baseline_glucose, payload.carbs, sensitivity)
        return result.to_json_dict()

    return app
