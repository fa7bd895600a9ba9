"""Food catalog endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Query, Request

from carbcheck.domain.errors import CatalogNotLoaded
from carbcheck.services import servings

if TYPE_CHECKING:
    from carbcheck.containers import AppContainer

router = APIRouter(prefix="/foods", tags=["foods"])


async def require_catalog(request: Request) -> None:
    """Reject catalog lookups until the dataset has been loaded."""
    container: AppContainer = request.app.state.container
    if not container.catalog.is_loaded:
        raise CatalogNotLoaded("Food catalog is not loaded")


@router.get("/search", dependencies=[Depends(require_catalog)])
async def search_foods(
    request: Request,
    q: str = "",
    limit: Annotated[int, Query(ge=1, le=10)] = 10,
    exclude: Annotated[list[str] | None, Query()] = None,
) -> dict[str, object]:
    """Search the catalog, leaving out foods already on the plate."""
    container: AppContainer = request.app.state.container
    limit = min(limit, container.settings.search_limit)
    excluded = {item.lower() for item in exclude or []}
    foods = [
        food
        for food in container.catalog.search(q, limit=limit)
        if food.description.lower() not in excluded
    ]
    return {"foods": [food.to_json_dict() for food in foods]}


@router.get("/{description}", dependencies=[Depends(require_catalog)])
async def get_food(description: str, request: Request) -> dict[str, object]:
    """Return one catalog food by exact description."""
    container: AppContainer = request.app.state.container
    return container.catalog.require(description).to_json_dict()


@router.get("/{description}/portions", dependencies=[Depends(require_catalog)])
async def food_portions(description: str, request: Request) -> dict[str, object]:
    """Return selectable units and per-size nutrients for a food."""
    container: AppContainer = request.app.state.container
    food = container.catalog.require(description)
    options = container.meal_service.portion_options(food.description)
    return {
        "units": servings.unit_options(food),
        "portions": {
            label: {
                "description": servings.portion_description(label),
                "nutrition": item.to_json_dict(),
            }
            for label, item in options.items()
        },
    }
