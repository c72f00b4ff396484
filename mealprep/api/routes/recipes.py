import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from mealprep.api.dependencies import PlannerServices, get_services
from mealprep.infra.Recipe_Catalog import CatalogError
from mealprep.logic.planning.browse import BrowseOptions, browse_recipes
from mealprep.utilities.validators import BrowseQuery

router = APIRouter(prefix="/api/recipes", tags=["recipes"])
logger = logging.getLogger(__name__)


async def load_recipes(services: PlannerServices):
    """Catalog recipes for the session; catalog outages become 502."""
    try:
        return await services.recipes.all()
    except CatalogError as e:
        logger.error("Failed to load recipes: %s", e)
        raise HTTPException(status_code=502, detail=f"Failed to load recipes: {e}")


@router.get("")
async def list_recipes(params: Annotated[BrowseQuery, Query()],
                       services: PlannerServices = Depends(get_services)):
    """Search/filter/sort the recipe catalog."""
    recipes = await load_recipes(services)
    options = BrowseOptions(query=params.q, breakfast=params.breakfast, vegetarian=params.vegetarian,
                            liked=params.liked, sort=params.sort)
    found = browse_recipes(recipes, options)
    return {"count": len(found), "total": len(recipes), "recipes": [r.to_dict() for r in found]}


@router.get("/{recipe_id}")
async def recipe_detail(recipe_id: str, services: PlannerServices = Depends(get_services)):
    """Recipe with its ingredients grouped by department (loaded on first request)."""
    await load_recipes(services)
    recipe = await services.recipes.load_ingredients(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe.to_dict()


@router.post("/{recipe_id}/like")
async def toggle_like(recipe_id: str, services: PlannerServices = Depends(get_services)):
    await load_recipes(services)
    recipe = await services.recipes.toggle_like(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"id": recipe.id, "liked": recipe.liked}
