import asyncio
import logging
from typing import Dict, List, Optional

from mealprep.domain.Recipe import Recipe, group_by_department
from mealprep.infra.Ingredient_Resolver import IngredientResolver

logger = logging.getLogger(__name__)


class RecipeRepository:
    """Session cache of the recipe catalog.

    Recipes are fetched once per session; ingredients are attached lazily the
    first time a recipe's detail is opened. A detail load already in flight is
    shared by later callers instead of issuing a second request.
    """

    def __init__(self, catalog, resolver: Optional[IngredientResolver] = None):
        self.catalog = catalog
        self.resolver = resolver or IngredientResolver(catalog)
        self._recipes: Optional[List[Recipe]] = None
        self._loaded_ids = set()
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def all(self, refresh: bool = False) -> List[Recipe]:
        if self._recipes is None or refresh:
            self._recipes = await self.catalog.list_all_recipes()
            self._loaded_ids = {r.id for r in self._recipes if r.ingredients_loaded}
            logger.info("Loaded %d recipes from catalog", len(self._recipes))
        return self._recipes

    def cached(self) -> List[Recipe]:
        return list(self._recipes or [])

    async def get(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in await self.all():
            if recipe.id == str(recipe_id):
                return recipe
        return None

    def titles(self) -> Dict[str, str]:
        return {r.id: r.title for r in self.cached()}

    async def toggle_like(self, recipe_id: str) -> Optional[Recipe]:
        recipe = await self.get(recipe_id)
        if recipe is not None:
            recipe.liked = not recipe.liked
        return recipe

    def is_loading(self, recipe_id: str) -> bool:
        return str(recipe_id) in self._in_flight

    async def load_ingredients(self, recipe_id: str) -> Optional[Recipe]:
        """Attach department-grouped ingredients to a recipe (idempotent)."""
        recipe = await self.get(recipe_id)
        if recipe is None:
            return None
        if recipe.id in self._loaded_ids:
            return recipe
        task = self._in_flight.get(recipe.id)
        if task is None:
            task = asyncio.ensure_future(self._fetch_departments(recipe))
            self._in_flight[recipe.id] = task
            task.add_done_callback(lambda _t, rid=recipe.id: self._in_flight.pop(rid, None))
        else:
            logger.debug("Ingredient load for %s already in flight; joining it", recipe.id)
        await asyncio.shield(task)
        return recipe

    async def _fetch_departments(self, recipe: Recipe) -> None:
        resolved = await self.resolver.resolve(recipe.id)
        recipe.attach_departments(group_by_department(resolved.lines))
        self._loaded_ids.add(recipe.id)
