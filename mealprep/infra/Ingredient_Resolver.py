"""Ingredient resolver: recipe id -> ingredient lines, wrapping the catalog collaborator."""
import logging

from mealprep.domain.Ingredient import ResolvedRecipe
from mealprep.domain.errors import ResolutionError
from mealprep.infra.Recipe_Catalog import CatalogError

logger = logging.getLogger(__name__)


class IngredientResolver:
    def __init__(self, catalog):
        self.catalog = catalog

    async def resolve(self, recipe_id: str) -> ResolvedRecipe:
        """Fetch one recipe's ingredient lines.

        Raises:
            ResolutionError: catalog was unreachable or the recipe does not exist.
        """
        try:
            resolved = await self.catalog.get_recipe_with_ingredients(recipe_id)
        except CatalogError as e:
            reason = "not found" if e.not_found else str(e)
            logger.warning("Could not resolve recipe %s: %s", recipe_id, reason)
            raise ResolutionError([recipe_id], f"Recipe {recipe_id}: {reason}", cause=e) from e
        logger.debug("Resolved recipe %s (%d lines)", recipe_id, len(resolved.lines))
        return resolved
