"""Recipe/ingredient catalog collaborators.

Two interchangeable catalogs expose the same coroutine interface:
  list_all_recipes() -> List[Recipe]
  get_recipe_with_ingredients(recipe_id) -> ResolvedRecipe
  get_recipes_by_ids(ids) -> List[ResolvedRecipe]

HttpRecipeCatalog talks to the recipe backend (GET /recipes,
GET /recipes/{id}?include_ingredients=true); JsonRecipeCatalog serves the same
payload shape from a local recipes.json file. Both raise CatalogError on
network or not-found failures.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from mealprep.domain.Ingredient import IngredientLine, ResolvedRecipe
from mealprep.domain.Recipe import Recipe
from mealprep.infra.paths import RECIPES_FILE
from mealprep.utilities import config

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Catalog request failed (status_code is None for network errors)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def _resolved_from_payload(data: Dict[str, Any]) -> ResolvedRecipe:
    title = data.get("name") or data.get("title", "")
    try:
        lines = [IngredientLine.from_dict(ri) for ri in data.get("ingredients", []) or []]
    except ValueError as e:
        logger.warning("Rejecting recipe %s: %s", data.get("id"), e)
        raise CatalogError(f"Invalid ingredient data: {e}") from e
    return ResolvedRecipe(data.get("id", ""), title, lines)


class HttpRecipeCatalog:
    def __init__(self, base_url: str = config.RECIPE_API_BASE_URL, token: str = config.RECIPE_API_TOKEN,
                 timeout: float = config.CATALOG_TIMEOUT_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(base_url=self.base_url, headers=headers,
                                 timeout=self.timeout, transport=self._transport)

    async def _get(self, path: str, fallback_message: str, params: Optional[Dict[str, Any]] = None):
        try:
            async with self._client() as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as e:
                    logger.warning("Catalog %s returned a non-JSON body (%s)", path, response.status_code)
                    raise CatalogError("Invalid response from server", response.status_code) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = fallback_message
            try:
                body = e.response.json()
                if isinstance(body, dict):
                    message = body.get("message") or body.get("error") or fallback_message
            except ValueError:
                pass
            logger.warning("Catalog %s returned %s: %s", path, status, message)
            raise CatalogError(message, status) from e
        except httpx.RequestError as e:
            logger.warning("Catalog unreachable for %s: %s", path, e)
            raise CatalogError("Network error - unable to connect to server") from e

    async def list_all_recipes(self) -> List[Recipe]:
        data = await self._get("/recipes", "Failed to load recipes")
        return [Recipe.from_dict(r) for r in data or []]

    async def get_recipe_with_ingredients(self, recipe_id: str) -> ResolvedRecipe:
        data = await self._get(f"/recipes/{recipe_id}", "Failed to load recipe with ingredients",
                               params={"include_ingredients": "true"})
        if not isinstance(data, dict):
            raise CatalogError(f"Unexpected payload for recipe {recipe_id}")
        return _resolved_from_payload(data)

    async def get_recipes_by_ids(self, recipe_ids: List[str]) -> List[ResolvedRecipe]:
        return list(await asyncio.gather(*(self.get_recipe_with_ingredients(r) for r in recipe_ids)))


class JsonRecipeCatalog:
    """Catalog served from recipe payloads held in memory (loaded from recipes.json by default)."""

    def __init__(self, recipes: Optional[List[Dict[str, Any]]] = None, path: Optional[Path] = None):
        self._recipes = recipes
        self.path = Path(path) if path else RECIPES_FILE

    @classmethod
    def from_file(cls, path: Optional[Path] = None) -> "JsonRecipeCatalog":
        return cls(None, path)

    def _load(self) -> List[Dict[str, Any]]:
        if self._recipes is not None:
            return self._recipes
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                self._recipes = json.load(f) or []
        except FileNotFoundError:
            logger.warning("Recipes file not found: %s. Returning empty catalog.", self.path)
            self._recipes = []
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in recipes file: %s", e)
            self._recipes = []
        return self._recipes

    def _find(self, recipe_id: str) -> Dict[str, Any]:
        for data in self._load():
            if str(data.get("id")) == str(recipe_id):
                return data
        raise CatalogError(f"Recipe {recipe_id} not found", 404)

    async def list_all_recipes(self) -> List[Recipe]:
        return [Recipe.from_dict(r) for r in self._load()]

    async def get_recipe_with_ingredients(self, recipe_id: str) -> ResolvedRecipe:
        return _resolved_from_payload(self._find(recipe_id))

    async def get_recipes_by_ids(self, recipe_ids: List[str]) -> List[ResolvedRecipe]:
        return [await self.get_recipe_with_ingredients(r) for r in recipe_ids]


def default_catalog():
    """HTTP catalog when RECIPE_API_BASE_URL is configured, otherwise the local JSON file."""
    if config.RECIPE_API_BASE_URL:
        logger.info("Using recipe backend at %s", config.RECIPE_API_BASE_URL)
        return HttpRecipeCatalog()
    logger.info("Using local recipe catalog %s", RECIPES_FILE)
    return JsonRecipeCatalog.from_file()


__all__ = ['CatalogError', 'HttpRecipeCatalog', 'JsonRecipeCatalog', 'default_catalog']
