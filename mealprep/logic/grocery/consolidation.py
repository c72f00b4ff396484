"""Grocery consolidation.

Provides consolidate(recipe_ids, resolver): resolves every distinct recipe
concurrently, merges ingredient lines by ingredient id (not by name) and
returns a department-ordered GroceryList snapshot.

Unit policy: the first line seen for an ingredient fixes the unit of the
running total. Lines reported in another unit are kept apart per unit and the
item is flagged as a unit mismatch; no conversion is attempted.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Protocol

from mealprep.domain.GroceryList import GroceryList, GroceryListItem
from mealprep.domain.Ingredient import ResolvedRecipe
from mealprep.domain.errors import ResolutionError

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    async def resolve(self, recipe_id: str) -> ResolvedRecipe: ...


class _Accumulator:
    """Running total for one ingredient id within a single consolidation call."""

    __slots__ = ("ingredient_id", "name", "department", "unit", "quantity",
                 "recipes", "recipe_ids", "other_quantities")

    def __init__(self, ingredient_id: str, name: str, department: str, unit: str):
        self.ingredient_id = ingredient_id
        self.name = name
        self.department = department
        self.unit = unit
        self.quantity = 0
        self.recipes: Dict[str, None] = {}
        self.recipe_ids: Dict[str, None] = {}
        self.other_quantities: Dict[str, float] = {}

    def add(self, quantity, unit: str, recipe: ResolvedRecipe):
        if unit == self.unit:
            self.quantity += quantity
        else:
            self.other_quantities[unit] = self.other_quantities.get(unit, 0) + quantity
        self.recipes.setdefault(recipe.title, None)
        self.recipe_ids.setdefault(recipe.recipe_id, None)

    def freeze(self) -> GroceryListItem:
        return GroceryListItem(
            ingredient_id=self.ingredient_id,
            name=self.name,
            department=self.department,
            quantity=self.quantity,
            unit=self.unit,
            recipes=tuple(self.recipes),
            recipe_ids=tuple(self.recipe_ids),
            unit_mismatch=bool(self.other_quantities),
            other_quantities=tuple(self.other_quantities.items()),
        )


def _dedupe(recipe_ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(str(r) for r in recipe_ids))


async def resolve_all(recipe_ids: List[str], resolver: Resolver) -> List[ResolvedRecipe]:
    """Resolve all recipes concurrently; fail with every failing id once all have settled."""
    results = await asyncio.gather(*(resolver.resolve(rid) for rid in recipe_ids), return_exceptions=True)
    failed: List[str] = []
    first_cause = None
    resolved: List[ResolvedRecipe] = []
    for rid, result in zip(recipe_ids, results):
        if isinstance(result, ResolutionError):
            failed.append(rid)
            first_cause = first_cause or result
        elif isinstance(result, BaseException):
            raise result
        else:
            resolved.append(result)
    if failed:
        logger.warning("Consolidation failed: %d of %d recipe(s) could not be resolved: %s",
                       len(failed), len(recipe_ids), failed)
        raise ResolutionError(failed, cause=first_cause)
    return resolved


def merge_recipes(resolved: List[ResolvedRecipe]) -> List[GroceryListItem]:
    """Merge resolved lines into per-ingredient totals, grouped by first-seen department."""
    totals: Dict[str, _Accumulator] = {}
    for recipe in resolved:
        for line in recipe.lines:
            acc = totals.get(line.ingredient_id)
            if acc is None:
                acc = _Accumulator(line.ingredient_id, line.name, line.department, line.unit)
                totals[line.ingredient_id] = acc
            acc.add(line.quantity, line.unit, recipe)

    department_order: Dict[str, int] = {}
    for acc in totals.values():
        department_order.setdefault(acc.department, len(department_order))

    items = [acc.freeze() for acc in totals.values()]
    # stable: keeps first-seen item order inside each department
    items.sort(key=lambda i: department_order[i.department])
    for item in items:
        if item.unit_mismatch:
            logger.warning("Unit mismatch for %s (%s): totalled in %r, also %s",
                           item.name, item.ingredient_id, item.unit, dict(item.other_quantities))
    return items


async def consolidate(recipe_ids: Iterable[str], resolver: Resolver) -> GroceryList:
    """Build the consolidated grocery list for the given recipe ids.

    Args:
        recipe_ids: recipe identifiers in plan order; duplicates contribute once.
        resolver: object exposing `async resolve(recipe_id) -> ResolvedRecipe`.

    Returns:
        GroceryList whose items are partitioned by department (first-seen order).

    Raises:
        ResolutionError: naming every recipe id that could not be resolved.
    """
    unique_ids = _dedupe(recipe_ids)
    if not unique_ids:
        return GroceryList()
    resolved = await resolve_all(unique_ids, resolver)
    items = merge_recipes(resolved)
    logger.info("Consolidated %d recipe(s) into %d grocery item(s)", len(unique_ids), len(items))
    return GroceryList.of(items, unique_ids)


__all__ = ['consolidate', 'resolve_all', 'merge_recipes', 'Resolver']
