"""Recipe browsing: search, filter flags and sort mode as one immutable options value.

Filters are independent of each other and of the sort; sorting is stable so
equal keys keep catalog order.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List

from mealprep.domain.Recipe import Recipe
from mealprep.utilities.constants import SORT_MODES, UNKNOWN_RECENCY


@dataclass(frozen=True)
class BrowseOptions:
    query: str = ""
    breakfast: bool = False
    vegetarian: bool = False
    liked: bool = False
    sort: str = "relevance"

    def __post_init__(self):
        if self.sort not in SORT_MODES:
            raise ValueError(f"Unknown sort mode: {self.sort}")


def _matches(recipe: Recipe, options: BrowseOptions) -> bool:
    if options.breakfast and not recipe.is_breakfast():
        return False
    if options.vegetarian and not recipe.is_vegetarian():
        return False
    if options.liked and not recipe.liked:
        return False
    if options.query and options.query.strip().lower() not in recipe.title.lower():
        return False
    return True


SORT_KEYS: Dict[str, Callable[[Recipe], float]] = {
    "ratingDesc": lambda r: -(r.rating or 0),
    "recency": lambda r: r.last_cooked_weeks_ago if r.last_cooked_weeks_ago is not None else UNKNOWN_RECENCY,
}


def browse_recipes(recipes: List[Recipe], options: BrowseOptions = BrowseOptions()) -> List[Recipe]:
    result = [r for r in recipes if _matches(r, options)]
    key = SORT_KEYS.get(options.sort)
    if key is not None:
        result = sorted(result, key=key)
    return result


__all__ = ['BrowseOptions', 'browse_recipes']
