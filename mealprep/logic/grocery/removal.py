"""Removal overlay: ingredients the user has hidden from the visible grocery list.

The overlay never touches the consolidated items; it only filters them. A
removal is keyed by ingredient id and remembers which recipes contributed the
ingredient when it was removed. It keeps hiding that ingredient on later lists
while the contributors are a subset of the remembered ones, so a newly added
recipe that needs the same ingredient brings it back with the new total.
"""
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from mealprep.domain.GroceryList import GroceryListItem

logger = logging.getLogger(__name__)


def apply_removals(items: Iterable[GroceryListItem], removed: Set[str]) -> List[GroceryListItem]:
    """Pure filter: items whose ingredient id is not in `removed`."""
    return [item for item in items if item.ingredient_id not in removed]


class RemovalOverlay:
    def __init__(self):
        # ingredient id -> contributing recipe ids at removal time (None: hide unconditionally)
        self._removed: Dict[str, Optional[FrozenSet[str]]] = {}

    def remove(self, ingredient_id: str, contributors: Optional[Iterable[str]] = None) -> None:
        key = str(ingredient_id)
        snapshot = frozenset(contributors) if contributors is not None else None
        previous = self._removed.get(key, frozenset())
        if previous is None or snapshot is None:
            self._removed[key] = None
        else:
            self._removed[key] = previous | snapshot
        logger.debug("Removed ingredient %s from grocery view", key)

    def restore(self, ingredient_id: str) -> None:
        self._removed.pop(str(ingredient_id), None)

    def reset(self) -> None:
        self._removed.clear()

    @property
    def removed(self) -> FrozenSet[str]:
        return frozenset(self._removed)

    def __contains__(self, ingredient_id) -> bool:
        return str(ingredient_id) in self._removed

    def __len__(self) -> int:
        return len(self._removed)

    def hidden_ids(self, items: Iterable[GroceryListItem]) -> Set[str]:
        """Ids among `items` the overlay currently hides."""
        hidden = set()
        for item in items:
            if item.ingredient_id not in self._removed:
                continue
            contributors = self._removed[item.ingredient_id]
            if contributors is None or set(item.recipe_ids) <= contributors:
                hidden.add(item.ingredient_id)
        return hidden

    def apply(self, items: Iterable[GroceryListItem]) -> List[GroceryListItem]:
        items = list(items)
        return apply_removals(items, self.hidden_ids(items))


__all__ = ['apply_removals', 'RemovalOverlay']
