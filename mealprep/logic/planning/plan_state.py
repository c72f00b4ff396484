"""Plan state manager: the single owner of the weekly buckets and the grocery view.

Every mutation runs under one lock and bumps a generation counter. A grocery
list generation remembers the counter it started from and its result is
dropped on arrival if the buckets changed in the meantime.
"""
import logging
import random
from datetime import date, timedelta
from threading import RLock
from typing import Dict, Iterable, List, Optional

from mealprep.domain.GroceryList import (
    EMPTY_GROCERY_LIST, DepartmentSection, GroceryList, GroceryListItem, group_sections,
)
from mealprep.domain.Plan import Plan
from mealprep.domain.Recipe import Recipe
from mealprep.domain.errors import ResolutionError
from mealprep.events.Event_Bus import EventBus
from mealprep.events.event_helpers import (
    publish_buckets_changed, publish_grocery_failed, publish_grocery_generated, publish_grocery_stale,
)
from mealprep.logic.grocery.consolidation import Resolver, consolidate
from mealprep.logic.grocery.removal import RemovalOverlay
from mealprep.utilities import config
from mealprep.utilities.constants import BUCKETS, MONTHS_SHORT

logger = logging.getLogger(__name__)


def format_week_label(start: date, end: date) -> str:
    """'Week of Oct 6-12, 2025' (end month repeated when the week spans two months)."""
    if start.month == end.month:
        span = f"{MONTHS_SHORT[start.month - 1]} {start.day}-{end.day}"
    else:
        span = f"{MONTHS_SHORT[start.month - 1]} {start.day}-{MONTHS_SHORT[end.month - 1]} {end.day}"
    return f"Week of {span}, {end.year}"


def current_week_label(today: Optional[date] = None) -> str:
    today = today or date.today()
    monday = today - timedelta(days=today.isoweekday() - 1)
    return format_week_label(monday, monday + timedelta(days=6))


class PlanStateManager:
    def __init__(self, resolver: Resolver, overlay: Optional[RemovalOverlay] = None,
                 event_bus: Optional[EventBus] = None, rng: Optional[random.Random] = None,
                 week_label: Optional[str] = None):
        self.resolver = resolver
        self.overlay = overlay if overlay is not None else RemovalOverlay()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self._rng = rng or random.Random()
        self._lock = RLock()
        self._buckets: Dict[str, List[str]] = {name: [] for name in BUCKETS}
        self._generation = 0
        # grocery requests are numbered; a result older than the last accepted one is dropped
        self._requests = 0
        self._accepted_request = 0
        self.week_label = week_label or current_week_label()
        self._grocery: GroceryList = EMPTY_GROCERY_LIST

    # --- state ---------------------------------------------------------------
    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> Plan:
        with self._lock:
            return Plan(self.week_label, self._buckets["breakfast"], self._buckets["main"], self._generation)

    def bucket(self, name: str) -> List[str]:
        with self._lock:
            return list(self._bucket(name))

    def _bucket(self, name: str) -> List[str]:
        try:
            return self._buckets[name]
        except KeyError:
            raise ValueError(f"Unknown bucket: {name}") from None

    def _changed(self, bucket: Optional[str], action: str) -> None:
        # caller holds the lock
        self._generation += 1
        logger.debug("Plan %s on %s -> generation %d", action, bucket or "all buckets", self._generation)
        publish_buckets_changed(self.event_bus, bucket, action, self._generation)

    # --- bucket mutations ----------------------------------------------------
    def add_to_bucket(self, bucket: str, recipe_id: str) -> bool:
        """Append a recipe to a bucket; False (no-op) if already present."""
        recipe_id = str(recipe_id)
        with self._lock:
            ids = self._bucket(bucket)
            if recipe_id in ids:
                return False
            ids.append(recipe_id)
            self._changed(bucket, "add")
            return True

    def remove_from_bucket(self, bucket: str, recipe_id: str) -> bool:
        recipe_id = str(recipe_id)
        with self._lock:
            ids = self._bucket(bucket)
            if recipe_id not in ids:
                return False
            ids.remove(recipe_id)
            self._changed(bucket, "remove")
            return True

    def clear_buckets(self) -> None:
        with self._lock:
            if not any(self._buckets.values()):
                return
            for ids in self._buckets.values():
                ids.clear()
            self._changed(None, "clear")

    def shuffle(self, bucket: Optional[str] = None) -> None:
        """Reorder one bucket (or both) in place; membership is unchanged."""
        with self._lock:
            names = [bucket] if bucket else list(BUCKETS)
            for name in names:
                self._rng.shuffle(self._bucket(name))
            self._changed(bucket, "shuffle")

    def replace_buckets(self, breakfast_ids: Iterable[str], main_ids: Iterable[str]) -> None:
        """Replace both buckets wholesale (duplicates dropped, first occurrence kept)."""
        with self._lock:
            self._buckets["breakfast"] = list(dict.fromkeys(str(i) for i in breakfast_ids))
            self._buckets["main"] = list(dict.fromkeys(str(i) for i in main_ids))
            self._changed(None, "replace")

    def smart_fill(self, recipes: List[Recipe], breakfast_count: Optional[int] = None,
                   main_count: Optional[int] = None) -> Plan:
        """Randomly fill both buckets from the catalog, replacing their contents.

        Breakfast picks come from breakfast-tagged recipes and main picks from
        the rest; an empty pool falls back to the whole catalog.
        """
        if breakfast_count is None:
            breakfast_count = config.SMART_FILL_BREAKFAST_COUNT
        if main_count is None:
            main_count = config.SMART_FILL_MAIN_COUNT
        breakfasts = [r for r in recipes if r.is_breakfast()]
        mains = [r for r in recipes if not r.is_breakfast()]
        with self._lock:
            picked_breakfast = self._pick(breakfasts or recipes, breakfast_count)
            picked_main = self._pick(mains or recipes, main_count)
            self._buckets["breakfast"] = picked_breakfast
            self._buckets["main"] = picked_main
            self._changed(None, "smart_fill")
            logger.info("Smart fill picked %d breakfast and %d main recipe(s)",
                        len(picked_breakfast), len(picked_main))
        return self.snapshot()

    def _pick(self, pool: List[Recipe], count: int) -> List[str]:
        unique = list(dict.fromkeys(r.id for r in pool))
        return self._rng.sample(unique, min(max(count, 0), len(unique)))

    def set_week(self, start: date, end: date) -> str:
        with self._lock:
            self.week_label = format_week_label(start, end)
        return self.week_label

    def load_menu(self, label: str, breakfast_ids: Iterable[str], main_ids: Iterable[str]) -> Plan:
        """Restore buckets from a saved menu and adopt its week label."""
        with self._lock:
            self.replace_buckets(breakfast_ids, main_ids)
            self.week_label = label
        return self.snapshot()

    # --- grocery list --------------------------------------------------------
    @property
    def grocery_list(self) -> GroceryList:
        with self._lock:
            return self._grocery

    async def generate_grocery_list(self, recipe_ids: Optional[Iterable[str]] = None) -> Optional[GroceryList]:
        """Consolidate the current buckets (or the given ids) into a new grocery list.

        Returns the accepted list, or None when the result is stale: the
        buckets changed while it was being built, or a request started later
        has already been accepted.

        Raises:
            ResolutionError: the previous grocery list is kept as-is.
        """
        with self._lock:
            self._requests += 1
            request = self._requests
            started_at = self._generation
            ids = list(recipe_ids) if recipe_ids is not None else self.snapshot().recipe_ids()
        try:
            grocery = await consolidate(ids, self.resolver)
        except ResolutionError as e:
            publish_grocery_failed(self.event_bus, e)
            raise
        with self._lock:
            if started_at != self._generation or request < self._accepted_request:
                logger.info("Discarding stale grocery list (request %d, generation %d, now %d)",
                            request, started_at, self._generation)
                publish_grocery_stale(self.event_bus, started_at, self._generation)
                return None
            self._grocery = grocery
            self._accepted_request = request
        publish_grocery_generated(self.event_bus, grocery, started_at)
        return grocery

    def visible_items(self) -> List[GroceryListItem]:
        with self._lock:
            return self.overlay.apply(self._grocery.items)

    def visible_sections(self) -> List[DepartmentSection]:
        return group_sections(self.visible_items())

    def hidden_count(self) -> int:
        with self._lock:
            return len(self.overlay.hidden_ids(self._grocery.items))

    def remove_grocery_item(self, ingredient_id: str) -> bool:
        """Hide an ingredient; no-op (False) if it is not on the current list."""
        with self._lock:
            item = self._grocery.get(str(ingredient_id))
            if item is None:
                logger.debug("Ignoring removal of %s: not on the current grocery list", ingredient_id)
                return False
            self.overlay.remove(item.ingredient_id, item.recipe_ids)
            return True

    def reset_grocery_removals(self) -> None:
        with self._lock:
            self.overlay.reset()
