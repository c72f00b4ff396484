import asyncio
import random
import threading
import unittest
from datetime import date

from mealprep.domain.Recipe import Recipe
from mealprep.domain.errors import ResolutionError
from mealprep.events.Event_Bus import (
    EventBus, GROCERY_FAILED, GROCERY_GENERATED, GROCERY_STALE_DISCARDED, PLAN_BUCKETS_CHANGED,
)
from mealprep.infra.Ingredient_Resolver import IngredientResolver
from mealprep.infra.Recipe_Catalog import JsonRecipeCatalog
from mealprep.logic.planning.plan_state import PlanStateManager, current_week_label, format_week_label


def line(ingredient_id, quantity, unit, category="Produce"):
    return {"ingredient_id": ingredient_id, "quantity": quantity, "unit": unit,
            "ingredient": {"id": ingredient_id, "name": ingredient_id.title(), "category": category}}


RECIPES = [
    {"id": "r1", "name": "Lemon Chicken", "ingredients": [line("lemon", 2, "ea"), line("chicken", 500, "g", "Meat")]},
    {"id": "r2", "name": "Tomato Pasta", "ingredients": [line("tomato", 3, "ea")]},
    {"id": "r4", "name": "Lemon Pancakes", "tags": ["breakfast"], "ingredients": [line("lemon", 1, "ea")]},
    {"id": "r8", "name": "Lemon Tart", "ingredients": [line("lemon", 1, "ea"), line("butter", 100, "g", "Dairy")]},
]


class SlowResolver:
    """Resolver that blocks until released, to interleave bucket edits with a generation."""

    def __init__(self, inner):
        self.inner = inner
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def resolve(self, recipe_id):
        self.started.set()
        await self.release.wait()
        return await self.inner.resolve(recipe_id)


class GatedResolver:
    """Resolver that holds each recipe until its own gate is opened."""

    def __init__(self, inner, recipe_ids):
        self.inner = inner
        self.gates = {recipe_id: asyncio.Event() for recipe_id in recipe_ids}
        self.started = {recipe_id: asyncio.Event() for recipe_id in recipe_ids}

    async def resolve(self, recipe_id):
        self.started[recipe_id].set()
        await self.gates[recipe_id].wait()
        return await self.inner.resolve(recipe_id)


class TestWeekLabel(unittest.TestCase):

    def test_same_month(self):
        self.assertEqual(format_week_label(date(2025, 10, 6), date(2025, 10, 12)), "Week of Oct 6-12, 2025")

    def test_spanning_months(self):
        self.assertEqual(format_week_label(date(2025, 9, 29), date(2025, 10, 5)), "Week of Sep 29-Oct 5, 2025")

    def test_current_week_starts_monday(self):
        self.assertEqual(current_week_label(date(2025, 10, 9)), "Week of Oct 6-12, 2025")


class TestBuckets(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.events = []
        self.bus.subscribe(PLAN_BUCKETS_CHANGED, lambda name, payload: self.events.append(payload))
        resolver = IngredientResolver(JsonRecipeCatalog(recipes=RECIPES))
        self.manager = PlanStateManager(resolver, event_bus=self.bus, rng=random.Random(7))

    def test_add_is_idempotent(self):
        self.assertTrue(self.manager.add_to_bucket("main", "r1"))
        self.assertFalse(self.manager.add_to_bucket("main", "r1"))
        self.assertEqual(self.manager.bucket("main"), ["r1"])
        self.assertEqual(len(self.events), 1)

    def test_same_recipe_allowed_in_both_buckets(self):
        self.manager.add_to_bucket("breakfast", "r1")
        self.manager.add_to_bucket("main", "r1")
        self.assertEqual(self.manager.snapshot().recipe_ids(), ["r1", "r1"])

    def test_unknown_bucket(self):
        with self.assertRaises(ValueError):
            self.manager.add_to_bucket("lunch", "r1")

    def test_remove_absent_is_noop(self):
        generation = self.manager.generation
        self.assertFalse(self.manager.remove_from_bucket("main", "r9"))
        self.assertEqual(self.manager.generation, generation)

    def test_shuffle_preserves_members(self):
        ids = [f"r{i}" for i in range(10)]
        for rid in ids:
            self.manager.add_to_bucket("main", rid)
        self.manager.shuffle("main")
        shuffled = self.manager.bucket("main")
        self.assertEqual(len(shuffled), len(ids))
        self.assertEqual(sorted(shuffled), sorted(ids))

    def test_clear(self):
        self.manager.add_to_bucket("breakfast", "r4")
        self.manager.add_to_bucket("main", "r1")
        self.manager.clear_buckets()
        self.assertTrue(self.manager.snapshot().is_empty())
        self.assertEqual(self.events[-1]["action"], "clear")

    def test_smart_fill(self):
        recipes = [Recipe(f"b{i}", f"Breakfast {i}", tags=["breakfast"]) for i in range(4)]
        recipes += [Recipe(f"m{i}", f"Main {i}", tags=["dinner"]) for i in range(10)]
        plan = self.manager.smart_fill(recipes, breakfast_count=2, main_count=6)
        self.assertEqual(len(plan.breakfast), 2)
        self.assertEqual(len(plan.main), 6)
        self.assertTrue(all(rid.startswith("b") for rid in plan.breakfast))
        self.assertTrue(all(rid.startswith("m") for rid in plan.main))
        self.assertEqual(len(set(plan.main)), 6)

    def test_smart_fill_falls_back_to_whole_catalog(self):
        recipes = [Recipe(f"m{i}", f"Main {i}") for i in range(3)]
        plan = self.manager.smart_fill(recipes, breakfast_count=2, main_count=6)
        self.assertEqual(len(plan.breakfast), 2)
        self.assertEqual(sorted(plan.main), ["m0", "m1", "m2"])

    def test_load_menu_adopts_label(self):
        plan = self.manager.load_menu("Week of Oct 6-12, 2025", ["r4", "r4"], ["r1"])
        self.assertEqual(plan.week_label, "Week of Oct 6-12, 2025")
        self.assertEqual(plan.breakfast, ("r4",))
        self.assertEqual(plan.main, ("r1",))


class TestGroceryGeneration(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.bus = EventBus()
        self.seen = []
        for name in (GROCERY_GENERATED, GROCERY_FAILED, GROCERY_STALE_DISCARDED):
            self.bus.subscribe(name, lambda event, payload: self.seen.append(event))
        self.resolver = IngredientResolver(JsonRecipeCatalog(recipes=RECIPES))
        self.manager = PlanStateManager(self.resolver, event_bus=self.bus)
        self.manager.add_to_bucket("breakfast", "r4")
        self.manager.add_to_bucket("main", "r1")
        self.manager.add_to_bucket("main", "r2")

    async def test_generate_from_buckets(self):
        grocery = await self.manager.generate_grocery_list()
        self.assertIs(grocery, self.manager.grocery_list)
        self.assertEqual(grocery.get("lemon").quantity, 3)
        self.assertEqual(self.seen, [GROCERY_GENERATED])

    async def test_generate_for_explicit_ids(self):
        grocery = await self.manager.generate_grocery_list(["r2"])
        self.assertEqual([i.ingredient_id for i in grocery], ["tomato"])

    async def test_failure_keeps_previous_list(self):
        previous = await self.manager.generate_grocery_list()
        self.manager.add_to_bucket("main", "missing")
        with self.assertRaises(ResolutionError) as ctx:
            await self.manager.generate_grocery_list()
        self.assertEqual(ctx.exception.recipe_ids, ["missing"])
        self.assertIs(self.manager.grocery_list, previous)
        self.assertEqual(self.seen, [GROCERY_GENERATED, GROCERY_FAILED])

    async def test_stale_result_is_discarded(self):
        slow = SlowResolver(self.resolver)
        self.manager.resolver = slow
        task = asyncio.ensure_future(self.manager.generate_grocery_list())
        await slow.started.wait()
        self.manager.remove_from_bucket("main", "r2")
        slow.release.set()
        result = await task
        self.assertIsNone(result)
        self.assertEqual(len(self.manager.grocery_list), 0)
        self.assertEqual(self.seen, [GROCERY_STALE_DISCARDED])

    async def test_removed_item_stays_hidden_on_regenerate(self):
        await self.manager.generate_grocery_list()
        self.assertTrue(self.manager.remove_grocery_item("lemon"))
        await self.manager.generate_grocery_list()
        visible = [i.ingredient_id for i in self.manager.visible_items()]
        self.assertNotIn("lemon", visible)
        self.assertEqual(self.manager.hidden_count(), 1)

    async def test_removed_item_reappears_with_new_contributor(self):
        await self.manager.generate_grocery_list()
        self.manager.remove_grocery_item("lemon")
        self.manager.add_to_bucket("main", "r8")
        await self.manager.generate_grocery_list()
        lemon = [i for i in self.manager.visible_items() if i.ingredient_id == "lemon"]
        self.assertEqual(len(lemon), 1)
        self.assertEqual(lemon[0].quantity, 4)

    async def test_reset_removals(self):
        await self.manager.generate_grocery_list()
        self.manager.remove_grocery_item("lemon")
        self.manager.reset_grocery_removals()
        self.assertIn("lemon", [i.ingredient_id for i in self.manager.visible_items()])

    async def test_remove_unknown_item_is_noop(self):
        await self.manager.generate_grocery_list()
        self.assertFalse(self.manager.remove_grocery_item("saffron"))
        self.assertEqual(self.manager.hidden_count(), 0)

    async def test_older_request_cannot_overwrite_newer_list(self):
        gated = GatedResolver(self.resolver, ["r1", "r2"])
        self.manager.resolver = gated
        older = asyncio.ensure_future(self.manager.generate_grocery_list(["r1"]))
        await gated.started["r1"].wait()
        newer = asyncio.ensure_future(self.manager.generate_grocery_list(["r2"]))
        await gated.started["r2"].wait()
        gated.gates["r2"].set()
        accepted = await newer
        gated.gates["r1"].set()
        self.assertIsNone(await older)
        self.assertIs(self.manager.grocery_list, accepted)
        self.assertEqual([i.ingredient_id for i in self.manager.grocery_list], ["tomato"])
        self.assertEqual(self.seen, [GROCERY_GENERATED, GROCERY_STALE_DISCARDED])

    async def test_newer_request_replaces_earlier_finish(self):
        gated = GatedResolver(self.resolver, ["r1", "r2"])
        self.manager.resolver = gated
        first = asyncio.ensure_future(self.manager.generate_grocery_list(["r1"]))
        await gated.started["r1"].wait()
        second = asyncio.ensure_future(self.manager.generate_grocery_list(["r2"]))
        await gated.started["r2"].wait()
        gated.gates["r1"].set()
        self.assertIsNotNone(await first)
        gated.gates["r2"].set()
        latest = await second
        self.assertIs(self.manager.grocery_list, latest)
        self.assertEqual(self.seen, [GROCERY_GENERATED, GROCERY_GENERATED])

    async def test_item_removal_waits_for_the_lock(self):
        await self.manager.generate_grocery_list()
        held = threading.Event()
        release = threading.Event()
        results = []

        def hold_lock():
            with self.manager._lock:
                held.set()
                release.wait(5)

        holder = threading.Thread(target=hold_lock)
        holder.start()
        self.assertTrue(held.wait(5))
        remover = threading.Thread(target=lambda: results.append(self.manager.remove_grocery_item("lemon")))
        remover.start()
        remover.join(0.1)
        self.assertTrue(remover.is_alive())
        self.assertEqual(results, [])
        release.set()
        holder.join(5)
        remover.join(5)
        self.assertEqual(results, [True])
        self.assertEqual(self.manager.hidden_count(), 1)


if __name__ == "__main__":
    unittest.main()
