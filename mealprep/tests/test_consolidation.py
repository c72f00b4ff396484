import unittest

from mealprep.domain.errors import ResolutionError, UnitMismatchWarning
from mealprep.infra.Ingredient_Resolver import IngredientResolver
from mealprep.infra.Recipe_Catalog import JsonRecipeCatalog
from mealprep.logic.grocery.consolidation import consolidate


def line(ingredient_id, name, quantity, unit, category=None):
    return {
        "ingredient_id": ingredient_id,
        "quantity": quantity,
        "unit": unit,
        "ingredient": {"id": ingredient_id, "name": name, "category": category},
    }


RECIPES = [
    {"id": "r1", "name": "Lemon Chicken", "tags": ["dinner"], "ingredients": [
        line("lemon", "Lemon", 2, "ea", "Produce"),
        line("chicken", "Chicken", 500, "g", "Meat"),
    ]},
    {"id": "r2", "name": "Tomato Pasta", "tags": ["dinner"], "ingredients": [
        line("pasta", "Pasta", 400, "g", "Pantry"),
        line("tomato", "Tomato", 3, "ea", "Produce"),
    ]},
    {"id": "r4", "name": "Lemon Pancakes", "tags": ["breakfast"], "ingredients": [
        line("lemon", "Lemon", 1, "ea", "Produce"),
        line("flour", "Flour", 200, "g", "Pantry"),
    ]},
    {"id": "r5", "name": "Lemonade", "tags": [], "ingredients": [
        line("lemon", "Lemon", 250, "g", "Produce"),
        line("sugar", "Sugar", 50, "g"),
    ]},
    {"id": "r6", "name": "Citrus Salad", "tags": [], "ingredients": [
        # same display name as the lemon above, different catalog id
        line("lemon-meyer", "Lemon", 1, "ea", "Produce"),
    ]},
    {"id": "r7", "name": "Seasoning Mix", "tags": [], "ingredients": [
        {"ingredient_id": None, "quantity": 1, "unit": "tsp", "ingredient": {"id": "salt", "name": "Salt"}},
        {"ingredient_id": None, "quantity": 2, "unit": "tsp", "ingredient": {"id": "pepper", "name": "Pepper"}},
    ]},
    {"id": "r9", "name": "Mystery Stew", "tags": [], "ingredients": [
        {"quantity": 1, "unit": "tsp", "ingredient": {"name": "Salt"}},
        {"quantity": 2, "unit": "tsp", "ingredient": {"name": "Pepper"}},
    ]},
]


class TestConsolidation(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.resolver = IngredientResolver(JsonRecipeCatalog(recipes=RECIPES))

    async def test_lemon_scenario(self):
        # breakfast=[r4], main=[r1, r2]
        grocery = await consolidate(["r4", "r1", "r2"], self.resolver)
        lemon = grocery.get("lemon")
        self.assertIsNotNone(lemon)
        self.assertEqual(lemon.quantity, 3)
        self.assertEqual(lemon.unit, "ea")
        self.assertEqual(set(lemon.recipes), {"Lemon Chicken", "Lemon Pancakes"})
        self.assertEqual(set(lemon.recipe_ids), {"r1", "r4"})
        self.assertFalse(lemon.unit_mismatch)

    async def test_empty_input(self):
        grocery = await consolidate([], self.resolver)
        self.assertEqual(len(grocery), 0)
        self.assertEqual(grocery.sections(), [])

    async def test_order_does_not_change_totals(self):
        a = await consolidate(["r1", "r2", "r4"], self.resolver)
        b = await consolidate(["r4", "r2", "r1"], self.resolver)
        totals_a = {i.ingredient_id: (i.quantity, i.unit, set(i.recipes)) for i in a}
        totals_b = {i.ingredient_id: (i.quantity, i.unit, set(i.recipes)) for i in b}
        self.assertEqual(totals_a, totals_b)

    async def test_idempotent(self):
        first = await consolidate(["r1", "r4"], self.resolver)
        second = await consolidate(["r1", "r4"], self.resolver)
        self.assertEqual(first.items, second.items)

    async def test_duplicate_ids_contribute_once(self):
        grocery = await consolidate(["r1", "r1", "r4"], self.resolver)
        self.assertEqual(grocery.get("lemon").quantity, 3)
        self.assertEqual(grocery.recipe_ids, ("r1", "r4"))

    async def test_merges_by_id_not_name(self):
        grocery = await consolidate(["r1", "r6"], self.resolver)
        lemons = [i for i in grocery if i.name == "Lemon"]
        self.assertEqual(len(lemons), 2)
        self.assertEqual(grocery.get("lemon").quantity, 2)
        self.assertEqual(grocery.get("lemon-meyer").quantity, 1)

    async def test_unit_mismatch_is_flagged_not_summed(self):
        grocery = await consolidate(["r1", "r5"], self.resolver)
        lemon = grocery.get("lemon")
        self.assertTrue(lemon.unit_mismatch)
        self.assertEqual(lemon.quantity, 2)
        self.assertEqual(lemon.unit, "ea")
        self.assertEqual(dict(lemon.other_quantities), {"g": 250})
        self.assertIsInstance(lemon.warning, UnitMismatchWarning)
        self.assertEqual(lemon.warning.other_units, ["g"])
        self.assertEqual(len(grocery.warnings()), 1)

    async def test_missing_department_goes_to_other(self):
        grocery = await consolidate(["r5"], self.resolver)
        self.assertEqual(grocery.get("sugar").department, "Other")

    async def test_departments_are_contiguous_in_first_seen_order(self):
        grocery = await consolidate(["r1", "r2", "r4"], self.resolver)
        self.assertEqual(grocery.department_names(), ["Produce", "Meat", "Pantry"])
        departments = [i.department for i in grocery]
        self.assertEqual(departments, sorted(departments, key=grocery.department_names().index))
        for section in grocery.sections():
            self.assertTrue(section.items)

    async def test_null_line_ids_use_nested_ids(self):
        grocery = await consolidate(["r7"], self.resolver)
        self.assertEqual(len(grocery), 2)
        self.assertEqual(grocery.get("salt").quantity, 1)
        self.assertEqual(grocery.get("pepper").quantity, 2)

    async def test_lines_without_ids_fail_instead_of_merging(self):
        with self.assertRaises(ResolutionError) as ctx:
            await consolidate(["r1", "r9"], self.resolver)
        self.assertEqual(ctx.exception.recipe_ids, ["r9"])

    async def test_failure_names_every_failing_recipe(self):
        with self.assertRaises(ResolutionError) as ctx:
            await consolidate(["r1", "missing-1", "r2", "missing-2"], self.resolver)
        self.assertEqual(ctx.exception.recipe_ids, ["missing-1", "missing-2"])
        self.assertIsInstance(ctx.exception.cause, ResolutionError)


if __name__ == "__main__":
    unittest.main()
