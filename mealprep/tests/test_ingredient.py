import unittest
from mealprep.domain.Ingredient import IngredientLine


class TestIngredient(unittest.TestCase):

    def test_from_backend_payload(self):
        line = IngredientLine.from_dict({
            "ingredient_id": 7,
            "quantity": 2,
            "unit": "ea",
            "ingredient": {"id": 7, "name": "Lemon", "category": "Produce"},
        })
        self.assertEqual(line, IngredientLine("7", "Lemon", 2, "ea", "Produce"))

    def test_from_flat_payload(self):
        line = IngredientLine.from_dict({"ingredient_id": "salt", "name": "Salt", "quantity": 1,
                                         "unit": "tsp", "department": "Spices"})
        self.assertEqual(line.department, "Spices")

    def test_missing_department_is_other(self):
        self.assertEqual(IngredientLine("x", "X", 1, "ea", None).department, "Other")
        self.assertEqual(IngredientLine("x", "X", 1, "ea", "   ").department, "Other")

    def test_missing_quantity_and_unit(self):
        line = IngredientLine.from_dict({"ingredient": {"id": "pepper", "name": "Pepper"}})
        self.assertEqual(line.ingredient_id, "pepper")
        self.assertEqual(line.quantity, 0)
        self.assertEqual(line.unit, "")

    def test_null_ingredient_id_falls_back_to_nested_id(self):
        line = IngredientLine.from_dict({
            "ingredient_id": None,
            "quantity": 1,
            "unit": "tsp",
            "ingredient": {"id": 7, "name": "Salt", "category": "Spices"},
        })
        self.assertEqual(line.ingredient_id, "7")

    def test_blank_flat_id_falls_back_to_nested_id(self):
        line = IngredientLine.from_dict({"ingredient_id": "  ", "name": "Salt", "quantity": 1,
                                         "unit": "tsp", "ingredient": {"id": "salt"}})
        self.assertEqual(line.ingredient_id, "salt")

    def test_line_without_any_id_is_rejected(self):
        with self.assertRaises(ValueError):
            IngredientLine.from_dict({"name": "Salt", "quantity": 1, "unit": "tsp"})
        with self.assertRaises(ValueError):
            IngredientLine.from_dict({"ingredient_id": None, "quantity": 2, "unit": "tsp",
                                      "ingredient": {"name": "Pepper"}})
