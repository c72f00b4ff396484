"""Ingredient line domain entity: one recipe's use of a catalog ingredient."""
from typing import List, Optional
from mealprep.utilities.constants import DEFAULT_DEPARTMENT


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


def _department_or_default(category: Optional[str]) -> str:
    if isinstance(category, str) and category.strip():
        return category.strip()
    return DEFAULT_DEPARTMENT


class IngredientLine:
    def __init__(self, ingredient_id: str = "", name: str = "", quantity: float = 0,
                 unit: str = "", department: Optional[str] = None):
        self.ingredient_id = str(ingredient_id)
        self.name = name
        self.quantity = quantity
        self.unit = unit or ""
        self.department = _department_or_default(department)

    def __str__(self) -> str:
        return f"{self.name} - {self.quantity} {self.unit} ({self.department})"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, IngredientLine):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @staticmethod
    def from_dict(data):
        '''Creates an IngredientLine from a catalog recipe-ingredient payload.

        Accepts the backend shape ({ingredient_id, quantity, unit, ingredient: {id, name, category}})
        as well as the flat shape ({ingredient_id, name, quantity, unit, department}).
        The id falls back to ingredient.id when ingredient_id is missing or null.

        Raises:
            ValueError: neither id is present.
        '''
        d = dict(data) if isinstance(data, dict) else {}
        nested = d.get("ingredient") if isinstance(d.get("ingredient"), dict) else {}
        name = d.get("name") or nested.get("name", "")
        ingredient_id = d.get("ingredient_id")
        if _blank(ingredient_id):
            ingredient_id = nested.get("id")
        if _blank(ingredient_id):
            # grocery items are keyed by ingredient id
            raise ValueError(f"Ingredient line without an id: {name or d!r}")
        department = d.get("department") or d.get("category") or nested.get("category")
        quantity = d.get("quantity", 0) or 0
        return IngredientLine(ingredient_id, name, quantity, d.get("unit", "") or "", department)

    def to_dict(self):
        return {
            "ingredient_id": self.ingredient_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "department": self.department,
        }


class ResolvedRecipe:
    """A recipe id together with its title and resolved ingredient lines."""

    def __init__(self, recipe_id: str, title: str, lines: Optional[List[IngredientLine]] = None):
        self.recipe_id = str(recipe_id)
        self.title = title
        self.lines = lines[:] if lines else []

    def __repr__(self) -> str:
        return f"ResolvedRecipe({self.recipe_id!r}, {self.title!r}, {len(self.lines)} lines)"
