"""Grocery list snapshot: consolidated items, each attributed to one department.

A GroceryList is produced fresh by every consolidation run and never mutated
afterwards; the removal overlay filters it into a new list instead.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from mealprep.domain.errors import UnitMismatchWarning


@dataclass(frozen=True)
class GroceryListItem:
    ingredient_id: str
    name: str
    department: str
    quantity: float
    unit: str
    recipes: Tuple[str, ...] = ()
    recipe_ids: Tuple[str, ...] = ()
    unit_mismatch: bool = False
    # Quantities reported in units other than `unit`, keyed by unit (not summed into quantity)
    other_quantities: Tuple[Tuple[str, float], ...] = ()

    @property
    def warning(self) -> Optional[UnitMismatchWarning]:
        if not self.unit_mismatch:
            return None
        return UnitMismatchWarning(self.ingredient_id, self.unit, [u for u, _ in self.other_quantities])

    def to_dict(self) -> Dict:
        warning = self.warning
        return {
            "ingredient_id": self.ingredient_id,
            "name": self.name,
            "department": self.department,
            "quantity": self.quantity,
            "unit": self.unit,
            "recipes": list(self.recipes),
            "recipe_ids": list(self.recipe_ids),
            "unit_mismatch": self.unit_mismatch,
            "other_quantities": {u: q for u, q in self.other_quantities},
            "warning": str(warning) if warning else None,
        }


@dataclass(frozen=True)
class DepartmentSection:
    name: str
    items: Tuple[GroceryListItem, ...] = ()

    def to_dict(self) -> Dict:
        return {"name": self.name, "items": [i.to_dict() for i in self.items]}


@dataclass(frozen=True)
class GroceryList:
    items: Tuple[GroceryListItem, ...] = ()
    recipe_ids: Tuple[str, ...] = field(default=())

    @classmethod
    def of(cls, items: Iterable[GroceryListItem], recipe_ids: Iterable[str] = ()) -> "GroceryList":
        return cls(tuple(items), tuple(recipe_ids))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def get(self, ingredient_id: str) -> Optional[GroceryListItem]:
        for item in self.items:
            if item.ingredient_id == ingredient_id:
                return item
        return None

    def department_names(self) -> List[str]:
        """Departments in first-seen order."""
        return list(dict.fromkeys(i.department for i in self.items))

    def sections(self) -> List[DepartmentSection]:
        return group_sections(self.items)

    def warnings(self) -> List[UnitMismatchWarning]:
        return [i.warning for i in self.items if i.unit_mismatch]


def group_sections(items: Iterable[GroceryListItem]) -> List[DepartmentSection]:
    """Partition items into department sections; empty departments are not emitted."""
    buckets: Dict[str, List[GroceryListItem]] = {}
    for item in items:
        buckets.setdefault(item.department, []).append(item)
    return [DepartmentSection(name, tuple(dept_items)) for name, dept_items in buckets.items()]


EMPTY_GROCERY_LIST = GroceryList()
