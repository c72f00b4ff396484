"""Recipe domain entity: id, title, rating, tags, liked flag, lazily attached department groups."""
from typing import Dict, List, Optional
from mealprep.domain.Ingredient import IngredientLine
from mealprep.utilities.constants import BREAKFAST_TAG, VEGETARIAN_TAGS


class DepartmentGroup:
    """One department's ingredient lines for a single recipe (immutable once built)."""

    def __init__(self, name: str, items: Optional[List[Dict]] = None):
        self.name = name
        self._items = tuple(dict(i) for i in (items or []))

    @property
    def items(self) -> List[Dict]:
        return [dict(i) for i in self._items]

    def __repr__(self) -> str:
        return f"DepartmentGroup({self.name!r}, {len(self._items)} items)"

    def to_dict(self):
        return {"name": self.name, "items": self.items}

    @staticmethod
    def from_dict(data):
        return DepartmentGroup(data.get("name", ""), data.get("items", []))


def group_by_department(lines: List[IngredientLine]) -> List[DepartmentGroup]:
    """Group ingredient lines by department, keeping first-seen department order."""
    dept_map: Dict[str, List[Dict]] = {}
    for line in lines:
        dept_map.setdefault(line.department, []).append(
            {"name": line.name, "qty": line.quantity, "unit": line.unit}
        )
    return [DepartmentGroup(name, items) for name, items in dept_map.items()]


class Recipe:
    def __init__(self, recipe_id: str = "", title: str = "", rating: Optional[float] = None,
                 tags: Optional[List[str]] = None, liked: bool = False,
                 last_cooked_weeks_ago: Optional[int] = None,
                 departments: Optional[List[DepartmentGroup]] = None):
        self.id = str(recipe_id)
        self.title = title
        self.rating = rating
        self.tags = tags[:] if tags else []
        self.liked = liked
        self.last_cooked_weeks_ago = last_cooked_weeks_ago
        self.departments: List[DepartmentGroup] = departments[:] if departments else []

    def __str__(self) -> str:
        rating = f"{self.rating}" if self.rating is not None else "-"
        return f"{self.title} ({self.id}) - Rating: {rating} - Tags: {', '.join(self.tags)}"

    __repr__ = __str__

    def is_breakfast(self) -> bool:
        return BREAKFAST_TAG in self.tags

    def is_vegetarian(self) -> bool:
        return any(t in self.tags for t in VEGETARIAN_TAGS)

    @property
    def ingredients_loaded(self) -> bool:
        return bool(self.departments)

    def attach_departments(self, departments: List[DepartmentGroup]) -> bool:
        """Attach resolved department groups once; later calls are ignored."""
        if self.departments:
            return False
        self.departments = list(departments)
        return True

    @staticmethod
    def from_dict(data):
        '''Creates a Recipe from a catalog payload (backend keys `id`/`name` or `title`).'''
        d = dict(data)
        rating = d.get("rating")
        try:
            rating = float(rating) if rating is not None else None
        except (TypeError, ValueError):
            rating = None
        weeks = d.get("last_cooked_weeks_ago")
        return Recipe(
            recipe_id=d.get("id", ""),
            title=d.get("title") or d.get("name", ""),
            rating=rating,
            tags=[str(t).strip().lower() for t in d.get("tags", []) or [] if str(t).strip()],
            liked=bool(d.get("liked", False)),
            last_cooked_weeks_ago=int(weeks) if weeks is not None else None,
            departments=[DepartmentGroup.from_dict(g) for g in d.get("departments", []) or []],
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "rating": self.rating,
            "tags": self.tags,
            "liked": self.liked,
            "last_cooked_weeks_ago": self.last_cooked_weeks_ago,
            "departments": [g.to_dict() for g in self.departments],
        }
