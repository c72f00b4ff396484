"""Error taxonomy shared by the grocery, planning and history layers."""
from typing import Iterable, Optional


class ResolutionError(Exception):
    """Ingredient or recipe fetch failed for one or more recipes."""

    def __init__(self, recipe_ids: Iterable[str], message: str = "", cause: Optional[BaseException] = None):
        self.recipe_ids = [str(r) for r in recipe_ids]
        self.cause = cause
        if not message:
            message = f"Could not resolve ingredients for recipe(s): {', '.join(self.recipe_ids)}"
        super().__init__(message)


class NotFoundError(Exception):
    """A saved menu (or public slug) does not exist."""

    def __init__(self, key: str, message: str = ""):
        self.key = key
        super().__init__(message or f"No saved menu found for '{key}'")


class UnitMismatchWarning(UserWarning):
    """Attached to a grocery item whose contributing lines disagree on the unit.

    Never raised by the engine; consumers display it next to the item.
    """

    def __init__(self, ingredient_id: str, unit: str, other_units: Iterable[str]):
        self.ingredient_id = ingredient_id
        self.unit = unit
        self.other_units = sorted(set(other_units))
        super().__init__(
            f"Ingredient {ingredient_id} totalled in '{unit}' but also listed in: {', '.join(self.other_units)}"
        )


__all__ = ['ResolutionError', 'NotFoundError', 'UnitMismatchWarning']
