"""Plan domain entity: snapshot of the weekly buckets (breakfast, main) plus the week label."""
from typing import List, Optional, Tuple
from mealprep.utilities.constants import BUCKETS


class Plan:
    def __init__(self, week_label: str, breakfast: Optional[List[str]] = None,
                 main: Optional[List[str]] = None, generation: int = 0):
        self.week_label = week_label
        self.breakfast: Tuple[str, ...] = tuple(breakfast or ())
        self.main: Tuple[str, ...] = tuple(main or ())
        self.generation = generation

    def bucket(self, name: str) -> Tuple[str, ...]:
        if name not in BUCKETS:
            raise ValueError(f"Unknown bucket: {name}")
        return getattr(self, name)

    def recipe_ids(self) -> List[str]:
        """Breakfast ids followed by main ids (consolidation input)."""
        return list(self.breakfast) + list(self.main)

    def is_empty(self) -> bool:
        return not self.breakfast and not self.main

    def __repr__(self) -> str:
        return f"Plan({self.week_label!r}, breakfast={list(self.breakfast)}, main={list(self.main)}, gen={self.generation})"

    def to_dict(self):
        return {
            "week_label": self.week_label,
            "breakfast": list(self.breakfast),
            "main": list(self.main),
            "generation": self.generation,
        }
