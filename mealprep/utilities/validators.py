"""
Input validation schemas using Pydantic for the planner HTTP API.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from mealprep.utilities.constants import SORT_MODES


def _clean_ids(values):
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


class AddToBucketInput(BaseModel):
    """Schema for adding a recipe to a bucket."""
    recipe_id: str = Field(..., min_length=1)

    @field_validator('recipe_id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        """Catalog ids may arrive as numbers."""
        return str(v).strip() if v is not None else v


class SmartFillInput(BaseModel):
    """Schema for smart fill bounds (None -> configured default)."""
    breakfast_count: Optional[int] = Field(None, ge=0, le=21)
    main_count: Optional[int] = Field(None, ge=0, le=42)


class WeekInput(BaseModel):
    """Schema for choosing the planned week."""
    start: date
    end: date

    @model_validator(mode='after')
    def check_order(self):
        if self.end < self.start:
            raise ValueError('Week end must not be before week start')
        return self


class GroceryListRequest(BaseModel):
    """Schema for grocery list generation; omitted ids -> both buckets."""
    recipe_ids: Optional[List[str]] = None

    @field_validator('recipe_ids', mode='before')
    @classmethod
    def coerce_ids(cls, v):
        if v is None:
            return v
        return _clean_ids(v)


class SaveMenuInput(BaseModel):
    """Schema for saving the current buckets under a week label."""
    label: Optional[str] = Field(None, max_length=200)

    @field_validator('label')
    @classmethod
    def strip_label(cls, v):
        """Remove surrounding whitespace; blank -> use current week label."""
        if v is None:
            return v
        v = v.strip()
        return v or None


class PublishInput(BaseModel):
    """Schema for the public/private toggle."""
    is_public: bool


class BrowseQuery(BaseModel):
    """Schema for recipe search/filter/sort parameters."""
    q: str = ""
    breakfast: bool = False
    vegetarian: bool = False
    liked: bool = False
    sort: str = "relevance"

    @field_validator('sort')
    @classmethod
    def known_sort(cls, v):
        if v not in SORT_MODES:
            raise ValueError(f"sort must be one of {', '.join(SORT_MODES)}")
        return v
