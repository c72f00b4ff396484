from typing import Final

DEFAULT_DEPARTMENT: Final[str] = "Other"
BUCKETS: Final[tuple] = ("breakfast", "main")
BREAKFAST_TAG: Final[str] = "breakfast"
VEGETARIAN_TAGS: Final[tuple] = ("vegetarian", "vegan")
SORT_MODES: Final[tuple] = ("relevance", "ratingDesc", "recency")
MONTHS_SHORT: Final[tuple] = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
# Sort key for recipes never cooked (or unknown): after everything else
UNKNOWN_RECENCY: Final[float] = 9e9
