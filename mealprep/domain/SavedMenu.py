"""SavedMenu domain entity: a labelled snapshot of both buckets plus sharing metadata."""
import re
from typing import List, Optional

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumerics to '-', strip leading/trailing dashes."""
    return _NON_ALNUM.sub('-', (text or '').lower()).strip('-')


class SavedMenu:
    def __init__(self, label: str, breakfast_ids: Optional[List[str]] = None,
                 main_ids: Optional[List[str]] = None, is_public: bool = False, slug: str = ""):
        self.label = label
        self.breakfast_ids = list(breakfast_ids or [])
        self.main_ids = list(main_ids or [])
        self.is_public = is_public
        self.slug = slug

    def __repr__(self) -> str:
        flag = "public" if self.is_public else "private"
        return f"SavedMenu({self.label!r}, slug={self.slug!r}, {flag})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return SavedMenu(
            label=d.get("label", ""),
            breakfast_ids=[str(i) for i in d.get("breakfast_ids", []) or []],
            main_ids=[str(i) for i in d.get("main_ids", []) or []],
            is_public=bool(d.get("is_public", False)),
            slug=d.get("slug", "") or "",
        )

    def to_dict(self):
        return {
            "label": self.label,
            "breakfast_ids": list(self.breakfast_ids),
            "main_ids": list(self.main_ids),
            "is_public": self.is_public,
            "slug": self.slug,
        }
