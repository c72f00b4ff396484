"""Plan history store: named weekly menus persisted to a JSON file.

Menus are keyed by their week label. Saving under an existing label replaces
the bucket snapshots but keeps the menu's public flag and slug. Slugs are
derived once, from the label at first save; a slug already owned by another
label gets a numeric suffix (-2, -3, ...).
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import Lock
from typing import List, Optional, Tuple

from mealprep.domain.SavedMenu import SavedMenu, slugify
from mealprep.domain.errors import NotFoundError
from mealprep.infra.paths import MENUS_FILE
from mealprep.utilities import config

logger = logging.getLogger(__name__)


class MenuRepository:
    def __init__(self, path: Optional[Path] = None, share_base_url: str = config.SHARE_BASE_URL):
        self.path = Path(path) if path else MENUS_FILE
        self.share_base_url = share_base_url.rstrip('/')
        self._lock = Lock()

    # --- persistence -------------------------------------------------------
    def _read(self) -> List[SavedMenu]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f) or []
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in menus file %s: %s", self.path, e)
            return []
        return [SavedMenu.from_dict(d) for d in data if isinstance(d, dict)]

    def _write(self, menus: List[SavedMenu]) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".menus_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump([m.to_dict() for m in menus], tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- queries -----------------------------------------------------------
    def list_menus(self) -> List[SavedMenu]:
        """Saved menus, most recently created first."""
        with self._lock:
            return self._read()

    def get(self, label: str) -> SavedMenu:
        for menu in self.list_menus():
            if menu.label == label:
                return menu
        raise NotFoundError(label)

    def get_public(self, slug: str) -> SavedMenu:
        """Published menu behind a share link."""
        for menu in self.list_menus():
            if menu.slug and menu.slug == slug and menu.is_public:
                return menu
        raise NotFoundError(slug, f"No public menu for link '{slug}'")

    def share_url(self, menu: SavedMenu) -> Optional[str]:
        slug = (menu.slug or '').strip() if isinstance(menu.slug, str) else ''
        if not slug:
            return None
        return f"{self.share_base_url}/{slug}"

    # --- commands ----------------------------------------------------------
    @staticmethod
    def _unique_slug(label: str, menus: List[SavedMenu]) -> str:
        base = slugify(label)
        if not base:
            return ""
        taken = {m.slug for m in menus if m.slug}
        if base not in taken:
            return base
        n = 2
        while f"{base}-{n}" in taken:
            n += 1
        logger.info("Slug %r already in use; saving %r as %r", base, label, f"{base}-{n}")
        return f"{base}-{n}"

    def save(self, label: str, breakfast_ids: List[str], main_ids: List[str]) -> SavedMenu:
        """Upsert a menu by label."""
        with self._lock:
            menus = self._read()
            for menu in menus:
                if menu.label == label:
                    menu.breakfast_ids = list(breakfast_ids)
                    menu.main_ids = list(main_ids)
                    if not menu.slug:
                        menu.slug = self._unique_slug(label, menus)
                    self._write(menus)
                    logger.info("Updated saved menu %r", label)
                    return menu
            menu = SavedMenu(label, breakfast_ids, main_ids, is_public=False,
                             slug=self._unique_slug(label, menus))
            menus.insert(0, menu)
            self._write(menus)
            logger.info("Saved new menu %r (slug=%r)", label, menu.slug)
            return menu

    def load(self, label: str) -> Tuple[List[str], List[str]]:
        menu = self.get(label)
        return list(menu.breakfast_ids), list(menu.main_ids)

    def set_public(self, label: str, value: bool) -> SavedMenu:
        with self._lock:
            menus = self._read()
            for menu in menus:
                if menu.label == label:
                    menu.is_public = bool(value)
                    self._write(menus)
                    logger.info("Menu %r is now %s", label, "public" if menu.is_public else "private")
                    return menu
        raise NotFoundError(label)

