import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from mealprep.api.dependencies import PlannerServices, get_services
from mealprep.api.routes.plan import plan_payload
from mealprep.domain.SavedMenu import SavedMenu
from mealprep.events.event_helpers import publish_menu_saved, publish_menu_visibility
from mealprep.utilities.validators import PublishInput, SaveMenuInput

router = APIRouter(prefix="/api/menus", tags=["menus"])
logger = logging.getLogger(__name__)


def menu_payload(services: PlannerServices, menu: SavedMenu) -> dict:
    data = menu.to_dict()
    data["share_url"] = services.menus.share_url(menu)
    return data


@router.get("")
def list_menus(services: PlannerServices = Depends(get_services)):
    """Plan history, newest first."""
    return [menu_payload(services, m) for m in services.menus.list_menus()]


@router.post("")
def save_menu(payload: Optional[SaveMenuInput] = Body(None),
              services: PlannerServices = Depends(get_services)):
    """Save the current buckets under the given label (default: the current week label)."""
    plan = services.plan.snapshot()
    label = payload.label if payload and payload.label else plan.week_label
    menu = services.menus.save(label, list(plan.breakfast), list(plan.main))
    publish_menu_saved(services.event_bus, menu)
    return menu_payload(services, menu)


# Registered before /{label}/... so 'public' is never read as a label.
@router.get("/public/{slug}")
def public_menu(slug: str, services: PlannerServices = Depends(get_services)):
    """Read-only view of a published menu behind its share link."""
    menu = services.menus.get_public(slug)
    titles = services.recipes.titles()
    data = menu_payload(services, menu)
    data["titles"] = {rid: titles.get(rid, rid) for rid in menu.breakfast_ids + menu.main_ids}
    return data


@router.post("/{label}/load")
def load_menu(label: str, services: PlannerServices = Depends(get_services)):
    """Restore a saved menu into the buckets."""
    breakfast_ids, main_ids = services.menus.load(label)
    services.plan.load_menu(label, breakfast_ids, main_ids)
    return plan_payload(services)


@router.put("/{label}/public")
def set_public(label: str, payload: PublishInput, services: PlannerServices = Depends(get_services)):
    menu = services.menus.set_public(label, payload.is_public)
    publish_menu_visibility(services.event_bus, menu)
    return menu_payload(services, menu)
