"""Event helper utilities.

Thin publishing helpers so callers do not hand-build payloads.

Quick import:
    from mealprep.events.event_helpers import (
        publish_buckets_changed, publish_grocery_generated, publish_grocery_failed,
        publish_grocery_stale, publish_menu_saved, publish_menu_visibility
    )
"""
from __future__ import annotations
from typing import Optional

from mealprep.domain.GroceryList import GroceryList
from mealprep.domain.SavedMenu import SavedMenu
from mealprep.domain.errors import ResolutionError
from .Event_Bus import (
    EventBus,
    PLAN_BUCKETS_CHANGED, GROCERY_GENERATED, GROCERY_FAILED, GROCERY_STALE_DISCARDED,
    GROCERY_UNIT_MISMATCH, MENU_SAVED, MENU_VISIBILITY_CHANGED,
)

__all__ = [
    'publish_buckets_changed', 'publish_grocery_generated', 'publish_grocery_failed',
    'publish_grocery_stale', 'publish_menu_saved', 'publish_menu_visibility',
]


def publish_buckets_changed(bus: EventBus, bucket: Optional[str], action: str, generation: int):
    bus.publish(PLAN_BUCKETS_CHANGED, {
        'bucket': bucket,
        'action': action,
        'generation': generation,
    })


def publish_grocery_generated(bus: EventBus, grocery: GroceryList, generation: int):
    """Publish grocery.generated plus one grocery.unit_mismatch per flagged item."""
    bus.publish(GROCERY_GENERATED, {
        'generation': generation,
        'count': len(grocery),
        'recipes': len(grocery.recipe_ids),
    })
    for warning in grocery.warnings():
        item = grocery.get(warning.ingredient_id)
        bus.publish(GROCERY_UNIT_MISMATCH, {
            'ingredient_id': warning.ingredient_id,
            'name': item.name if item else '',
            'unit': warning.unit,
            'other_units': warning.other_units,
        })


def publish_grocery_failed(bus: EventBus, error: ResolutionError):
    bus.publish(GROCERY_FAILED, {
        'recipe_ids': list(error.recipe_ids),
        'message': str(error),
    })


def publish_grocery_stale(bus: EventBus, generation: int, current: int):
    bus.publish(GROCERY_STALE_DISCARDED, {'generation': generation, 'current': current})


def publish_menu_saved(bus: EventBus, menu: SavedMenu):
    bus.publish(MENU_SAVED, {'label': menu.label, 'slug': menu.slug})


def publish_menu_visibility(bus: EventBus, menu: SavedMenu):
    bus.publish(MENU_VISIBILITY_CHANGED, {'label': menu.label, 'is_public': menu.is_public})
