"""Simple Event Bus / Observer implementation for planner notifications.

Event names used so far:
  plan.buckets_changed    -> payload {"bucket": str | None, "action": str, "generation": int}
  grocery.generated       -> payload {"generation": int, "count": int, "recipes": int}
  grocery.failed          -> payload {"recipe_ids": [str], "message": str}
  grocery.stale_discarded -> payload {"generation": int, "current": int}
  grocery.unit_mismatch   -> payload {"ingredient_id": str, "name": str, "unit": str, "other_units": [str]}
  menu.saved              -> payload {"label": str, "slug": str}
  menu.visibility_changed -> payload {"label": str, "is_public": bool}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLAN_BUCKETS_CHANGED = "plan.buckets_changed"
GROCERY_GENERATED = "grocery.generated"
GROCERY_FAILED = "grocery.failed"
GROCERY_STALE_DISCARDED = "grocery.stale_discarded"
GROCERY_UNIT_MISMATCH = "grocery.unit_mismatch"
MENU_SAVED = "menu.saved"
MENU_VISIBILITY_CHANGED = "menu.visibility_changed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any = None):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:  # a failing subscriber must not break the publisher
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = [
	'EventBus',
	'PLAN_BUCKETS_CHANGED', 'GROCERY_GENERATED', 'GROCERY_FAILED',
	'GROCERY_STALE_DISCARDED', 'GROCERY_UNIT_MISMATCH',
	'MENU_SAVED', 'MENU_VISIBILITY_CHANGED',
]
