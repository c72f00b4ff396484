"""Web-facing observer for planner events.

EventLog subscribes to an EventBus for grocery and menu events and keeps a
lightweight in-memory ring buffer of recent events that the web layer can
poll to show alerts (failed list builds, unit mismatches, stale results)
without a full page reload.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * Thread-safety ensured with a simple Lock.
  * A max_events cap prevents unbounded memory growth.
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List

from .Event_Bus import (
    EventBus, PLAN_BUCKETS_CHANGED, GROCERY_GENERATED, GROCERY_FAILED,
    GROCERY_STALE_DISCARDED, GROCERY_UNIT_MISMATCH, MENU_SAVED, MENU_VISIBILITY_CHANGED,
)

logger = logging.getLogger(__name__)

OBSERVED_EVENTS = (
    PLAN_BUCKETS_CHANGED, GROCERY_GENERATED, GROCERY_FAILED, GROCERY_STALE_DISCARDED,
    GROCERY_UNIT_MISMATCH, MENU_SAVED, MENU_VISIBILITY_CHANGED,
)
MAX_EVENTS = 300  # keep a few hundred recent events


class EventLog:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self.max_events = max_events
        self._buses: List[EventBus] = []

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        with self._lock:
            evt = {
                'id': self._next_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            }
            if isinstance(payload, dict):
                for k, v in payload.items():
                    evt.setdefault(k, v)
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def start(self, bus: EventBus) -> "EventLog":
        """Idempotent start: subscribe to a bus once."""
        if bus in self._buses:
            return self
        for name in OBSERVED_EVENTS:
            bus.subscribe(name, self._record)
        self._buses.append(bus)
        logger.debug("Event log attached to bus %r", bus)
        return self

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        If since is None, returns the last N (up to max_events) events.
        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['EventLog', 'OBSERVED_EVENTS']
