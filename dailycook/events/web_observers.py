"""Recent price and meal plan events for polling web clients.

GET /api/events reads from the module-level feed below; ``start()`` hooks it
to the GLOBAL_EVENT_BUS for price.updated, price.missed,
price.refresh_completed and mealplan.menu_persisted.

Every stored event gets an increasing integer id, so a client passes the
``next_cursor`` it last saw as ``since`` and only receives newer events.
The buffer is per-process and bounded by MAX_EVENTS.
"""
from __future__ import annotations
import logging
from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional

from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, MENU_PERSISTED, PRICE_MISSED, PRICE_REFRESH_COMPLETED, PRICE_UPDATED
)

logger = logging.getLogger(__name__)

MAX_EVENTS = 300
WATCHED_EVENTS = (PRICE_UPDATED, PRICE_MISSED, PRICE_REFRESH_COMPLETED, MENU_PERSISTED)

# Payload keys worth showing to a client; anything else stays server-side
_COPIED_FIELDS = (
    'ingredient_id', 'name', 'price_per_unit', 'unit', 'currency', 'source', 'stamped',
    'updated', 'unchecked_but_stamped', 'failed', 'user_id', 'date', 'slot', 'recipe_ids',
)


class EventFeed:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: deque = deque(maxlen=max_events)
        self._last_id = 0

    def record(self, event_name: str, payload: Any):
        evt = {
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            evt.update({k: payload[k] for k in _COPIED_FIELDS if k in payload})
        with self._lock:
            self._last_id += 1
            evt['id'] = self._last_id
            self._events.append(evt)

    def since(self, cursor: Optional[int] = None) -> Dict[str, Any]:
        """Events newer than 'cursor' (exclusive), or everything buffered."""
        with self._lock:
            data = [e for e in self._events if cursor is None or e['id'] > cursor]
            next_cursor = self._last_id or (cursor or 0)
        return {'events': data, 'next_cursor': next_cursor}

    def attach(self, bus: EventBus):
        for name in WATCHED_EVENTS:
            bus.subscribe(name, self.record)


_feed = EventFeed()
_started = False


def start():
    """Subscribe the web feed to the global bus once per process."""
    global _started
    if _started:
        return
    _feed.attach(GLOBAL_EVENT_BUS)
    _started = True
    logger.debug("Web observers subscribed")


def get_events(since: int | None = None) -> Dict[str, Any]:
    return _feed.since(since)


__all__ = ['EventFeed', 'start', 'get_events', 'MAX_EVENTS']
