"""Simple Event Bus / Observer implementation for price cache and meal plan events.

Event names used so far:
  price.updated -> payload {"ingredient_id", "name", "price_per_unit", "unit", "currency", "source"}
  price.missed  -> payload {"ingredient_id", "name", "stamped": bool}
  price.refresh_completed -> payload {"updated", "unchecked_but_stamped", "failed"}
  mealplan.menu_persisted -> payload {"user_id", "date", "slot", "recipe_ids"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PRICE_UPDATED = "price.updated"
PRICE_MISSED = "price.missed"
PRICE_REFRESH_COMPLETED = "price.refresh_completed"
MENU_PERSISTED = "mealplan.menu_persisted"


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

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %s", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'PRICE_UPDATED', 'PRICE_MISSED', 'PRICE_REFRESH_COMPLETED', 'MENU_PERSISTED'
]
