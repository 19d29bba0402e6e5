"""Daily price cache refresh.

Every ingredient is re-verified on each run, whether or not it already has a
price. An ingredient with no price found is still stamped so on-demand callers
do not look it up again the same day; its existing price is kept.
"""
import logging
import time
from dataclasses import dataclass, asdict
from typing import Callable, Iterable, List, Optional

from dailycook.domain.Ingredient import Ingredient
from dailycook.events.Event_Bus import (
    GLOBAL_EVENT_BUS, PRICE_MISSED, PRICE_REFRESH_COMPLETED, PRICE_UPDATED, EventBus
)
from dailycook.infra.Ingredient_Repository import IngredientRepository
from dailycook.logic.pricing.lookup import FAILED, PriceLookup
from dailycook.utilities.config import PRICE_LOOKUP_DELAY
from dailycook.utilities.dates import now

logger = logging.getLogger(__name__)


@dataclass
class RefreshSummary:
    updated: int = 0
    unchecked_but_stamped: int = 0
    failed: int = 0

    def to_dict(self):
        return asdict(self)


class PriceRefresher:
    def __init__(self, ingredients: IngredientRepository, lookup: PriceLookup,
                 delay: float = PRICE_LOOKUP_DELAY, clock: Callable = now,
                 sleep: Callable[[float], None] = time.sleep, event_bus: Optional[EventBus] = None):
        self.ingredients = ingredients
        self.lookup = lookup
        self.delay = delay
        self.clock = clock
        self.sleep = sleep
        self.event_bus = event_bus or GLOBAL_EVENT_BUS

    def refresh_all(self) -> RefreshSummary:
        """Update prices for ALL ingredients, including those priced already."""
        logger.info("Starting price update for all ingredients")
        ingredients = self.ingredients.get_all_ingredients()
        if not ingredients:
            logger.info("No ingredients found")
            return RefreshSummary()
        logger.info("Found %d ingredients to update", len(ingredients))
        return self._refresh(ingredients)

    def refresh_ingredients(self, ingredient_ids: Iterable[str]) -> RefreshSummary:
        """Explicit fetch for selected ingredients, same semantics as the daily run."""
        return self._refresh(self.ingredients.get_ingredients_by_ids(ingredient_ids))

    def _refresh(self, ingredients: List[Ingredient]) -> RefreshSummary:
        summary = RefreshSummary()
        self.lookup.prepare(ingredients)
        for index, ingredient in enumerate(ingredients):
            if index and self.delay > 0:
                self.sleep(self.delay)
            outcome = self.lookup.lookup(ingredient)
            stamp = self.clock()
            if outcome.found:
                self.ingredients.update_ingredient_price(
                    ingredient.id, outcome.price.price_per_unit, outcome.currency, stamp)
                summary.updated += 1
                logger.info("Updated price for %s: %s %s/%s", ingredient.name,
                            outcome.price.price_per_unit, outcome.currency, outcome.price.unit)
                self.event_bus.publish(PRICE_UPDATED, {
                    "ingredient_id": ingredient.id,
                    "name": ingredient.name,
                    "price_per_unit": outcome.price.price_per_unit,
                    "unit": outcome.price.unit,
                    "currency": outcome.currency,
                    "source": outcome.source,
                })
                continue

            # Miss or failure: stamp the check, keep whatever price is cached
            self.ingredients.update_ingredient_price(ingredient.id, None, None, stamp)
            summary.unchecked_but_stamped += 1
            if outcome.status == FAILED:
                summary.failed += 1
            logger.warning("No price found for %s, marked as checked (keeping existing price if any)",
                           ingredient.name)
            self.event_bus.publish(PRICE_MISSED, {
                "ingredient_id": ingredient.id, "name": ingredient.name, "stamped": True,
            })

        logger.info("Price update completed. Updated %d/%d ingredients, %d checked without a new price",
                    summary.updated, len(ingredients), summary.unchecked_but_stamped)
        self.event_bus.publish(PRICE_REFRESH_COMPLETED, summary.to_dict())
        return summary
