"""On-demand price freshness for the ingredients a shopping list touches.

At most one external lookup per ingredient per local day: an ingredient counts
as fresh once it was priced or checked since local midnight.
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from dailycook.domain.Ingredient import Ingredient
from dailycook.infra.Ingredient_Repository import IngredientRepository
from dailycook.logic.pricing.lookup import FAILED, PriceLookup
from dailycook.utilities.dates import now, start_of_day

logger = logging.getLogger(__name__)


class PriceThrottle:
    def __init__(self, ingredients: IngredientRepository, lookup: PriceLookup, clock: Callable = now):
        self.ingredients = ingredients
        self.lookup = lookup
        self.clock = clock

    def pending(self, ingredients: Iterable[Ingredient], moment: Optional[datetime] = None) -> List[Ingredient]:
        midnight = start_of_day(moment or self.clock())
        stale = []
        for ingredient in ingredients:
            stamp = ingredient.freshness_stamp()
            if stamp is None or stamp < midnight:
                stale.append(ingredient)
        return stale

    def ensure_fresh_prices(self, ingredient_ids: Iterable[str]) -> List[str]:
        """Look up prices for stale ingredients among the given ids.

        Returns the ids that received a new price.
        """
        ids = list(dict.fromkeys(ingredient_ids))
        if not ids:
            return []
        if not self.lookup.has_sources():
            logger.info("No price source configured, skipping on-demand refresh")
            return []

        moment = self.clock()
        pending = self.pending(self.ingredients.get_ingredients_by_ids(ids), moment)
        if not pending:
            return []

        logger.info("Refreshing %d stale ingredient price(s) on demand", len(pending))
        self.lookup.prepare(pending)
        outcomes = [(ingredient, self.lookup.lookup(ingredient)) for ingredient in pending]

        if all(outcome.status == FAILED for _, outcome in outcomes):
            logger.warning("Every price source failed for %d ingredient(s); nothing written, will retry",
                           len(pending))
            return []

        updated = []
        for ingredient, outcome in outcomes:
            if outcome.found:
                self.ingredients.update_ingredient_price(
                    ingredient.id, outcome.price.price_per_unit, outcome.currency, moment)
                updated.append(ingredient.id)
            elif outcome.status == FAILED:
                logger.warning("Price lookup failed for %s, leaving it for a later retry", ingredient.name)
            else:
                # Checked today, keep the old price and its date
                self.ingredients.update_ingredient_price(ingredient.id, None, None, moment, stamp_price=False)
        return updated
