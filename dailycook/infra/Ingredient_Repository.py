"""Ingredient price cache backed by a JSON file.

Only the price refresher, the on-demand throttle and explicit admin fetches
write here. Writes are last-writer-wins; stamps never move backwards.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from dailycook.domain.Ingredient import Ingredient
from dailycook.infra.json_store import JsonStore
from dailycook.infra.paths import INGREDIENTS_FILE
from dailycook.utilities.dates import local_aware

logger = logging.getLogger(__name__)


def _later(current: Optional[str], candidate: datetime) -> str:
    if current:
        try:
            if local_aware(datetime.fromisoformat(current)) > local_aware(candidate):
                return current
        except ValueError:
            pass
    return candidate.isoformat()


class IngredientRepository:
    def __init__(self, path=INGREDIENTS_FILE):
        self._store = JsonStore(path)

    def get_all_ingredients(self) -> List[Ingredient]:
        return [Ingredient.from_dict(entry) for entry in self._store.read()]

    def get_ingredients_by_ids(self, ids: Iterable[str]) -> List[Ingredient]:
        id_set = set(ids)
        return [i for i in self.get_all_ingredients() if i.id in id_set]

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        return next(iter(self.get_ingredients_by_ids([ingredient_id])), None)

    def update_ingredient_price(self, ingredient_id: str, price_per_unit: Optional[float],
                                currency: Optional[str], updated_at: datetime,
                                stamp_price: bool = True) -> bool:
        """Write a lookup outcome for one ingredient.

        price_per_unit None keeps the existing price. stamp_price False only
        records the lookup in last_checked_at.
        """
        with self._store.transaction() as data:
            for entry in data:
                if str(entry.get("id")) != ingredient_id:
                    continue
                if price_per_unit is not None:
                    entry["price_per_unit"] = price_per_unit
                    entry["price_currency"] = currency
                if stamp_price:
                    entry["price_updated_at"] = _later(entry.get("price_updated_at"), updated_at)
                entry["last_checked_at"] = _later(entry.get("last_checked_at"), updated_at)
                return True
        logger.warning("Ingredient %s not found while writing price", ingredient_id)
        return False

    def add_ingredients(self, ingredients: Iterable[Ingredient]):
        with self._store.transaction() as data:
            for ingredient in ingredients:
                data.append(ingredient.to_dict())
