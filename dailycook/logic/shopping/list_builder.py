"""Shopping list builder.

Merges the ingredient amounts of a set of recipes into one line per
ingredient and attaches the cached market price.
Provides ShoppingListBuilder.aggregate(recipe_ids), from_range(user, start, end)
and build_from_recipes(user, recipe_ids, title, persist).
"""
import logging
from typing import Dict, Iterable, List, Optional

from dailycook.domain.ShoppingList import ShoppingList, ShoppingListItem
from dailycook.logic.pricing.throttle import PriceThrottle
from dailycook.utilities.config import DEFAULT_CURRENCY
from dailycook.utilities.dates import as_date

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Shopping list"


class ShoppingListBuilder:
    def __init__(self, recipes, ingredients, meal_plans=None, throttle: Optional[PriceThrottle] = None,
                 shopping_lists=None):
        self.recipes = recipes
        self.ingredients = ingredients
        self.meal_plans = meal_plans
        self.throttle = throttle
        self.shopping_lists = shopping_lists

    def aggregate(self, recipe_ids: Iterable[str]) -> List[ShoppingListItem]:
        """One line per ingredient id, quantities summed across recipes.

        Recipe ids are taken as a set: a recipe planned twice counts once.
        """
        recipes = self.recipes.find_recipes_by_ids(list(dict.fromkeys(recipe_ids)))
        wanted = {item.ingredient_id for r in recipes for item in r.items}
        by_id = {i.id: i for i in self.ingredients.get_ingredients_by_ids(wanted)}

        lines: Dict[str, ShoppingListItem] = {}
        for recipe in recipes:
            for item in recipe.items:
                ingredient = by_id.get(item.ingredient_id)
                if ingredient is None:
                    logger.warning("Recipe %s uses unknown ingredient %s", recipe.id, item.ingredient_id)
                    continue
                line = lines.get(ingredient.id)
                if line is None:
                    unit = item.unit_override or ingredient.unit
                    lines[ingredient.id] = ShoppingListItem(ingredient.id, ingredient.name, unit, item.amount)
                else:
                    line.add_quantity(item.amount)

        items = list(lines.values())
        self._refresh_prices([i.ingredient_id for i in items])
        self._attach_prices(items)
        return items

    def _refresh_prices(self, ingredient_ids: List[str]):
        if self.throttle is None or not ingredient_ids:
            return
        try:
            self.throttle.ensure_fresh_prices(ingredient_ids)
        except Exception:
            # Pricing is best effort; the list is returned with cached prices
            logger.exception("Could not refresh ingredient prices")

    def _attach_prices(self, items: List[ShoppingListItem]):
        by_id = {i.id: i for i in self.ingredients.get_ingredients_by_ids(i.ingredient_id for i in items)}
        for item in items:
            ingredient = by_id.get(item.ingredient_id)
            if ingredient is None or not ingredient.has_price():
                continue
            item.attach_price(ingredient.price_per_unit, ingredient.price_currency or DEFAULT_CURRENCY,
                              ingredient.price_updated_at)

    def recipe_ids_in_range(self, user_id: str, start, end) -> List[str]:
        plans = self.meal_plans.find_meal_plans_in_range(user_id, as_date(start), as_date(end))
        return list(dict.fromkeys(rid for p in plans for rid in p.slots.all_ids()))

    def from_range(self, user_id: str, start, end) -> ShoppingList:
        """Shopping list for every recipe planned between start and end (inclusive)."""
        items = self.aggregate(self.recipe_ids_in_range(user_id, start, end))
        return ShoppingList(DEFAULT_TITLE, items, user_id=user_id)

    def build_from_recipes(self, user_id: str, recipe_ids: Iterable[str], title: str = DEFAULT_TITLE,
                           persist: bool = True) -> ShoppingList:
        shopping_list = ShoppingList(title or DEFAULT_TITLE, self.aggregate(recipe_ids), user_id=user_id)
        if persist and self.shopping_lists is not None:
            self.shopping_lists.create(shopping_list)
            logger.info("Saved shopping list %s (%d items) for user %s", shopping_list.id,
                        len(shopping_list.items), user_id)
        return shopping_list


__all__ = ['ShoppingListBuilder', 'DEFAULT_TITLE']
