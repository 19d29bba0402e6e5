"""Shared service wiring for the HTTP layer.

Routes receive a Services bundle through FastAPI dependencies so tests can
swap in repositories on temporary files with app.dependency_overrides.
"""
import logging
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence

from fastapi import Header, HTTPException

from dailycook.domain.errors import NotFoundError, ValidationError
from dailycook.infra.Ingredient_Repository import IngredientRepository
from dailycook.infra.MealPlan_Repository import MealPlanRepository
from dailycook.infra.Preference_Repository import PreferenceRepository
from dailycook.infra.Recipe_Repository import RecipeRepository
from dailycook.infra.ShoppingList_Repository import ShoppingListRepository
from dailycook.infra.paths import DATA_DIR
from dailycook.logic.menu.composer import MenuComposer
from dailycook.logic.planning.service import MealPlanService
from dailycook.logic.pricing.lookup import PriceLookup
from dailycook.logic.pricing.refresher import PriceRefresher
from dailycook.logic.pricing.sources import PriceSource, default_sources
from dailycook.logic.pricing.throttle import PriceThrottle
from dailycook.logic.shopping.list_builder import ShoppingListBuilder

logger = logging.getLogger(__name__)

DEFAULT_USER = "default"


class Services:
    def __init__(self, data_dir=DATA_DIR, sources: Optional[Sequence[PriceSource]] = None,
                 rng=None, delay: Optional[float] = None):
        data_dir = Path(data_dir)
        self.recipes = RecipeRepository(data_dir / 'recipes.json')
        self.ingredients = IngredientRepository(data_dir / 'ingredients.json')
        self.meal_plans = MealPlanRepository(data_dir / 'mealplans.json')
        self.preferences = PreferenceRepository(data_dir / 'preferences.json')
        self.shopping_lists = ShoppingListRepository(data_dir / 'shopping_lists.json')

        self.lookup = PriceLookup(default_sources() if sources is None else sources)
        refresher_kwargs = {} if delay is None else {"delay": delay}
        self.refresher = PriceRefresher(self.ingredients, self.lookup, **refresher_kwargs)
        self.throttle = PriceThrottle(self.ingredients, self.lookup)

        self.composer = MenuComposer(self.recipes, self.meal_plans, self.preferences, rng=rng)
        self.planner = MealPlanService(self.meal_plans, self.recipes)
        self.shopping = ShoppingListBuilder(self.recipes, self.ingredients, self.meal_plans,
                                            self.throttle, self.shopping_lists)

    def close(self):
        self.lookup.close()


@lru_cache(maxsize=1)
def get_services() -> Services:
    logger.info("Using data directory %s", DATA_DIR)
    return Services()


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity; authentication happens in front of this service."""
    return (x_user_id or DEFAULT_USER).strip() or DEFAULT_USER


@contextmanager
def http_errors():
    """Turn domain errors raised inside a handler into HTTP responses."""
    try:
        yield
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
