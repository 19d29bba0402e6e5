"""Recipe catalog backed by a JSON file (read-mostly)."""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from dailycook.domain.Recipe import Recipe
from dailycook.infra.json_store import JsonStore
from dailycook.infra.paths import RECIPES_FILE

logger = logging.getLogger(__name__)


def _popularity_key(recipe: Recipe):
    created = recipe.created_at.replace(tzinfo=None) if recipe.created_at else datetime.min
    return recipe.likes, created


class RecipeRepository:
    def __init__(self, path=RECIPES_FILE):
        self._store = JsonStore(path)

    def _all(self) -> List[Recipe]:
        return [Recipe.from_dict(entry) for entry in self._store.read()]

    def find_recipes(self, tags_any: Optional[Iterable[str]] = None, region: Optional[str] = None,
                     ids: Optional[Iterable[str]] = None, by_popularity: bool = False,
                     limit: Optional[int] = None) -> List[Recipe]:
        """Filter the catalog.

        tags_any: keep recipes carrying at least one of these tags.
        region: exact region equality.
        ids: keep only these recipe ids.
        by_popularity: order by likes desc, then created_at desc.
        """
        recipes = self._all()
        if tags_any is not None:
            wanted = set(tags_any)
            recipes = [r for r in recipes if wanted.intersection(r.tags)]
        if region:
            recipes = [r for r in recipes if r.region == region]
        if ids is not None:
            id_set = set(ids)
            recipes = [r for r in recipes if r.id in id_set]
        if by_popularity:
            recipes.sort(key=_popularity_key, reverse=True)
        if limit is not None:
            recipes = recipes[:limit]
        return recipes

    def find_recipe_by_id(self, recipe_id: str) -> Optional[Recipe]:
        return next((r for r in self._all() if r.id == recipe_id), None)

    def find_recipes_by_ids(self, ids: Iterable[str]) -> List[Recipe]:
        return self.find_recipes(ids=ids)

    def count_recipes_by_ids(self, ids: Iterable[str]) -> int:
        """Number of distinct ids that exist in the catalog."""
        id_set = set(ids)
        return sum(1 for r in self._all() if r.id in id_set)

    def add_recipes(self, recipes: Iterable[Recipe]):
        with self._store.transaction() as data:
            for recipe in recipes:
                data.append(recipe.to_dict())
        logger.debug("Recipe catalog now has %d entries", len(data))
