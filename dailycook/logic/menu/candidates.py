"""Candidate pools for menu composition.

A pool is the set of recipes a block (main, soup, ...) may pick from: recipes
carrying any accepted tag, most liked first, with disliked names removed.
"""
import logging
from typing import Iterable, List, Optional

from dailycook.domain.Recipe import Recipe
from dailycook.utilities.constants import (
    CANDIDATE_POOL_LIMIT,
    CANDIDATE_SCAN_SIZE,
    DIET_MODE_MAX_KCAL,
    EAT_CLEAN_TAGS,
    VEGETARIAN_TAGS,
)

logger = logging.getLogger(__name__)


def accepted_tags(must_tags: Iterable[str], vegetarian: bool = False, region: Optional[str] = None,
                  eat_clean: bool = False) -> List[str]:
    """Tag set a recipe must intersect. Every option widens it, none narrows it."""
    tags = list(must_tags)
    if vegetarian:
        tags += VEGETARIAN_TAGS
    if region:
        tags.append(region)
    if eat_clean:
        tags += EAT_CLEAN_TAGS
    return list(dict.fromkeys(tags))


def _diet_kcal(recipe: Recipe) -> float:
    return recipe.kcal if recipe.kcal else 9999


def pick_candidates(recipes_repo, must_tags: Iterable[str], avoid_names: Iterable[str],
                    vegetarian: bool = False, region: Optional[str] = None,
                    limit: int = CANDIDATE_POOL_LIMIT, diet_mode: bool = False,
                    eat_clean: bool = False) -> List[Recipe]:
    tags = accepted_tags(must_tags, vegetarian, region, eat_clean)
    rows = recipes_repo.find_recipes(tags_any=tags, by_popularity=True, limit=CANDIDATE_SCAN_SIZE)

    avoid = [n.strip().lower() for n in avoid_names if n and n.strip()]
    filtered = [r for r in rows if not any(n in r.title.lower() for n in avoid)]

    if diet_mode:
        # Lowest calories first, nothing at or above the diet ceiling
        filtered = sorted(filtered, key=_diet_kcal)
        filtered = [r for r in filtered if (r.kcal or 0) < DIET_MODE_MAX_KCAL]

    logger.debug("Candidate pool for %s: %d of %d scanned", tags, min(len(filtered), limit), len(rows))
    return filtered[:limit]
