import logging
import random
from typing import Optional

from dailycook.logic.menu.composer import fisher_yates
from dailycook.utilities.constants import (
    DEFAULT_KCAL_TARGET,
    DEFAULT_RECIPE_KCAL,
    SUGGEST_MEAL_KCAL_SLACK,
    SUGGEST_MEAL_MAX_DISHES,
)

logger = logging.getLogger(__name__)

NO_MATCH_MESSAGE = "No matching dishes found for your preferences"

_DIET_TAGS = {"vegan": "Vegan", "low_carb": "LowCarb"}


def suggest_meal(recipes, preferences, user_id: str, region: Optional[str] = None,
                 diet_type: Optional[str] = None, target_kcal: Optional[int] = None,
                 rng: Optional[random.Random] = None):
    """Pick up to five random recipes whose calories stay close to the day's target.

    Never raises when nothing matches; returns an empty list with a message.
    """
    pref = preferences.get_user_preference(user_id)
    kcal_target = target_kcal or (pref.daily_kcal_target if pref else None) or DEFAULT_KCAL_TARGET
    if region and region != "All":
        region_pref = region
    else:
        region_pref = pref.preferred_region() if pref else None
    diet = diet_type or (pref.diet_type if pref else None) or "normal"

    diet_tag = _DIET_TAGS.get(diet)
    candidates = recipes.find_recipes(
        tags_any=[diet_tag] if diet_tag else None,
        region=region_pref,
    )
    if not candidates:
        logger.info("No recipes for user %s (region=%s, diet=%s)", user_id, region_pref, diet)
        return {"message": NO_MATCH_MESSAGE, "recipes": []}

    selected = []
    total = 0
    for recipe in fisher_yates(list(candidates), rng or random.Random()):
        kcal = recipe.kcal or DEFAULT_RECIPE_KCAL
        if total + kcal <= kcal_target + SUGGEST_MEAL_KCAL_SLACK:
            selected.append(recipe)
            total += kcal
        if len(selected) >= SUGGEST_MEAL_MAX_DISHES:
            break

    return {
        "user_id": user_id,
        "region": region_pref,
        "diet_type": diet,
        "target_kcal": kcal_target,
        "total_kcal": total,
        "recipes": [r.summary() for r in selected],
    }
