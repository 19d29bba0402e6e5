"""Nutrition aggregation logic.

Daily totals for a user's meal plan, per slot and for the whole day.
"""
from typing import Dict, Any, List

from dailycook.utilities.constants import SLOT_NAMES

_ZERO_TOTALS = {'calories': 0, 'protein': 0, 'fat': 0, 'carbs': 0}


def _meal_entry(recipe) -> Dict[str, Any]:
    return {
        'id': recipe.id,
        'title': recipe.title,
        'image': recipe.image,
        'kcal': recipe.kcal or 0,
        'protein': recipe.protein or 0,
        'fat': recipe.fat or 0,
        'carbs': recipe.carbs or 0,
    }


def compute_daily_nutrition(day, plan, recipes: List) -> Dict[str, Any]:
    """Aggregate nutrition for one day's plan.

    Returns structure:
    {
      'date': 'yyyy-mm-dd',
      'has_plan': bool,
      'meals': { 'breakfast': [ { id, title, image, kcal, protein, fat, carbs }, ... ], ... },
      'totals': { 'calories', 'protein', 'fat', 'carbs' }
    }
    Recipe ids missing from the catalog are skipped.
    """
    meals = {slot: [] for slot in SLOT_NAMES}
    if plan is None:
        return {'date': day.isoformat(), 'has_plan': False, 'meals': meals, 'totals': dict(_ZERO_TOTALS)}

    recipe_index = {r.id: r for r in recipes}
    totals = dict(_ZERO_TOTALS)
    for slot in SLOT_NAMES:
        for rid in plan.slots.get(slot):
            recipe = recipe_index.get(rid)
            if recipe is None:
                continue
            entry = _meal_entry(recipe)
            meals[slot].append(entry)
            totals['calories'] += entry['kcal']
            totals['protein'] += entry['protein']
            totals['fat'] += entry['fat']
            totals['carbs'] += entry['carbs']

    return {'date': day.isoformat(), 'has_plan': True, 'meals': meals, 'totals': totals}


__all__ = ["compute_daily_nutrition"]
