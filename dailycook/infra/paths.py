from dailycook.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
RECIPES_FILE = DATA_DIR / 'recipes.json'
INGREDIENTS_FILE = DATA_DIR / 'ingredients.json'
MEALPLANS_FILE = DATA_DIR / 'mealplans.json'
PREFERENCES_FILE = DATA_DIR / 'preferences.json'
SHOPPING_LISTS_FILE = DATA_DIR / 'shopping_lists.json'

__all__ = ['DATA_DIR', 'RECIPES_FILE', 'INGREDIENTS_FILE', 'MEALPLANS_FILE', 'PREFERENCES_FILE',
           'SHOPPING_LISTS_FILE']
