from typing import Final

SLOT_NAMES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
SLOT_ALL: Final[str] = "all"

REGION_TAGS: Final[tuple[str, ...]] = ("Northern", "Central", "Southern")

DEFAULT_KCAL_TARGET: Final[int] = 2000
DEFAULT_RECIPE_KCAL: Final[int] = 300
DEFAULT_COOK_TIME: Final[int] = 30

# Menu composition blocks: key -> accepted tags (OR)
MAIN_TAGS: Final[list[str]] = ["RiceSide", "Grilled", "Stew"]
SOUP_TAGS: Final[list[str]] = ["Soup"]
VEG_TAGS: Final[list[str]] = ["Veggie", "StirFry"]
STARTER_TAGS: Final[list[str]] = ["Salad", "Pickle"]
DESSERT_TAGS: Final[list[str]] = ["Dessert", "Drinks"]

VEGETARIAN_TAGS: Final[list[str]] = ["Vegan", "Veggie"]
EAT_CLEAN_TAGS: Final[list[str]] = ["Healthy", "Steamed", "Grilled", "Veggie"]
LIGHT_TAGS: Final[list[str]] = ["Veggie", "Soup", "Salad"]
SIDE_DISH_TAGS: Final[list[str]] = ["Dessert", "Drinks", "Salad", "Pickle"]

CANDIDATE_SCAN_SIZE: Final[int] = 80
CANDIDATE_POOL_LIMIT: Final[int] = 30
DIET_MODE_MAX_KCAL: Final[int] = 600
BREAKFAST_MAX_DISHES: Final[int] = 3
SUGGEST_MEAL_MAX_DISHES: Final[int] = 5
SUGGEST_MEAL_KCAL_SLACK: Final[int] = 300

# Market search keyword for ingredient names that search badly as-is
KEYWORD_MAPPING: Final[dict[str, str]] = {
    "gạo tẻ": "gạo",
    "thịt heo nạc": "thịt heo",
    "thịt heo": "thịt heo",
    "cá hồi": "cá hồi",
}

AI_PRICE_PROMPT: Final[str] = (
    """
    You are a food market analyst in Vietnam. Using average retail prices at common
    markets and supermarkets (Co.opmart, Winmart, Bach Hoa Xanh) for today ({today}),
    estimate the current price of each ingredient below.

    Rules:
    - Price per the given default unit (prefer gram/ml, otherwise the common selling unit).
    - Reply with a JSON object whose key "prices" is an array, no Markdown, no prose.
    - Each element: {{"name": str, "unit": str, "pricePerUnit": number, "currency": "VND", "source": str}}

    Ingredients:
    {ingredients}
    """
)
