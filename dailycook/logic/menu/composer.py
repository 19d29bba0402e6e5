"""Menu composition: pick a balanced set of dishes for one day and optionally save it.

A menu is built from blocks (main, soup, vegetable, optional starter and
dessert). Each block draws from its own candidate pool; a recipe id is never
chosen twice within one menu.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from dailycook.domain.Recipe import Recipe
from dailycook.domain.errors import ValidationError
from dailycook.events.Event_Bus import GLOBAL_EVENT_BUS, MENU_PERSISTED, EventBus
from dailycook.logic.menu.candidates import pick_candidates
from dailycook.utilities.constants import (
    BREAKFAST_MAX_DISHES,
    CANDIDATE_POOL_LIMIT,
    DEFAULT_KCAL_TARGET,
    DESSERT_TAGS,
    DIET_MODE_MAX_KCAL,
    EAT_CLEAN_TAGS,
    LIGHT_TAGS,
    MAIN_TAGS,
    SIDE_DISH_TAGS,
    SLOT_ALL,
    SLOT_NAMES,
    SOUP_TAGS,
    STARTER_TAGS,
    VEG_TAGS,
)
from dailycook.utilities.dates import as_date, now

logger = logging.getLogger(__name__)


@dataclass
class Block:
    key: str
    tags: List[str]
    count: int = 1


@dataclass
class MenuRequest:
    date: Optional[Union[str, date]] = None
    slot: str = SLOT_ALL
    region: Optional[str] = None
    vegetarian: bool = False
    exclude_ingredient_names: Union[str, Sequence[str], None] = None
    include_starter: bool = False
    include_dessert: bool = False
    max_cook_time: Optional[int] = None
    persist: bool = True
    recipe_count: Optional[int] = None
    diet_mode: bool = False
    eat_clean: bool = False

    def avoid_names(self) -> List[str]:
        raw = self.exclude_ingredient_names or []
        if isinstance(raw, str):
            raw = raw.split(",")
        return [n.strip().lower() for n in raw if n and n.strip()]


@dataclass
class MenuSuggestion:
    date: date
    slot: str
    dishes: List[Recipe] = field(default_factory=list)
    daily_kcal_target: int = DEFAULT_KCAL_TARGET

    @property
    def total_kcal(self) -> float:
        return _total_kcal(self.dishes)

    @property
    def within_limit(self) -> bool:
        return self.total_kcal <= self.daily_kcal_target

    def dish_ids(self) -> List[str]:
        return [d.id for d in self.dishes]

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "slot": self.slot,
            "dishes": [d.summary() for d in self.dishes],
            "total_kcal": self.total_kcal,
            "daily_kcal_target": self.daily_kcal_target,
            "within_limit": self.within_limit,
        }


def _kcal(recipe: Recipe) -> float:
    return recipe.kcal or 0


def _total_kcal(recipes: Sequence[Recipe]) -> float:
    return sum(_kcal(r) for r in recipes)


def fisher_yates(items: list, rng: random.Random) -> list:
    """Uniform in-place shuffle, swapping from the last index down to 1."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def build_blocks(recipe_count: Optional[int] = None, include_starter: bool = False,
                 include_dessert: bool = False) -> List[Block]:
    """Block layout for a menu, reshaped when a dish count is requested."""
    if recipe_count and recipe_count > 0:
        if recipe_count <= 3:
            counts = (1, 1 if recipe_count >= 2 else 0, 1 if recipe_count >= 3 else 0)
        elif recipe_count <= 5:
            counts = (1, 1, 1 if recipe_count >= 4 else 0)
        else:
            wide = min(2, math.ceil(recipe_count / 3))
            counts = (wide, 1, wide)
    else:
        counts = (1, 1, 1)

    blocks = [b for b in (
        Block("main", list(MAIN_TAGS), counts[0]),
        Block("soup", list(SOUP_TAGS), counts[1]),
        Block("veg", list(VEG_TAGS), counts[2]),
    ) if b.count > 0]

    def room_left():
        return not recipe_count or sum(b.count for b in blocks) < recipe_count

    if include_starter and room_left():
        blocks.append(Block("starter", list(STARTER_TAGS)))
    if include_dessert and room_left():
        blocks.append(Block("dessert", list(DESSERT_TAGS)))
    return blocks


def light_subset(dishes: Sequence[Recipe]) -> List[str]:
    """Breakfast share of a full-day menu: light dishes, else the first two."""
    light = [d.id for d in dishes if d.has_any_tag(LIGHT_TAGS)][:BREAKFAST_MAX_DISHES]
    return light or [d.id for d in dishes[:2]]


class MenuComposer:
    def __init__(self, recipes, meal_plans, preferences, rng: Optional[random.Random] = None,
                 event_bus: Optional[EventBus] = None):
        self.recipes = recipes
        self.meal_plans = meal_plans
        self.preferences = preferences
        self.rng = rng or random.Random()
        self.event_bus = event_bus or GLOBAL_EVENT_BUS

    def _kcal_target(self, user_id: str) -> int:
        pref = self.preferences.get_user_preference(user_id)
        return (pref.daily_kcal_target if pref else None) or DEFAULT_KCAL_TARGET

    # --- selection -------------------------------------------------------

    def _pick(self, pool: Sequence[Recipe], count: int, used: set) -> List[Recipe]:
        chosen = []
        for recipe in fisher_yates(list(pool), self.rng):
            if recipe.id in used:
                continue
            chosen.append(recipe)
            used.add(recipe.id)
            if len(chosen) >= count:
                break
        return chosen

    def _fit_kcal_budget(self, dishes: List[Recipe], blocks: List[Block],
                         pools: Dict[str, List[Recipe]], target: int) -> List[Recipe]:
        total = _total_kcal(dishes)
        if total <= target:
            return dishes

        # Swap heavy dishes for the lightest alternative of the same block
        result = list(dishes)
        for heavy in sorted(dishes, key=_kcal, reverse=True):
            if total <= target * 0.95:
                break
            block = next((b for b in blocks if heavy.has_any_tag(b.tags)), None)
            if block is None:
                continue
            in_menu = {d.id for d in result}
            alternatives = sorted(
                (alt for alt in pools[block.key] if alt.id not in in_menu and _kcal(alt) < _kcal(heavy)),
                key=_kcal,
            )
            if not alternatives:
                continue
            index = next((i for i, d in enumerate(result) if d.id == heavy.id), -1)
            if index >= 0:
                result[index] = alternatives[0]
                total -= _kcal(heavy) - _kcal(alternatives[0])

        # Still over: drop side dishes, heaviest first
        if total > target:
            remaining = total
            drop = set()
            for dish in sorted(result, key=_kcal, reverse=True):
                if remaining <= target * 0.98:
                    break
                if dish.has_any_tag(SIDE_DISH_TAGS) or not drop:
                    drop.add(dish.id)
                    remaining -= _kcal(dish)
            result = [d for d in result if d.id not in drop]
        return result

    def _fit_count(self, dishes: List[Recipe], blocks: List[Block], pools: Dict[str, List[Recipe]],
                   recipe_count: int, request: MenuRequest) -> List[Recipe]:
        if len(dishes) >= recipe_count:
            return dishes[:recipe_count]
        used = {d.id for d in dishes}
        extra = []
        for block in blocks:
            if len(dishes) + len(extra) >= recipe_count:
                break
            available = [r for r in pools[block.key] if r.id not in used]
            available = available[:recipe_count - len(dishes) - len(extra)]
            if request.diet_mode:
                available = sorted((r for r in available if _kcal(r) < DIET_MODE_MAX_KCAL), key=_kcal)
            if request.eat_clean:
                available = [r for r in available if r.has_any_tag(EAT_CLEAN_TAGS)]
            used.update(r.id for r in available)
            extra.extend(available)
        return (dishes + extra)[:recipe_count]

    # --- public operations -----------------------------------------------

    def suggest_menu(self, user_id: str, request: MenuRequest) -> MenuSuggestion:
        if request.slot != SLOT_ALL and request.slot not in SLOT_NAMES:
            raise ValidationError(f"Invalid slot: {request.slot!r}")
        day = as_date(request.date) if request.date else now().date()
        target = self._kcal_target(user_id)
        avoid = request.avoid_names()

        blocks = build_blocks(request.recipe_count, request.include_starter, request.include_dessert)
        pools = {
            b.key: pick_candidates(
                self.recipes, b.tags, avoid,
                vegetarian=request.vegetarian, region=request.region, limit=CANDIDATE_POOL_LIMIT,
                diet_mode=request.diet_mode, eat_clean=request.eat_clean,
            )
            for b in blocks
        }

        used = set()
        dishes: List[Recipe] = []
        for block in blocks:
            dishes.extend(self._pick(pools[block.key], block.count, used))

        if request.max_cook_time:
            total_time = sum(d.estimated_cook_time() for d in dishes)
            if total_time > request.max_cook_time and request.include_dessert and dishes:
                dropped = dishes.pop()
                logger.info("Menu takes %d min (max %d), dropped %s", total_time, request.max_cook_time,
                            dropped.title)

        dishes = self._fit_kcal_budget(dishes, blocks, pools, target)
        if request.recipe_count and request.recipe_count > 0:
            dishes = self._fit_count(dishes, blocks, pools, request.recipe_count, request)

        suggestion = MenuSuggestion(day, request.slot, dishes, target)
        if request.persist:
            self._persist(user_id, suggestion)
        return suggestion

    def _persist(self, user_id: str, suggestion: MenuSuggestion):
        ids = suggestion.dish_ids()
        if suggestion.slot == SLOT_ALL:
            slots = {"breakfast": light_subset(suggestion.dishes), "lunch": ids, "dinner": list(ids)}
        else:
            slots = {suggestion.slot: ids}
        self.meal_plans.upsert_meal_plan_slots(user_id, suggestion.date, slots)
        logger.info("Saved %d dish(es) to %s on %s for user %s", len(ids), suggestion.slot,
                    suggestion.date, user_id)
        self.event_bus.publish(MENU_PERSISTED, {
            "user_id": user_id, "date": suggestion.date.isoformat(), "slot": suggestion.slot, "recipe_ids": ids,
        })

    def today_suggest(self, user_id: str, slot: Optional[str] = None):
        """Today's saved plan if it has dishes, otherwise an unsaved suggestion from preferences."""
        slot = slot or SLOT_ALL
        today = now().date()
        plan = self.meal_plans.find_meal_plan(user_id, today)
        if plan and plan.slots.all_ids():
            by_id = {r.id: r for r in self.recipes.find_recipes_by_ids(plan.slots.all_ids())}
            meals = {
                name: [by_id[i].summary() for i in plan.slots.get(name) if i in by_id]
                for name in SLOT_NAMES
            }
            total = sum(m["kcal"] or 0 for name in SLOT_NAMES for m in meals[name])
            return {"date": today.isoformat(), "has_plan": True, **meals, "total_kcal": total}

        pref = self.preferences.get_user_preference(user_id)
        diet = (pref.diet_type if pref else None) or "normal"
        request = MenuRequest(
            date=today,
            slot=slot,
            region=pref.preferred_region() if pref else None,
            vegetarian=diet in ("vegan", "vegetarian"),
            exclude_ingredient_names=pref.disliked_ingredients if pref else None,
            persist=False,
            diet_mode=diet == "low_carb" or bool(pref and pref.goal == "lose_weight"),
            eat_clean=diet == "eat_clean",
        )
        suggestion = self.suggest_menu(user_id, request)
        meals = distribute(suggestion.dishes, slot)
        if slot == SLOT_ALL:
            total = suggestion.total_kcal
        else:
            total = _total_kcal(meals[slot])
        return {
            "date": today.isoformat(),
            "has_plan": False,
            **{name: [d.summary() for d in meals[name]] for name in SLOT_NAMES},
            "total_kcal": total,
        }


def distribute(dishes: Sequence[Recipe], slot: str) -> Dict[str, List[Recipe]]:
    """Split an unsaved menu into breakfast, lunch and dinner for display."""
    meals: Dict[str, List[Recipe]] = {name: [] for name in SLOT_NAMES}
    if slot == "breakfast":
        meals["breakfast"] = list(dishes[:2])
        return meals
    if slot in ("lunch", "dinner"):
        meals[slot] = list(dishes[:3])
        return meals

    light_tags = list(LIGHT_TAGS) + ["Breakfast"]
    light = [d for d in dishes if d.has_any_tag(light_tags)]
    other = [d for d in dishes if not d.has_any_tag(light_tags)]

    meals["breakfast"] = light[:2] if light else list(dishes[:1])
    lunch_count = max(2, math.ceil(len(other) / 2))
    lunch = light[2:] + other[:lunch_count]
    dinner = other[lunch_count:]
    if not dinner and len(lunch) > 2:
        lunch, dinner = lunch[:-2], lunch[-2:]
    meals["lunch"] = lunch
    meals["dinner"] = dinner
    return meals
