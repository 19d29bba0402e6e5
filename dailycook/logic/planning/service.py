"""Meal plan operations: range reads, upserts, slot patches, week copy and daily nutrition.

Recipe ids are checked against the catalog whenever slots are written, never
when they are read back.
"""
import logging
from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from dailycook.domain.MealPlan import MealPlan, Slots
from dailycook.domain.errors import NotFoundError, ValidationError
from dailycook.logic.reporting.nutrition import compute_daily_nutrition
from dailycook.utilities.constants import SLOT_NAMES
from dailycook.utilities.dates import as_date, now, week_window

logger = logging.getLogger(__name__)

_UNSET = object()


class MealPlanService:
    def __init__(self, meal_plans, recipes):
        self.meal_plans = meal_plans
        self.recipes = recipes

    def _check_recipe_ids(self, recipe_ids: Iterable[str]):
        wanted = set(recipe_ids)
        if wanted and self.recipes.count_recipes_by_ids(wanted) != len(wanted):
            raise ValidationError("Unknown recipe id in slots")

    @staticmethod
    def _check_slot(slot: str):
        if slot not in SLOT_NAMES:
            raise ValidationError(f"Invalid slot: {slot!r}")

    def get_range(self, user_id: str, start=None, end=None) -> List[MealPlan]:
        """Plans between start and end inclusive; defaults to the current Monday-start week."""
        monday, sunday = week_window(now().date())
        start_day = as_date(start) if start else monday
        end_day = as_date(end) if end else sunday
        return self.meal_plans.find_meal_plans_in_range(user_id, start_day, end_day)

    def upsert(self, user_id: str, day, slots: Optional[Dict[str, List[str]]] = None,
               note=_UNSET) -> MealPlan:
        """Create or fully replace the slots of a day's plan."""
        target = as_date(day)
        full = Slots.from_dict(slots or {})
        self._check_recipe_ids(full.all_ids())
        kwargs = {} if note is _UNSET or note is None else {"note": note}
        return self.meal_plans.upsert_meal_plan_slots(user_id, target, full.to_dict(), **kwargs)

    def find_one(self, user_id: str, plan_id: str) -> MealPlan:
        plan = self.meal_plans.find_by_id(user_id, plan_id)
        if plan is None:
            raise NotFoundError("Meal plan not found")
        return plan

    def update(self, user_id: str, plan_id: str, slots: Optional[Dict[str, List[str]]] = None,
               note: Optional[str] = None) -> MealPlan:
        self.find_one(user_id, plan_id)
        full = None
        if slots is not None:
            full = Slots.from_dict(slots)
            self._check_recipe_ids(full.all_ids())
        kwargs = {} if note is None else {"note": note}
        return self.meal_plans.update_meal_plan(user_id, plan_id, full.to_dict() if full else None, **kwargs)

    def remove(self, user_id: str, plan_id: str):
        self.find_one(user_id, plan_id)
        self.meal_plans.delete_meal_plan(user_id, plan_id)
        return {"deleted": True}

    def patch_slot(self, user_id: str, plan_id: str, slot: str, set_ids: Optional[List[str]] = None,
                   add: Optional[str] = None, remove: Optional[str] = None) -> MealPlan:
        """Change one slot; the other two are written back unchanged.

        set replaces the list, add appends an id once, remove drops it. They
        apply in that order when combined.
        """
        self._check_slot(slot)
        plan = self.find_one(user_id, plan_id)
        current = list(plan.slots.get(slot))

        if set_ids is not None:
            self._check_recipe_ids(set_ids)
            current = list(set_ids)
        if add:
            if self.recipes.find_recipe_by_id(add) is None:
                raise ValidationError(f"Unknown recipe id: {add}")
            current = list(dict.fromkeys(current + [add]))
        if remove:
            current = [rid for rid in dict.fromkeys(current) if rid != remove]

        return self.meal_plans.update_meal_plan(user_id, plan_id, {slot: current})

    def copy_week(self, user_id: str, from_day, to_day) -> Dict[str, int]:
        """Overwrite the destination week with the source week's plans, keeping weekday offsets."""
        src_start, src_end = week_window(as_date(from_day))
        dst_start, dst_end = week_window(as_date(to_day))

        source = self.meal_plans.find_meal_plans_in_range(user_id, src_start, src_end)
        if not source:
            logger.info("Week of %s has no plans for user %s, nothing copied", src_start, user_id)
            return {"copied": 0}
        self._check_recipe_ids(rid for p in source for rid in p.slots.all_ids())

        removed = self.meal_plans.delete_meal_plans_in_range(user_id, dst_start, dst_end)
        copies = [
            MealPlan("", user_id, dst_start + timedelta(days=(p.date - src_start).days), p.slots.copy(), p.note)
            for p in source
        ]
        copied = self.meal_plans.create_meal_plans(copies)
        logger.info("Copied %d plan(s) from week %s to %s for user %s (%d replaced)",
                    copied, src_start, dst_start, user_id, removed)
        return {"copied": copied}

    def daily_nutrition(self, user_id: str, day=None):
        target = as_date(day) if day else now().date()
        plan = self.meal_plans.find_meal_plan(user_id, target)
        recipes = self.recipes.find_recipes_by_ids(plan.slots.all_ids()) if plan else []
        return compute_daily_nutrition(target, plan, recipes)
