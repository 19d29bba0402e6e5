import logging
from datetime import date
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from dailycook.domain.MealPlan import MealPlan, Slots
from dailycook.domain.errors import ValidationError
from dailycook.infra.json_store import JsonStore
from dailycook.infra.paths import MEALPLANS_FILE
from dailycook.utilities.constants import SLOT_NAMES

logger = logging.getLogger(__name__)

_UNSET = object()


class MealPlanRepository:
    """Meal plans keyed by (user, date), one record per pair.

    Every write re-reads the stored slot map under the store lock and writes the
    complete map back, so patching one slot never drops its siblings.
    """

    def __init__(self, path=MEALPLANS_FILE):
        self._store = JsonStore(path)

    @staticmethod
    def _matches(entry: dict, user_id: str, day: date) -> bool:
        return str(entry.get("user_id")) == user_id and entry.get("date") == day.isoformat()

    def find_meal_plan(self, user_id: str, day: date) -> Optional[MealPlan]:
        for entry in self._store.read():
            if self._matches(entry, user_id, day):
                return MealPlan.from_dict(entry)
        return None

    def find_by_id(self, user_id: str, plan_id: str) -> Optional[MealPlan]:
        for entry in self._store.read():
            if entry.get("id") == plan_id and str(entry.get("user_id")) == user_id:
                return MealPlan.from_dict(entry)
        return None

    def find_meal_plans_in_range(self, user_id: str, start: date, end: date) -> List[MealPlan]:
        plans = [MealPlan.from_dict(e) for e in self._store.read() if str(e.get("user_id")) == user_id]
        plans = [p for p in plans if start <= p.date <= end]
        plans.sort(key=lambda p: p.date)
        return plans

    def upsert_meal_plan_slots(self, user_id: str, day: date, slots: Dict[str, List[str]],
                               note=_UNSET) -> MealPlan:
        """Create the day's plan or replace only the slots named in 'slots'.

        Slots absent from the mapping keep their stored value.
        """
        unknown = set(slots) - set(SLOT_NAMES)
        if unknown:
            raise ValidationError(f"Unknown slot(s): {sorted(unknown)}")
        with self._store.transaction() as data:
            for entry in data:
                if self._matches(entry, user_id, day):
                    current = Slots.from_dict(entry.get("slots"))
                    for slot, ids in slots.items():
                        current.set(slot, ids)
                    entry["slots"] = current.to_dict()
                    if note is not _UNSET:
                        entry["note"] = note
                    return MealPlan.from_dict(entry)
            plan = MealPlan(str(uuid4()), user_id, day, Slots(**slots),
                            None if note is _UNSET else note)
            data.append(plan.to_dict())
            logger.debug("Created meal plan %s for user %s on %s", plan.id, user_id, day)
            return plan

    def update_meal_plan(self, user_id: str, plan_id: str, slots: Optional[Dict[str, List[str]]] = None,
                         note=_UNSET) -> Optional[MealPlan]:
        with self._store.transaction() as data:
            for entry in data:
                if entry.get("id") == plan_id and str(entry.get("user_id")) == user_id:
                    if slots is not None:
                        current = Slots.from_dict(entry.get("slots"))
                        for slot, ids in slots.items():
                            current.set(slot, ids)
                        entry["slots"] = current.to_dict()
                    if note is not _UNSET:
                        entry["note"] = note
                    return MealPlan.from_dict(entry)
        return None

    def delete_meal_plan(self, user_id: str, plan_id: str) -> bool:
        with self._store.transaction() as data:
            before = len(data)
            data[:] = [e for e in data if not (e.get("id") == plan_id and str(e.get("user_id")) == user_id)]
            return len(data) != before

    def delete_meal_plans_in_range(self, user_id: str, start: date, end: date) -> int:
        with self._store.transaction() as data:
            keep = []
            for entry in data:
                if str(entry.get("user_id")) == user_id and start.isoformat() <= entry.get("date", "") <= end.isoformat():
                    continue
                keep.append(entry)
            removed = len(data) - len(keep)
            data[:] = keep
        return removed

    def create_meal_plans(self, plans: Iterable[MealPlan]) -> int:
        created = 0
        with self._store.transaction() as data:
            for plan in plans:
                if not plan.id:
                    plan.id = str(uuid4())
                data.append(plan.to_dict())
                created += 1
        return created
