"""MealPlan domain entity: one user's recipes for one calendar day, split by slot."""
from datetime import date
from typing import Dict, List, Optional

from dailycook.domain.errors import ValidationError
from dailycook.utilities.constants import SLOT_NAMES


class Slots:
    """The three named meal periods of a day, each an ordered list of recipe ids."""

    def __init__(self, breakfast: Optional[List[str]] = None, lunch: Optional[List[str]] = None,
                 dinner: Optional[List[str]] = None):
        self.breakfast = list(breakfast) if breakfast else []
        self.lunch = list(lunch) if lunch else []
        self.dinner = list(dinner) if dinner else []

    def get(self, slot: str) -> List[str]:
        if slot not in SLOT_NAMES:
            raise ValidationError(f"Invalid slot: {slot!r}")
        return getattr(self, slot)

    def set(self, slot: str, recipe_ids: List[str]):
        if slot not in SLOT_NAMES:
            raise ValidationError(f"Invalid slot: {slot!r}")
        setattr(self, slot, list(recipe_ids))

    def all_ids(self) -> List[str]:
        return [*self.breakfast, *self.lunch, *self.dinner]

    def copy(self) -> "Slots":
        return Slots(self.breakfast, self.lunch, self.dinner)

    def __eq__(self, other):
        return isinstance(other, Slots) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Slots(breakfast={self.breakfast}, lunch={self.lunch}, dinner={self.dinner})"

    @staticmethod
    def from_dict(data) -> "Slots":
        """Build from an untyped mapping; anything that is not a list becomes empty."""
        d = data if isinstance(data, dict) else {}
        return Slots(**{
            slot: [str(x) for x in d.get(slot)] if isinstance(d.get(slot), list) else []
            for slot in SLOT_NAMES
        })

    def to_dict(self) -> Dict[str, List[str]]:
        return {slot: list(getattr(self, slot)) for slot in SLOT_NAMES}


class MealPlan:
    def __init__(self, id: str, user_id: str, date: date, slots: Optional[Slots] = None,
                 note: Optional[str] = None):
        self.id = id
        self.user_id = user_id
        self.date = date
        self.slots = slots or Slots()
        self.note = note

    def __repr__(self) -> str:
        return f"MealPlan({self.user_id} {self.date.isoformat()} {self.slots!r})"

    @staticmethod
    def from_dict(data):
        d = dict(data)
        day = d.get("date")
        if isinstance(day, str):
            day = date.fromisoformat(day[:10])
        return MealPlan(
            id=str(d.get("id", "")),
            user_id=str(d.get("user_id", "")),
            date=day,
            slots=Slots.from_dict(d.get("slots")),
            note=d.get("note"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "note": self.note,
            "slots": self.slots.to_dict(),
        }
