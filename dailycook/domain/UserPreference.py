"""UserPreference domain entity: kcal target, diet and taste settings (read-only to the core)."""
from typing import List, Optional

from dailycook.utilities.constants import REGION_TAGS


class UserPreference:
    def __init__(self, user_id: str, daily_kcal_target: Optional[int] = None,
                 diet_type: Optional[str] = None, disliked_ingredients: Optional[List[str]] = None,
                 liked_tags: Optional[List[str]] = None, goal: Optional[str] = None):
        self.user_id = user_id
        self.daily_kcal_target = daily_kcal_target
        self.diet_type = diet_type
        self.disliked_ingredients = disliked_ingredients[:] if disliked_ingredients else []
        self.liked_tags = liked_tags[:] if liked_tags else []
        self.goal = goal

    def preferred_region(self) -> Optional[str]:
        """First liked tag that names a region, if any."""
        return next((t for t in self.liked_tags if t in REGION_TAGS), None)

    def __repr__(self) -> str:
        return f"UserPreference({self.user_id}, kcal={self.daily_kcal_target}, diet={self.diet_type})"

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return UserPreference(
            user_id=str(d.get("user_id", "")),
            daily_kcal_target=d.get("daily_kcal_target"),
            diet_type=d.get("diet_type"),
            disliked_ingredients=d.get("disliked_ingredients") or [],
            liked_tags=d.get("liked_tags") or [],
            goal=d.get("goal"),
        )

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "daily_kcal_target": self.daily_kcal_target,
            "diet_type": self.diet_type,
            "disliked_ingredients": self.disliked_ingredients,
            "liked_tags": self.liked_tags,
            "goal": self.goal,
        }
