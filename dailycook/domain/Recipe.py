"""Recipe domain entity: title, tags, region, cook time, nutrition and ingredient items."""
from datetime import datetime
from typing import List, Optional

from dailycook.utilities.constants import DEFAULT_COOK_TIME


class RecipeItem:
    """Amount of one ingredient used by a recipe (in the ingredient's unit unless overridden)."""

    def __init__(self, ingredient_id: str, amount: float = 0, unit_override: Optional[str] = None,
                 recipe_id: str = ""):
        self.recipe_id = recipe_id
        self.ingredient_id = ingredient_id
        self.amount = amount
        self.unit_override = unit_override or None

    def __repr__(self) -> str:
        unit = f" {self.unit_override}" if self.unit_override else ""
        return f"RecipeItem({self.ingredient_id}: {self.amount}{unit})"

    @staticmethod
    def from_dict(data, recipe_id: str = ""):
        d = dict(data) if isinstance(data, dict) else {}
        return RecipeItem(
            ingredient_id=str(d.get("ingredient_id", "")),
            amount=d.get("amount", 0) or 0,
            unit_override=d.get("unit_override"),
            recipe_id=recipe_id or d.get("recipe_id", ""),
        )

    def to_dict(self):
        return {
            "ingredient_id": self.ingredient_id,
            "amount": self.amount,
            "unit_override": self.unit_override,
        }


class Recipe:
    def __init__(self, id: str = "", title: str = "", tags: Optional[List[str]] = None,
                 region: Optional[str] = None, cook_time: Optional[int] = None,
                 kcal: Optional[float] = None, protein: Optional[float] = None,
                 fat: Optional[float] = None, carbs: Optional[float] = None,
                 likes: int = 0, created_at: Optional[datetime] = None,
                 items: Optional[List[RecipeItem]] = None, image: str = ""):
        self.id = id
        self.title = title
        self.tags = tags[:] if tags else []
        self.region = region
        self.cook_time = cook_time
        self.kcal = kcal
        self.protein = protein
        self.fat = fat
        self.carbs = carbs
        self.likes = likes or 0
        self.created_at = created_at
        self.items = items[:] if items else []
        self.image = image

    def __str__(self) -> str:
        return f"{self.title} ({self.id}) - Tags: {', '.join(self.tags)} - Kcal: {self.kcal}"

    __repr__ = __str__

    def has_any_tag(self, tags) -> bool:
        return any(t in self.tags for t in tags)

    def estimated_cook_time(self) -> int:
        return self.cook_time if self.cook_time is not None else DEFAULT_COOK_TIME

    def summary(self):
        """Lightweight dict used in menu and suggestion responses."""
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "cook_time": self.cook_time,
            "likes": self.likes,
            "tags": self.tags,
            "region": self.region,
            "kcal": self.kcal,
        }

    @staticmethod
    def from_dict(data):
        d = dict(data)
        created = d.get("created_at")
        if isinstance(created, str) and created:
            try:
                created = datetime.fromisoformat(created)
            except ValueError:
                created = None
        recipe_id = str(d.get("id", ""))
        return Recipe(
            id=recipe_id,
            title=d.get("title", ""),
            tags=d.get("tags") or [],
            region=d.get("region"),
            cook_time=d.get("cook_time"),
            kcal=d.get("kcal"),
            protein=d.get("protein"),
            fat=d.get("fat"),
            carbs=d.get("carbs"),
            likes=d.get("likes", 0),
            created_at=created if isinstance(created, datetime) else None,
            items=[RecipeItem.from_dict(it, recipe_id) for it in d.get("items", [])],
            image=d.get("image", ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "tags": self.tags,
            "region": self.region,
            "cook_time": self.cook_time,
            "kcal": self.kcal,
            "protein": self.protein,
            "fat": self.fat,
            "carbs": self.carbs,
            "likes": self.likes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "items": [it.to_dict() for it in self.items],
            "image": self.image,
        }
