"""
Input validation schemas using Pydantic for the meal plan and shopping list API.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Literal, Optional, Union


def _clean_ids(v):
    """Keep non-empty ids, stripped."""
    return [str(x).strip() for x in v if x is not None and str(x).strip()]


class SlotsInput(BaseModel):
    """Schema for the three meal slots of a day."""
    breakfast: List[str] = Field(default_factory=list)
    lunch: List[str] = Field(default_factory=list)
    dinner: List[str] = Field(default_factory=list)

    @field_validator('breakfast', 'lunch', 'dinner')
    @classmethod
    def strip_ids(cls, v):
        return _clean_ids(v)


class MealPlanUpsertInput(BaseModel):
    """Schema for creating or replacing a day's plan."""
    date: str = Field(..., min_length=1)
    slots: SlotsInput = Field(default_factory=SlotsInput)
    note: Optional[str] = None


class MealPlanUpdateInput(BaseModel):
    slots: Optional[SlotsInput] = None
    note: Optional[str] = None


class PatchSlotInput(BaseModel):
    """Schema for changing one slot of an existing plan."""
    slot: Literal['breakfast', 'lunch', 'dinner']
    set: Optional[List[str]] = None
    add: Optional[str] = None
    remove: Optional[str] = None

    @field_validator('set')
    @classmethod
    def strip_set(cls, v):
        return _clean_ids(v) if v is not None else None


class CopyWeekInput(BaseModel):
    from_date: str = Field(..., alias='from', min_length=1)
    to_date: str = Field(..., alias='to', min_length=1)

    model_config = {'populate_by_name': True}


class SuggestMenuInput(BaseModel):
    """Schema for menu suggestion requests."""
    date: Optional[str] = None
    slot: Literal['breakfast', 'lunch', 'dinner', 'all'] = 'all'
    region: Optional[str] = None
    vegetarian: bool = False
    exclude_ingredient_names: Optional[Union[str, List[str]]] = None
    include_starter: bool = False
    include_dessert: bool = False
    max_cook_time: Optional[int] = Field(None, ge=1, le=1440)
    persist: bool = True
    recipe_count: Optional[int] = Field(None, ge=1, le=20)
    diet_mode: bool = False
    eat_clean: bool = False

    @field_validator('region')
    @classmethod
    def blank_region(cls, v):
        """Treat empty strings as no region."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class SuggestMealInput(BaseModel):
    region: Optional[str] = None
    diet_type: Optional[str] = None
    target_kcal: Optional[int] = Field(None, ge=500, le=10000)


class ShoppingFromRecipesInput(BaseModel):
    """Schema for building a shopping list from explicit recipes."""
    recipe_ids: List[str] = Field(..., min_length=1)
    title: Optional[str] = Field(None, max_length=200)
    persist: bool = True

    @field_validator('recipe_ids')
    @classmethod
    def validate_ids(cls, v):
        cleaned = _clean_ids(v)
        if not cleaned:
            raise ValueError('At least one recipe id is required')
        return cleaned


class RefreshPricesInput(BaseModel):
    """Optional subset for an explicit price fetch; empty means every ingredient."""
    ingredient_ids: List[str] = Field(default_factory=list)

    @field_validator('ingredient_ids')
    @classmethod
    def strip_ids(cls, v):
        return _clean_ids(v)


def slots_dict(slots: Optional[SlotsInput]) -> Optional[Dict[str, List[str]]]:
    return slots.model_dump() if slots is not None else None
