from typing import Optional

from fastapi import APIRouter, Depends, Query

from dailycook.api.deps import Services, get_services, get_user_id, http_errors
from dailycook.logic.menu.composer import MenuRequest
from dailycook.logic.menu.suggester import suggest_meal
from dailycook.utilities.validators import (
    CopyWeekInput,
    MealPlanUpdateInput,
    MealPlanUpsertInput,
    PatchSlotInput,
    SuggestMealInput,
    SuggestMenuInput,
    slots_dict,
)

router = APIRouter(prefix="/api/mealplan", tags=["mealplan"])


@router.get("")
def get_range(start: Optional[str] = Query(default=None), end: Optional[str] = Query(default=None),
              user_id: str = Depends(get_user_id), services: Services = Depends(get_services)):
    with http_errors():
        plans = services.planner.get_range(user_id, start, end)
    return [p.to_dict() for p in plans]


@router.put("")
def upsert(payload: MealPlanUpsertInput, user_id: str = Depends(get_user_id),
           services: Services = Depends(get_services)):
    with http_errors():
        plan = services.planner.upsert(user_id, payload.date, slots_dict(payload.slots), payload.note)
    return plan.to_dict()


@router.get("/today-suggest")
def today_suggest(slot: Optional[str] = Query(default=None), user_id: str = Depends(get_user_id),
                  services: Services = Depends(get_services)):
    with http_errors():
        return services.composer.today_suggest(user_id, slot)


@router.get("/nutrition")
def daily_nutrition(date: Optional[str] = Query(default=None), user_id: str = Depends(get_user_id),
                    services: Services = Depends(get_services)):
    with http_errors():
        return services.planner.daily_nutrition(user_id, date)


@router.get("/shopping/from-range")
def shopping_from_range(start: str = Query(...), end: str = Query(...), user_id: str = Depends(get_user_id),
                        services: Services = Depends(get_services)):
    with http_errors():
        shopping_list = services.shopping.from_range(user_id, start, end)
    return {"items": [item.to_dict() for item in shopping_list.items]}


@router.post("/copy-week")
def copy_week(payload: CopyWeekInput, user_id: str = Depends(get_user_id),
              services: Services = Depends(get_services)):
    with http_errors():
        return services.planner.copy_week(user_id, payload.from_date, payload.to_date)


@router.post("/suggest")
def suggest(payload: SuggestMealInput, user_id: str = Depends(get_user_id),
            services: Services = Depends(get_services)):
    return suggest_meal(services.recipes, services.preferences, user_id,
                        payload.region, payload.diet_type, payload.target_kcal)


@router.post("/suggest-menu")
def suggest_menu(payload: SuggestMenuInput, user_id: str = Depends(get_user_id),
                 services: Services = Depends(get_services)):
    with http_errors():
        suggestion = services.composer.suggest_menu(user_id, MenuRequest(**payload.model_dump()))
    return suggestion.to_dict()


@router.get("/{plan_id}")
def find_one(plan_id: str, user_id: str = Depends(get_user_id), services: Services = Depends(get_services)):
    with http_errors():
        return services.planner.find_one(user_id, plan_id).to_dict()


@router.patch("/{plan_id}")
def update(plan_id: str, payload: MealPlanUpdateInput, user_id: str = Depends(get_user_id),
           services: Services = Depends(get_services)):
    with http_errors():
        plan = services.planner.update(user_id, plan_id, slots_dict(payload.slots), payload.note)
    return plan.to_dict()


@router.delete("/{plan_id}")
def remove(plan_id: str, user_id: str = Depends(get_user_id), services: Services = Depends(get_services)):
    with http_errors():
        return services.planner.remove(user_id, plan_id)


@router.patch("/{plan_id}/slot")
def patch_slot(plan_id: str, payload: PatchSlotInput, user_id: str = Depends(get_user_id),
               services: Services = Depends(get_services)):
    with http_errors():
        plan = services.planner.patch_slot(user_id, plan_id, payload.slot, payload.set, payload.add,
                                           payload.remove)
    return plan.to_dict()
