from fastapi import APIRouter, Depends

from dailycook.api.deps import Services, get_services, get_user_id, http_errors
from dailycook.utilities.validators import ShoppingFromRecipesInput

router = APIRouter(prefix="/api/shopping-list", tags=["shopping-list"])


@router.post("/from-recipes")
def from_recipes(payload: ShoppingFromRecipesInput, user_id: str = Depends(get_user_id),
                 services: Services = Depends(get_services)):
    """Merged, priced ingredient list for the given recipes."""
    with http_errors():
        shopping_list = services.shopping.build_from_recipes(
            user_id, payload.recipe_ids, payload.title, payload.persist)
    result = shopping_list.to_dict()
    total = shopping_list.estimated_total()
    if total is not None:
        result["estimated_total"] = total
    return result


@router.get("")
def list_saved(user_id: str = Depends(get_user_id), services: Services = Depends(get_services)):
    return services.shopping_lists.list_for_user(user_id)
