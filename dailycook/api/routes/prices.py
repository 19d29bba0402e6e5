import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from dailycook.api.deps import Services, get_services
from dailycook.utilities.validators import RefreshPricesInput

router = APIRouter(prefix="/api/price-scraper", tags=["prices"])
logger = logging.getLogger(__name__)


@router.post("/update-all")
def update_all(services: Services = Depends(get_services)):
    """Re-check the market price of every ingredient now."""
    summary = services.refresher.refresh_all()
    return {"success": True, **summary.to_dict()}


@router.post("/update")
def update_selected(payload: Optional[RefreshPricesInput] = Body(default=None),
                    services: Services = Depends(get_services)):
    """Explicit fetch for some ingredients (all of them when the list is empty)."""
    if payload is None or not payload.ingredient_ids:
        summary = services.refresher.refresh_all()
    else:
        logger.info("Manual price update for %d ingredient(s)", len(payload.ingredient_ids))
        summary = services.refresher.refresh_ingredients(payload.ingredient_ids)
    return {"success": True, **summary.to_dict()}
