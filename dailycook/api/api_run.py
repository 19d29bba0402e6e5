from fastapi import FastAPI, Query, Depends
from typing import Optional
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from dailycook.api.deps import Services, get_services
from dailycook.api.routes import mealplan, prices, shopping
from dailycook.events.web_observers import start as start_event_observers, get_events as get_web_events
from dailycook.logic.pricing.scheduler import build_price_scheduler
from dailycook.utilities.config import PRICE_REFRESH_HOUR, PRICE_REFRESH_SCHEDULED

# Logging
logger = logging.getLogger("dailycook_app")

# Initialize FastAPI app
app = FastAPI(title="DailyCook Meal Planning API")

# Include routers
app.include_router(mealplan.router)
app.include_router(shopping.router)
app.include_router(prices.router)

_scheduler: Optional[BackgroundScheduler] = None


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for web alerts when the app starts."""
    start_event_observers()
    logger.info("Web observers for price events started")


@app.on_event("startup")
def _startup_price_scheduler():
    """Start the daily price refresh when enabled in the environment."""
    global _scheduler
    if not PRICE_REFRESH_SCHEDULED:
        return
    services = get_services()
    _scheduler = build_price_scheduler(services.refresher.refresh_all, hour=PRICE_REFRESH_HOUR)
    _scheduler.start()
    logger.info("Daily price refresh scheduled at %02d:00", PRICE_REFRESH_HOUR)


@app.on_event("shutdown")
def _shutdown():
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
    if get_services.cache_info().currsize:
        get_services().close()


@app.get("/api/events")
def api_events(since: Optional[int] = Query(default=None)):
    """Recent price and menu events; poll with since=<next_cursor>."""
    return get_web_events(since)


@app.get("/api/health")
def health(services: Services = Depends(get_services)):
    return {"status": "ok", "price_sources": [s.name for s in services.lookup.sources]}
