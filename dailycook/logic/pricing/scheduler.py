"""Daily background trigger for the price refresher (APScheduler cron job)."""
import logging
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from dailycook.utilities.config import APP_TIMEZONE, PRICE_REFRESH_HOUR

logger = logging.getLogger(__name__)

PRICE_REFRESH_JOB_ID = "daily-price-refresh"


def price_refresh_trigger(hour: int = PRICE_REFRESH_HOUR, timezone: str = APP_TIMEZONE) -> CronTrigger:
    return CronTrigger(hour=hour, minute=0, timezone=timezone)


def run_price_refresh(job: Callable[[], object]):
    logger.info("Running scheduled daily price update")
    try:
        summary = job()
        logger.info("Scheduled price update finished: %s", summary)
    except Exception:
        logger.exception("Scheduled price update failed")


def build_price_scheduler(job: Callable[[], object], hour: int = PRICE_REFRESH_HOUR,
                          timezone: str = APP_TIMEZONE) -> BackgroundScheduler:
    """Scheduler with one daily refresh job; the caller starts and shuts it down.

    A run that is still going when the next one is due is not doubled up, and
    missed runs collapse into one.
    """
    scheduler = BackgroundScheduler(timezone=timezone)
    scheduler.add_job(
        run_price_refresh,
        price_refresh_trigger(hour, timezone),
        args=[job],
        id=PRICE_REFRESH_JOB_ID,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=3600,
    )
    return scheduler
