"""
Background scheduler.
Handles:
- Daily holiday feed refresh for the selected holiday source
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from workday.constants import HOLIDAY_PREFERENCE_NONE, HOLIDAY_REFRESH_HOUR
from workday.database import SessionLocal
from workday.services.holiday_service import HolidayService
from workday.services.holiday_store import HolidayStore

logger = logging.getLogger("workday.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


def run_holiday_refresh(store: HolidayStore):
    """Job: refresh holidays when a holiday source is selected"""
    db = SessionLocal()
    try:
        service = HolidayService(db, store)
        if service.current_preference() == HOLIDAY_PREFERENCE_NONE:
            logger.info("[HOLIDAY_REFRESH] No holiday source selected, skipping")
            return

        result = service.refresh()
        if result.success:
            logger.info(f"[HOLIDAY_REFRESH] Done: {result.record_count} records")
        else:
            logger.warning(f"[HOLIDAY_REFRESH] Failed: {result.error}")

    except Exception as e:
        logger.error(f"Scheduler Error (Holiday refresh): {e}")
    finally:
        db.close()


def start_scheduler(store: HolidayStore):
    """Start the scheduler with the daily holiday refresh job"""
    if not scheduler.running:
        scheduler.add_job(
            run_holiday_refresh,
            CronTrigger(hour=HOLIDAY_REFRESH_HOUR, minute=0),
            args=[store],
            id='holiday_refresh',
            replace_existing=True
        )

        scheduler.start()
        logger.info(">>> APScheduler STARTED <<<")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("APScheduler stopped")
