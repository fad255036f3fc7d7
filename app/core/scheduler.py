"""Background job scheduler for periodic auto-scheduling."""
import logging
from uuid import UUID

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlmodel import Session

from app.core.config import settings
from app.core.database import engine
from app.scheduling.runner import AutoScheduleRequest, run_auto_schedule

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def auto_schedule_job():
    """Background auto-schedule job, one run per configured group type."""
    for group_type_id in settings.scheduled_group_type_ids:
        try:
            request = AutoScheduleRequest(
                group_type_id=UUID(group_type_id),
                scheduler_person_id=UUID(settings.auto_schedule_person_id),
                attribute_key=settings.auto_schedule_attribute_key or None,
            )
            with Session(engine) as session:
                result = run_auto_schedule(session, request)
            logger.info(f"Background auto-schedule completed for {group_type_id}: {result.summary}")
        except Exception as e:
            logger.error(f"Background auto-schedule failed for {group_type_id}: {e}")


def start_scheduler():
    """Start the background scheduler if auto-scheduling is configured."""
    if not settings.scheduled_group_type_ids or not settings.auto_schedule_person_id:
        logger.info("Auto-schedule job not configured, scheduler not started")
        return

    scheduler.add_job(
        auto_schedule_job,
        trigger=IntervalTrigger(minutes=settings.auto_schedule_interval_minutes),
        id="auto_schedule",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, auto-scheduling every {settings.auto_schedule_interval_minutes} minutes"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
