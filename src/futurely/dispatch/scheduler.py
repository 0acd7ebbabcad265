"""APScheduler integration for the daily letter delivery run.

This module provides scheduler setup and management for delivering
sealed letters once a day on a cron schedule.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from futurely.core.config import settings
from futurely.core.database import async_session
from futurely.dispatch.runner import run_daily_delivery

log = structlog.get_logger()

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None

DELIVERY_JOB_ID = "deliver_due_letters"


def setup_scheduler() -> AsyncIOScheduler:
    """Configure and create the AsyncIOScheduler.

    Returns:
        A configured AsyncIOScheduler (not yet started).
    """
    scheduler = AsyncIOScheduler(
        timezone=settings.delivery_timezone,
        job_defaults={
            "coalesce": True,  # Combine multiple pending runs into one
            "max_instances": 1,  # Never overlap two delivery runs
            "misfire_grace_time": 3600,  # Still run if the process was briefly down
        },
    )
    return scheduler


async def deliver_due_letters() -> None:
    """Job that delivers every sealed letter due today (UTC).

    A store failure while selecting due letters aborts the run; it is logged
    here and the next scheduled run picks the letters up again.
    """
    run_date = datetime.now(UTC).date()
    log.debug("Starting scheduled delivery run", run_date=run_date.isoformat())

    async with async_session() as session:
        try:
            await run_daily_delivery(session, run_date, settings)
        except Exception as e:
            log.error(
                "Delivery run aborted",
                run_date=run_date.isoformat(),
                error=str(e),
            )
            await session.rollback()


def start_scheduler() -> AsyncIOScheduler:
    """Start the scheduler and add the daily delivery job.

    Returns:
        The started scheduler instance.
    """
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        log.warning("Scheduler already running")
        return _scheduler

    _scheduler = setup_scheduler()

    _scheduler.add_job(
        deliver_due_letters,
        CronTrigger.from_crontab(settings.delivery_cron, timezone=settings.delivery_timezone),
        id=DELIVERY_JOB_ID,
        name="Deliver due letters",
        replace_existing=True,
    )

    _scheduler.start()
    log.info(
        "Scheduler started",
        delivery_cron=settings.delivery_cron,
        timezone=settings.delivery_timezone,
    )

    return _scheduler


async def shutdown_scheduler() -> None:
    """Shutdown the scheduler gracefully.

    Waits for a running delivery job to complete before shutting down.
    """
    global _scheduler

    if _scheduler is None:
        log.debug("Scheduler not initialized, nothing to shutdown")
        return

    if not _scheduler.running:
        log.debug("Scheduler not running, nothing to shutdown")
        return

    log.info("Shutting down scheduler")
    _scheduler.shutdown(wait=True)
    _scheduler = None
    log.info("Scheduler shutdown complete")


def get_scheduler() -> AsyncIOScheduler | None:
    """Get the current scheduler instance.

    Returns:
        The scheduler if initialized, None otherwise.
    """
    return _scheduler
