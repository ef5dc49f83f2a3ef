"""Background task scheduler for calculator session housekeeping."""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from investmate.services.sessions import calculator_sessions
from investmate.config import SESSION_PURGE_INTERVAL

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def purge_expired_sessions():
    """Drop calculator sessions that have been idle longer than SESSION_TTL."""
    try:
        purged = calculator_sessions.purge_expired()
        if purged:
            logger.info(f"Purged {purged} expired calculator sessions")
    except Exception as e:
        logger.error(f"Failed to purge calculator sessions: {e}")


def start_scheduler():
    """Start the background scheduler."""
    scheduler.add_job(
        purge_expired_sessions,
        trigger=IntervalTrigger(seconds=SESSION_PURGE_INTERVAL),
        id="purge_expired_sessions",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started, purging sessions every {SESSION_PURGE_INTERVAL}s")


def stop_scheduler():
    """Stop the background scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
