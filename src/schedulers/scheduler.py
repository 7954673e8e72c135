"""Periodic subscription expiry sweep."""
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.core.config import settings
from src.db.session import get_session_factory
from src.services.clock import Clock, SystemClock
from src.services.subscriptions import SubscriptionService


logger = logging.getLogger(__name__)

EXPIRY_JOB_ID = "expire_old_subscriptions"

_scheduler: AsyncIOScheduler | None = None


async def run_expiry_sweep(clock: Clock | None = None) -> int:
    """Expire ended subscriptions in a dedicated session and commit."""

    clock = clock or SystemClock()
    async with get_session_factory()() as session:
        try:
            expired = await SubscriptionService(session).expire_old_subscriptions(
                clock.now()
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Subscription expiry sweep failed")
            raise
    return expired


def start_scheduler() -> AsyncIOScheduler | None:
    global _scheduler
    if not settings.scheduler.enabled:
        logger.info("Scheduler disabled; expiry runs only on subscription creation")
        return None
    if _scheduler is not None:
        return _scheduler

    _scheduler = AsyncIOScheduler(timezone="UTC")
    _scheduler.add_job(
        run_expiry_sweep,
        "interval",
        minutes=settings.scheduler.expiry_interval_minutes,
        id=EXPIRY_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    _scheduler.start()
    logger.info(
        "Scheduler started; expiry sweep every %s minute(s)",
        settings.scheduler.expiry_interval_minutes,
    )
    return _scheduler


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    _scheduler = None
