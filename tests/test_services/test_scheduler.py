from __future__ import annotations

import datetime as dt

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from src.core.config import settings
from src.db.models.subscription import SubscriptionStatus
from src.schedulers import scheduler as scheduler_module
from src.services.clock import FixedClock

from conftest import NOW


@pytest.mark.asyncio
async def test_run_expiry_sweep_commits_in_own_session(
    test_db, test_db_engine, make_user, make_subscription, monkeypatch
):
    user = await make_user()
    ended = await make_subscription(
        user.id,
        start_date=NOW - dt.timedelta(days=31),
        end_date=NOW - dt.timedelta(hours=1),
    )
    monkeypatch.setattr(
        scheduler_module,
        "get_session_factory",
        lambda: async_sessionmaker(test_db_engine, expire_on_commit=False),
    )

    expired = await scheduler_module.run_expiry_sweep(FixedClock(NOW))

    assert expired == 1
    await test_db.refresh(ended)
    assert ended.status is SubscriptionStatus.EXPIRADA
    assert await scheduler_module.run_expiry_sweep(FixedClock(NOW)) == 0


@pytest.mark.asyncio
async def test_scheduler_disabled_by_default():
    assert scheduler_module.start_scheduler() is None


@pytest.mark.asyncio
async def test_scheduler_registers_single_expiry_job(monkeypatch):
    monkeypatch.setattr(settings.scheduler, "enabled", True)
    monkeypatch.setattr(settings.scheduler, "expiry_interval_minutes", 15)

    started = scheduler_module.start_scheduler()
    try:
        assert started is not None
        assert scheduler_module.start_scheduler() is started
        job = started.get_job(scheduler_module.EXPIRY_JOB_ID)
        assert job is not None
        assert job.trigger.interval == dt.timedelta(minutes=15)
    finally:
        scheduler_module.shutdown_scheduler()
