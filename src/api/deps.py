"""Shared FastAPI dependencies."""
from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.session import get_db
from src.services.clock import Clock, SystemClock
from src.services.entitlements import EntitlementService
from src.services.subscriptions import SubscriptionService

_system_clock = SystemClock()


async def get_db_session(
    session: AsyncSession = Depends(get_db),
) -> AsyncGenerator[AsyncSession, None]:
    yield session


def get_clock() -> Clock:
    return _system_clock


def get_entitlements(db: AsyncSession = Depends(get_db_session)) -> EntitlementService:
    return EntitlementService(db)


def get_subscription_service(
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionService:
    return SubscriptionService(db)
