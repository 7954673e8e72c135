"""Subscription lifecycle: create, cancel, update and expire.

Status only moves forward: ``activa`` may become ``cancelada`` (user action)
or ``expirada`` (time). Both are terminal. Rows are never deleted.
"""
from __future__ import annotations

import datetime as dt
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from src.db.models.subscription import Subscription, SubscriptionStatus
from src.repositories.subscription_repo import SubscriptionRepo
from src.schemas.subscription import SubscriptionCreate, SubscriptionUpdate
from src.services.clock import to_utc


logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS = {
    SubscriptionStatus.ACTIVA: {SubscriptionStatus.CANCELADA, SubscriptionStatus.EXPIRADA},
    SubscriptionStatus.CANCELADA: set(),
    SubscriptionStatus.EXPIRADA: set(),
}


def ensure_transition(current: SubscriptionStatus, target: SubscriptionStatus) -> None:
    """Reject any status change that is not ``activa`` -> terminal."""

    if current == target:
        return
    if target not in _ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot change subscription status from {current.value} to {target.value}"
        )


class SubscriptionService:
    """Lifecycle operations on :class:`Subscription` rows."""

    def __init__(self, session: AsyncSession) -> None:
        self.repo = SubscriptionRepo(session)

    async def expire_old_subscriptions(self, now: dt.datetime) -> int:
        expired = await self.repo.expire_ended(to_utc(now))
        if expired:
            logger.info("Expired %s subscription(s) ended before %s", expired, now)
        return expired

    async def create_subscription(
        self, user_id: UUID, data: SubscriptionCreate, now: dt.datetime
    ) -> Subscription:
        now = to_utc(now)
        # A paid plan that just ended must not block the new one.
        await self.expire_old_subscriptions(now)

        existing = await self.repo.get_active_paid(user_id, now)
        if existing is not None:
            logger.warning(
                "User %s already holds active paid subscription %s", user_id, existing.id
            )
            raise ConflictError(
                "User already has an active paid subscription; cancel it first."
            )

        subscription = await self.repo.create(user_id, **data.model_dump())
        logger.info(
            "Created %s subscription %s for user %s until %s",
            subscription.plan.value,
            subscription.id,
            user_id,
            data.end_date,
        )
        return subscription

    async def get_subscription(self, subscription_id: UUID, user_id: UUID) -> Subscription:
        subscription = await self.repo.get(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription not found")
        if subscription.user_id != user_id:
            raise ForbiddenError("You do not have permission to access this subscription")
        return subscription

    async def list_user_subscriptions(self, user_id: UUID) -> list[Subscription]:
        return await self.repo.list_for_user(user_id)

    async def cancel_subscription(
        self, subscription_id: UUID, user_id: UUID, now: dt.datetime
    ) -> Subscription:
        subscription = await self.get_subscription(subscription_id, user_id)
        ensure_transition(subscription.status, SubscriptionStatus.CANCELADA)
        subscription = await self.repo.set_status(subscription, SubscriptionStatus.CANCELADA)
        logger.info(
            "Cancelled subscription %s for user %s at %s", subscription.id, user_id, to_utc(now)
        )
        return subscription

    async def update_subscription(
        self,
        subscription_id: UUID,
        user_id: UUID,
        patch: SubscriptionUpdate,
        now: dt.datetime,
    ) -> Subscription:
        subscription = await self.get_subscription(subscription_id, user_id)
        if patch.status is None or patch.status == subscription.status:
            return subscription

        ensure_transition(subscription.status, patch.status)
        subscription = await self.repo.set_status(subscription, patch.status)
        logger.info(
            "Subscription %s moved to %s by user %s at %s",
            subscription.id,
            patch.status.value,
            user_id,
            to_utc(now),
        )
        return subscription
