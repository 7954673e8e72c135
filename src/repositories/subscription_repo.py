"""Repository utilities for user subscriptions."""
from __future__ import annotations

import datetime as dt
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.subscription import PlanType, Subscription, SubscriptionStatus


class SubscriptionRepo:
    """Data-access helpers for :class:`Subscription`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, subscription_id: UUID) -> Subscription | None:
        return await self.session.get(Subscription, subscription_id)

    async def list_for_user(self, user_id: UUID) -> list[Subscription]:
        result = await self.session.execute(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_current_active(
        self, user_id: UUID, now: dt.datetime
    ) -> Subscription | None:
        """Most recently created ``activa`` row whose period has not ended."""

        result = await self.session.execute(
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVA,
                Subscription.end_date >= now,
            )
            .order_by(Subscription.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def get_active_paid(
        self, user_id: UUID, now: dt.datetime
    ) -> Subscription | None:
        result = await self.session.execute(
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVA,
                Subscription.end_date >= now,
                Subscription.plan != PlanType.BASICO,
            )
            .limit(1)
        )
        return result.scalars().first()

    async def create(self, user_id: UUID, **values) -> Subscription:
        subscription = Subscription(
            user_id=user_id, status=SubscriptionStatus.ACTIVA, **values
        )
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def set_status(
        self, subscription: Subscription, status: SubscriptionStatus
    ) -> Subscription:
        subscription.status = status
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def expire_ended(self, now: dt.datetime) -> int:
        """Flip every ``activa`` row with ``end_date < now`` to ``expirada``.

        Returns the number of rows this statement changed, so overlapping
        sweeps never both report the same subscription.
        """

        result = await self.session.execute(
            update(Subscription)
            .where(
                Subscription.status == SubscriptionStatus.ACTIVA,
                Subscription.end_date < now,
            )
            .values(status=SubscriptionStatus.EXPIRADA)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return int(result.rowcount or 0)
