"""Entitlement engine: what a user may do under their effective plan.

The effective plan is derived on every read. A user with no subscription in
force (no ``activa`` row whose ``end_date`` is still ahead) is on the implicit
``basico`` plan, which has no row in the database. That fallback is decided in
:meth:`EntitlementService.resolve_active_plan` and nowhere else; every other
query works with the :data:`EffectivePlan` it returns.

Quota checks are read-then-act. Two concurrent publishes from the same seller
can both pass :meth:`EntitlementService.can_publish_product` and overshoot the
limit by one; callers accept that rare overshoot.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.db.models.product import ACTIVE_LISTING_STATUSES
from src.db.models.subscription import PlanType, Subscription, SubscriptionStatus
from src.repositories.product_repo import ProductRepo
from src.repositories.subscription_repo import SubscriptionRepo
from src.services.clock import to_utc


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefaultPlan:
    """Implicit plan of users without a subscription in force."""

    plan: PlanType
    products_limit: int
    featured_products_limit: int
    analytics_enabled: bool
    status: SubscriptionStatus = SubscriptionStatus.ACTIVA

    subscription_id = None
    end_date = None

    @classmethod
    def from_settings(cls) -> "DefaultPlan":
        defaults = settings.plans
        return cls(
            plan=PlanType(defaults.plan),
            products_limit=defaults.products_limit,
            featured_products_limit=defaults.featured_products_limit,
            analytics_enabled=defaults.analytics_enabled,
        )


@dataclass(frozen=True)
class PersistedPlan:
    """Plan limits taken from a stored subscription row."""

    subscription_id: UUID
    plan: PlanType
    products_limit: int
    featured_products_limit: int
    analytics_enabled: bool
    status: SubscriptionStatus
    end_date: dt.datetime

    @classmethod
    def from_subscription(cls, subscription: Subscription) -> "PersistedPlan":
        return cls(
            subscription_id=subscription.id,
            plan=subscription.plan,
            products_limit=subscription.products_limit,
            featured_products_limit=subscription.featured_products_limit,
            analytics_enabled=subscription.analytics_enabled,
            status=subscription.status,
            end_date=subscription.end_date,
        )


EffectivePlan = Union[PersistedPlan, DefaultPlan]


@dataclass(frozen=True)
class UserLimits:
    plan: PlanType
    products_limit: int
    products_used: int
    products_remaining: int
    featured_products_limit: int
    featured_products_used: int
    featured_products_remaining: int
    analytics_enabled: bool
    status: SubscriptionStatus


class EntitlementService:
    """Answers capability and quota questions for a user at a given instant."""

    def __init__(self, session: AsyncSession) -> None:
        self.subscriptions = SubscriptionRepo(session)
        self.products = ProductRepo(session)

    async def resolve_active_plan(self, user_id: UUID, now: dt.datetime) -> EffectivePlan:
        subscription = await self.subscriptions.get_current_active(user_id, to_utc(now))
        if subscription is None:
            return DefaultPlan.from_settings()
        return PersistedPlan.from_subscription(subscription)

    async def can_publish_product(self, user_id: UUID, now: dt.datetime) -> bool:
        effective = await self.resolve_active_plan(user_id, now)
        used = await self.products.count_user_products(user_id, ACTIVE_LISTING_STATUSES)
        allowed = used < effective.products_limit
        if not allowed:
            logger.warning(
                "User %s at product quota (%s/%s, plan=%s)",
                user_id,
                used,
                effective.products_limit,
                effective.plan.value,
            )
        return allowed

    async def can_feature_product(self, user_id: UUID, now: dt.datetime) -> bool:
        effective = await self.resolve_active_plan(user_id, now)
        used = await self.products.count_user_featured_products(
            user_id, ACTIVE_LISTING_STATUSES
        )
        allowed = used < effective.featured_products_limit
        if not allowed:
            logger.warning(
                "User %s at featured quota (%s/%s, plan=%s)",
                user_id,
                used,
                effective.featured_products_limit,
                effective.plan.value,
            )
        return allowed

    async def has_analytics_access(self, user_id: UUID, now: dt.datetime) -> bool:
        effective = await self.resolve_active_plan(user_id, now)
        return effective.analytics_enabled

    async def get_user_limits(self, user_id: UUID, now: dt.datetime) -> UserLimits:
        """Limits, usage and remaining headroom.

        Remaining values are ``limit - used`` and go negative when a seller
        holds more listings than a downgraded plan allows.
        """

        effective = await self.resolve_active_plan(user_id, now)
        products_used = await self.products.count_user_products(
            user_id, ACTIVE_LISTING_STATUSES
        )
        featured_used = await self.products.count_user_featured_products(
            user_id, ACTIVE_LISTING_STATUSES
        )
        return UserLimits(
            plan=effective.plan,
            products_limit=effective.products_limit,
            products_used=products_used,
            products_remaining=effective.products_limit - products_used,
            featured_products_limit=effective.featured_products_limit,
            featured_products_used=featured_used,
            featured_products_remaining=effective.featured_products_limit - featured_used,
            analytics_enabled=effective.analytics_enabled,
            status=effective.status,
        )
