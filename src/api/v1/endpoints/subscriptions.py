"""Endpoints for managing user subscriptions."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Header, status

from src.api.deps import get_clock, get_entitlements, get_subscription_service
from src.auth.jwt import require_auth
from src.schemas.subscription import (
    EffectivePlanRead,
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionUpdate,
)
from src.services.clock import Clock
from src.services.entitlements import EntitlementService
from src.services.limits import (
    check_rate_limit,
    complete_idempotency,
    ensure_idempotent,
    release_idempotency,
)
from src.services.subscriptions import SubscriptionService


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    body: SubscriptionCreate,
    auth=Depends(require_auth),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    service: SubscriptionService = Depends(get_subscription_service),
    clock: Clock = Depends(get_clock),
):
    user_id = auth["user_id"]
    await check_rate_limit(str(user_id))
    await ensure_idempotent(str(user_id), idempotency_key)

    try:
        subscription = await service.create_subscription(user_id, body, clock.now())
    except Exception:
        await release_idempotency(str(user_id), idempotency_key)
        raise
    await complete_idempotency(str(user_id), idempotency_key, str(subscription.id))
    return SubscriptionRead.model_validate(subscription)


@router.get("/my-subscriptions", response_model=List[SubscriptionRead])
async def my_subscriptions(
    auth=Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscriptions = await service.list_user_subscriptions(auth["user_id"])
    return [SubscriptionRead.model_validate(item) for item in subscriptions]


@router.get("/active", response_model=EffectivePlanRead)
async def active_plan(
    auth=Depends(require_auth),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    effective = await entitlements.resolve_active_plan(auth["user_id"], clock.now())
    return EffectivePlanRead.model_validate(effective)


@router.get("/{subscription_id}", response_model=SubscriptionRead)
async def get_subscription(
    subscription_id: UUID,
    auth=Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscription = await service.get_subscription(subscription_id, auth["user_id"])
    return SubscriptionRead.model_validate(subscription)


@router.patch("/{subscription_id}", response_model=SubscriptionRead)
async def update_subscription(
    subscription_id: UUID,
    body: SubscriptionUpdate,
    auth=Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
    clock: Clock = Depends(get_clock),
):
    user_id = auth["user_id"]
    await check_rate_limit(str(user_id))
    subscription = await service.update_subscription(
        subscription_id, user_id, body, clock.now()
    )
    return SubscriptionRead.model_validate(subscription)


@router.delete("/{subscription_id}", response_model=SubscriptionRead)
async def cancel_subscription(
    subscription_id: UUID,
    auth=Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
    clock: Clock = Depends(get_clock),
):
    user_id = auth["user_id"]
    await check_rate_limit(str(user_id))
    subscription = await service.cancel_subscription(subscription_id, user_id, clock.now())
    return SubscriptionRead.model_validate(subscription)
