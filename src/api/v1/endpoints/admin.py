"""Operational endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.deps import get_clock, get_subscription_service
from src.auth.jwt import require_admin
from src.schemas.subscription import ExpirySweepRead
from src.services.clock import Clock
from src.services.subscriptions import SubscriptionService


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/subscriptions/expire", response_model=ExpirySweepRead)
async def expire_subscriptions(
    service: SubscriptionService = Depends(get_subscription_service),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    expired = await service.expire_old_subscriptions(now)
    return ExpirySweepRead(expired=expired, ran_at=now)
