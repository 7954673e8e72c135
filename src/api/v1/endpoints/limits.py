"""Endpoints exposing the caller's plan limits and capabilities."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.deps import get_clock, get_entitlements
from src.auth.jwt import require_auth
from src.schemas.subscription import UserLimitsRead
from src.services.clock import Clock
from src.services.entitlements import EntitlementService


router = APIRouter(prefix="/limits", tags=["limits"])


@router.get("/current", response_model=UserLimitsRead)
async def current_limits(
    auth=Depends(require_auth),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    limits = await entitlements.get_user_limits(auth["user_id"], clock.now())
    return UserLimitsRead.model_validate(limits)


@router.get("/can-publish")
async def can_publish(
    auth=Depends(require_auth),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    allowed = await entitlements.can_publish_product(auth["user_id"], clock.now())
    return {"can_publish": allowed}


@router.get("/can-feature")
async def can_feature(
    auth=Depends(require_auth),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    allowed = await entitlements.can_feature_product(auth["user_id"], clock.now())
    return {"can_feature": allowed}


@router.get("/has-analytics")
async def has_analytics(
    auth=Depends(require_auth),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    allowed = await entitlements.has_analytics_access(auth["user_id"], clock.now())
    return {"has_analytics": allowed}
