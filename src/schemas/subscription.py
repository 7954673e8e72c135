"""Pydantic schemas for subscription and entitlement resources."""
from __future__ import annotations

import datetime as dt
from typing import Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.db.models.subscription import BillingCycle, PlanType, SubscriptionStatus
from src.services.clock import to_utc


CYCLE_LENGTH = {
    BillingCycle.MENSUAL: relativedelta(months=1),
    BillingCycle.ANUAL: relativedelta(years=1),
}


class SubscriptionCreate(BaseModel):
    """Payload for subscribing to a plan."""

    plan: PlanType = Field(..., description="Plan tier")
    billing_cycle: BillingCycle = Field(..., description="Billing cycle")
    price: int = Field(..., ge=0, description="Price in minor currency units")
    start_date: dt.datetime = Field(..., description="Period start")
    end_date: Optional[dt.datetime] = Field(
        default=None, description="Period end; derived from the billing cycle when omitted"
    )
    products_limit: int = Field(..., ge=1, description="Maximum active listings")
    featured_products_limit: int = Field(
        ..., ge=0, description="Maximum featured active listings"
    )
    analytics_enabled: bool = Field(..., description="Access to seller analytics")

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalise_timezone(cls, value: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _check_period(self) -> "SubscriptionCreate":
        if self.end_date is None:
            self.end_date = self.start_date + CYCLE_LENGTH[self.billing_cycle]
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SubscriptionUpdate(BaseModel):
    """Only the status of a subscription may change after creation."""

    status: Optional[SubscriptionStatus] = Field(default=None, description="New status")

    model_config = ConfigDict(extra="forbid")


class SubscriptionRead(BaseModel):
    id: UUID
    user_id: UUID
    plan: PlanType
    billing_cycle: BillingCycle
    price: int
    start_date: dt.datetime
    end_date: dt.datetime
    status: SubscriptionStatus
    products_limit: int
    featured_products_limit: int
    analytics_enabled: bool
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class EffectivePlanRead(BaseModel):
    """Plan in force; ``subscription_id`` and ``end_date`` are null for the implicit basico plan."""

    subscription_id: Optional[UUID] = None
    end_date: Optional[dt.datetime] = None
    plan: PlanType
    products_limit: int
    featured_products_limit: int
    analytics_enabled: bool
    status: SubscriptionStatus

    model_config = ConfigDict(from_attributes=True)


class UserLimitsRead(BaseModel):
    plan: PlanType
    products_limit: int
    products_used: int
    products_remaining: int
    featured_products_limit: int
    featured_products_used: int
    featured_products_remaining: int
    analytics_enabled: bool
    status: SubscriptionStatus

    model_config = ConfigDict(from_attributes=True)


class ExpirySweepRead(BaseModel):
    expired: int
    ran_at: dt.datetime
