"""Subscription model recording a user's paid plan periods."""
from __future__ import annotations

import datetime as dt
import enum
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base


class PlanType(str, enum.Enum):
    BASICO = "basico"
    PREMIUM = "premium"
    PROFESIONAL = "profesional"


class BillingCycle(str, enum.Enum):
    MENSUAL = "mensual"
    ANUAL = "anual"


class SubscriptionStatus(str, enum.Enum):
    ACTIVA = "activa"
    CANCELADA = "cancelada"
    EXPIRADA = "expirada"

    @property
    def is_terminal(self) -> bool:
        return self is not SubscriptionStatus.ACTIVA


def _enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class Subscription(Base):
    """One subscription period; rows are never deleted, only change status."""

    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    plan: Mapped[PlanType] = mapped_column(_enum_column(PlanType, "plan_type"), nullable=False)
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        _enum_column(BillingCycle, "billing_cycle"),
        nullable=False,
        default=BillingCycle.MENSUAL,
    )
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[SubscriptionStatus] = mapped_column(
        _enum_column(SubscriptionStatus, "subscription_status"),
        nullable=False,
        default=SubscriptionStatus.ACTIVA,
    )
    products_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    featured_products_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    analytics_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(dt.timezone.utc),
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_subscriptions_user_status_end", "user_id", "status", "end_date"),
        CheckConstraint("start_date <= end_date", name="ck_subscriptions_period"),
        CheckConstraint("price >= 0", name="ck_subscriptions_price"),
        CheckConstraint("products_limit >= 1", name="ck_subscriptions_products_limit"),
        CheckConstraint(
            "featured_products_limit >= 0", name="ck_subscriptions_featured_limit"
        ),
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Subscription {self.id} user={self.user_id} plan={self.plan} status={self.status}>"
