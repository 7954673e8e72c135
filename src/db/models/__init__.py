"""Database models package exports."""

from src.db.models.product import Product, ProductStatus
from src.db.models.subscription import (
    BillingCycle,
    PlanType,
    Subscription,
    SubscriptionStatus,
)
from src.db.models.user import User

__all__ = [
    "BillingCycle",
    "PlanType",
    "Product",
    "ProductStatus",
    "Subscription",
    "SubscriptionStatus",
    "User",
]
