"""Repository layer package."""

from src.repositories.product_repo import ProductRepo
from src.repositories.subscription_repo import SubscriptionRepo

__all__ = [
    "ProductRepo",
    "SubscriptionRepo",
]
