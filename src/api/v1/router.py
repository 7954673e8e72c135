"""Version 1 API router."""
from fastapi import APIRouter

from src.api.v1.endpoints import admin, limits, products, subscriptions


api_router = APIRouter()
api_router.include_router(subscriptions.router)
api_router.include_router(limits.router)
api_router.include_router(products.router)
api_router.include_router(admin.router)
