"""Product catalog endpoints gated by the seller's plan quota."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_clock, get_db_session, get_entitlements
from src.auth.jwt import require_auth
from src.core.exceptions import ForbiddenError, NotFoundError, QuotaExceededError
from src.db.models.product import ACTIVE_LISTING_STATUSES
from src.repositories.product_repo import ProductRepo
from src.schemas.product import ProductCreate, ProductRead
from src.services.clock import Clock
from src.services.entitlements import EntitlementService
from src.services.limits import check_rate_limit


router = APIRouter(prefix="/products", tags=["products"])

PRODUCT_LIMIT_MESSAGE = "Product limit reached for your plan. Upgrade to publish more listings."
FEATURED_LIMIT_MESSAGE = "Featured product limit reached for your plan. Upgrade to feature more listings."


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    seller_id = auth["user_id"]
    await check_rate_limit(str(seller_id))

    now = clock.now()
    if not await entitlements.can_publish_product(seller_id, now):
        raise QuotaExceededError(PRODUCT_LIMIT_MESSAGE)
    if body.featured and not await entitlements.can_feature_product(seller_id, now):
        raise QuotaExceededError(FEATURED_LIMIT_MESSAGE)

    product = await ProductRepo(db).create(
        seller_id, title=body.title, price=body.price, featured=body.featured
    )
    return ProductRead.model_validate(product)


@router.post("/{product_id}/feature", response_model=ProductRead)
async def feature_product(
    product_id: UUID,
    auth=Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
    entitlements: EntitlementService = Depends(get_entitlements),
    clock: Clock = Depends(get_clock),
):
    seller_id = auth["user_id"]
    await check_rate_limit(str(seller_id))

    repo = ProductRepo(db)
    product = await repo.get_by_id(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if product.seller_id != seller_id:
        raise ForbiddenError("Only the seller can feature this product")
    if product.featured and product.status in ACTIVE_LISTING_STATUSES:
        return ProductRead.model_validate(product)

    if not await entitlements.can_feature_product(seller_id, clock.now()):
        raise QuotaExceededError(FEATURED_LIMIT_MESSAGE)

    product = await repo.set_featured(product, True)
    return ProductRead.model_validate(product)
