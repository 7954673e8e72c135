"""Repository utilities for working with Product records."""
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.product import Product, ProductStatus


class ProductRepo:
    """Simple data-access helper for Product entities."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, product_id: UUID) -> Optional[Product]:
        result = await self.session.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    async def create(
        self, seller_id: UUID, title: str, price: int, featured: bool = False
    ) -> Product:
        product = Product(
            seller_id=seller_id,
            title=title,
            price=price,
            featured=featured,
            status=ProductStatus.AVAILABLE,
        )
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def set_featured(self, product: Product, featured: bool) -> Product:
        product.featured = featured
        self.session.add(product)
        await self.session.flush()
        return product

    async def count_user_products(
        self, user_id: UUID, statuses: Iterable[ProductStatus]
    ) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Product)
            .where(Product.seller_id == user_id, Product.status.in_(list(statuses)))
        )
        value = result.scalar_one()
        return int(value or 0)

    async def count_user_featured_products(
        self, user_id: UUID, statuses: Iterable[ProductStatus]
    ) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Product)
            .where(
                Product.seller_id == user_id,
                Product.featured.is_(True),
                Product.status.in_(list(statuses)),
            )
        )
        value = result.scalar_one()
        return int(value or 0)
