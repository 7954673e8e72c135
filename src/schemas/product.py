"""Pydantic schemas for Product resources"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.db.models.product import ProductStatus


class ProductCreate(BaseModel):
    """Schema for listing a new product."""

    title: str = Field(..., min_length=1, description="Listing title")
    price: int = Field(..., ge=1, description="Price in minor currency units")
    featured: bool = Field(default=False, description="List as featured")


class ProductRead(BaseModel):
    """Schema returned when reading a product."""

    id: UUID = Field(..., description="Product identifier")
    seller_id: UUID = Field(..., description="Seller identifier")
    title: str = Field(..., description="Listing title")
    price: int = Field(..., description="Price in minor currency units")
    status: ProductStatus = Field(..., description="Listing status")
    featured: bool = Field(..., description="Whether the listing is featured")
    created_at: Optional[datetime] = Field(
        default=None, description="Creation timestamp"
    )

    model_config = ConfigDict(from_attributes=True)
