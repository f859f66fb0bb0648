"""Schemas for region-scoped products."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.marketplace_service.schemas.accounts import RegionSummary


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    sku: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)
    price_per_quantity: int = Field(1, ge=1)
    mrp: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    unit: str = Field("piece", max_length=30)
    min_order_quantity: int = Field(1, ge=1)
    max_order_quantity: int = Field(100, ge=1)
    image_url: Optional[str] = None
    is_active: bool = True


class ProductCreate(ProductBase):
    # Ignored for regional admins, who are pinned to their own region
    region_id: Optional[uuid.UUID] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0)
    price_per_quantity: Optional[int] = Field(None, ge=1)
    mrp: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=30)
    min_order_quantity: Optional[int] = Field(None, ge=1)
    max_order_quantity: Optional[int] = Field(None, ge=1)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    region_id: Optional[uuid.UUID] = None


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    region_id: uuid.UUID
    region: Optional[RegionSummary] = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class ProductMutationResponse(BaseModel):
    success: bool = True
    product: ProductResponse
