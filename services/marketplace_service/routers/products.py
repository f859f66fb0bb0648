"""Customer catalog: active products in the caller's region."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import get_current_profile
from services.marketplace_service.models import Product, Profile
from services.marketplace_service.schemas import ProductListResponse, ProductResponse
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(prefix="/products", tags=["catalog"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """List active products of the caller's region."""
    if profile.region_id is None:
        return ProductListResponse(products=[])

    query = (
        select(Product)
        .where(Product.region_id == profile.region_id, Product.is_active.is_(True))
        .options(selectinload(Product.region))
        .order_by(Product.category, Product.name)
    )
    if category:
        query = query.where(Product.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))

    result = await db.execute(query)
    return ProductListResponse(products=result.scalars().all())


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Get one active product from the caller's region."""
    result = await db.execute(
        select(Product)
        .where(
            Product.id == product_id,
            Product.region_id == profile.region_id,
            Product.is_active.is_(True),
        )
        .options(selectinload(Product.region))
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
