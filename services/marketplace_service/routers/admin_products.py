"""Admin product management: region-scoped catalog CRUD."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import (
    ensure_region_access,
    require_admin,
    scope_to_region,
)
from services.marketplace_service.models import (
    Order,
    OrderItem,
    Product,
    Profile,
    Region,
)
from services.marketplace_service.schemas import (
    ProductCreate,
    ProductListResponse,
    ProductMutationResponse,
    ProductResponse,
    ProductUpdate,
)
from services.marketplace_service.services.order_lifecycle import TERMINAL_STATUSES
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(prefix="/admin/products", tags=["admin-products"])
logger = get_logger(__name__)


# ============================================================================
# HELPERS
# ============================================================================


async def _get_product_or_404(db: AsyncSession, product_id: uuid.UUID) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.region))
        .execution_options(populate_existing=True)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def _resolve_region(
    db: AsyncSession,
    admin: Profile,
    requested: Optional[uuid.UUID],
    fallback: Optional[uuid.UUID] = None,
) -> uuid.UUID:
    """Regional admins are pinned to their own region; super admins choose."""
    if not admin.is_super_admin:
        if admin.region_id is None:
            raise HTTPException(status_code=403, detail="Admin has no region")
        return admin.region_id

    region_id = requested or fallback
    if region_id is None:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if await db.get(Region, region_id) is None:
        raise HTTPException(status_code=400, detail="Region not found")
    return region_id


async def _ensure_unique_sku(
    db: AsyncSession,
    sku: str,
    region_id: uuid.UUID,
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    query = select(Product.id).where(Product.sku == sku, Product.region_id == region_id)
    if exclude_id:
        query = query.where(Product.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=400, detail="SKU already exists in this region")


def _check_order_limits(product: Product) -> None:
    if product.min_order_quantity > product.max_order_quantity:
        raise HTTPException(
            status_code=400,
            detail="min_order_quantity cannot exceed max_order_quantity",
        )


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List products in the admin's region (all regions for super admins)."""
    query = select(Product).options(selectinload(Product.region))
    if category:
        query = query.where(Product.category == category)
    if is_active is not None:
        query = query.where(Product.is_active.is_(is_active))
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))

    query = scope_to_region(query, Product.region_id, admin)
    result = await db.execute(query.order_by(Product.created_at.desc()))
    return ProductListResponse(products=result.scalars().all())


@router.post("", response_model=ProductMutationResponse, status_code=201)
async def create_product(
    product_in: ProductCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a product. SKUs are unique within a region."""
    region_id = await _resolve_region(db, admin, product_in.region_id)
    await _ensure_unique_sku(db, product_in.sku, region_id)

    data = product_in.model_dump(exclude={"region_id"})
    if data["mrp"] is None:
        data["mrp"] = product_in.price
    product = Product(**data, region_id=region_id)
    _check_order_limits(product)

    db.add(product)
    await db.commit()

    logger.info(
        "Admin %s created product %s (%s) in region %s",
        admin.id,
        product.id,
        product.sku,
        region_id,
    )
    return ProductMutationResponse(product=await _get_product_or_404(db, product.id))


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: uuid.UUID,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Get a product from the admin's region."""
    product = await _get_product_or_404(db, product_id)
    ensure_region_access(admin, product.region_id)
    return product


@router.put("/{product_id}", response_model=ProductMutationResponse)
async def replace_product(
    product_id: uuid.UUID,
    product_in: ProductCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Replace every editable field of a product."""
    product = await _get_product_or_404(db, product_id)
    ensure_region_access(admin, product.region_id)

    region_id = await _resolve_region(
        db, admin, product_in.region_id, fallback=product.region_id
    )
    await _ensure_unique_sku(db, product_in.sku, region_id, exclude_id=product.id)

    for field, value in product_in.model_dump(exclude={"region_id"}).items():
        setattr(product, field, value)
    product.region_id = region_id
    _check_order_limits(product)
    await db.commit()

    logger.info("Admin %s replaced product %s", admin.id, product.id)
    return ProductMutationResponse(product=await _get_product_or_404(db, product.id))


@router.patch("/{product_id}", response_model=ProductMutationResponse)
async def update_product(
    product_id: uuid.UUID,
    product_in: ProductUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Partially update a product, e.g. toggle ``is_active`` or adjust stock."""
    product = await _get_product_or_404(db, product_id)
    ensure_region_access(admin, product.region_id)

    changes = product_in.model_dump(exclude_unset=True)
    if "region_id" in changes:
        requested = changes.pop("region_id")
        if requested and requested != product.region_id:
            product.region_id = await _resolve_region(db, admin, requested)

    for field, value in changes.items():
        if value is None and field not in ("description", "mrp", "image_url"):
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
        setattr(product, field, value)

    if "sku" in changes or "region_id" in product_in.model_fields_set:
        await _ensure_unique_sku(db, product.sku, product.region_id, exclude_id=product.id)
    _check_order_limits(product)
    await db.commit()

    logger.info(
        "Admin %s updated product %s fields=%s", admin.id, product.id, sorted(changes)
    )
    return ProductMutationResponse(product=await _get_product_or_404(db, product.id))


@router.delete("/{product_id}")
async def delete_product(
    product_id: uuid.UUID,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a product once none of its orders are still open.

    Historical order lines keep the product's name and image and lose the
    product link.
    """
    product = await _get_product_or_404(db, product_id)
    ensure_region_access(admin, product.region_id)

    open_orders = await db.scalar(
        select(func.count(func.distinct(Order.id)))
        .select_from(OrderItem)
        .join(Order, Order.id == OrderItem.order_id)
        .where(
            OrderItem.product_id == product.id,
            Order.status.not_in(list(TERMINAL_STATUSES)),
        )
    )
    if open_orders:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Cannot delete product. It has {open_orders} pending order(s). "
                "Wait until all orders are delivered or deactivate it instead."
            ),
        )

    await db.execute(
        update(OrderItem)
        .where(OrderItem.product_id == product.id)
        .values(
            product_id=None,
            product_name=product.name,
            product_image=product.image_url,
        )
        .execution_options(synchronize_session=False)
    )
    await db.delete(product)
    await db.commit()

    logger.info("Admin %s deleted product %s (%s)", admin.id, product.id, product.sku)
    return {"success": True}
