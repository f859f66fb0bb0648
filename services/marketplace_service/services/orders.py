"""Order services: checkout, line pricing and invoice assembly."""

import random
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.marketplace_service.models import (
    KYCStatus,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
    Profile,
    Region,
)
from services.marketplace_service.schemas.orders import (
    InvoiceCustomer,
    InvoiceItem,
    InvoiceRegion,
    InvoiceResponse,
    OrderCreate,
)
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

CENT = Decimal("0.01")
ORDER_NUMBER_ATTEMPTS = 5
REQUIRED_DELIVERY_FIELDS = (
    "delivery_address",
    "delivery_city",
    "delivery_pincode",
    "delivery_phone",
)


# ---------------------------------------------------------------------------
# Pricing and numbering
# ---------------------------------------------------------------------------


def generate_order_number(
    now: Optional[datetime] = None, rng: Optional[random.Random] = None
) -> str:
    """Return ``ORD{yy}{mm}{dd}{nnnn}`` with a zero-padded random suffix."""
    now = now or utc_now()
    rng = rng or random
    return f"ORD{now:%y%m%d}{rng.randrange(10000):04d}"


def compute_item_total(
    price: Decimal,
    price_per_quantity: Optional[int] = 1,
    quantity: Optional[int] = 1,
) -> Decimal:
    """Line total for bulk-unit pricing: ``(price / price_per_quantity) * quantity``.

    ``price`` is the price of one pack of ``price_per_quantity`` units, so
    a 120.00 price per 12 pieces ordered 6 times is 60.00.
    """
    price = Decimal(price or 0)
    per = price_per_quantity or 1
    qty = quantity or 1
    return (price / Decimal(per) * qty).quantize(CENT, rounding=ROUND_HALF_UP)


async def _unique_order_number(db: AsyncSession) -> str:
    for _ in range(ORDER_NUMBER_ATTEMPTS):
        candidate = generate_order_number()
        result = await db.execute(
            select(Order.id).where(Order.order_number == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Could not allocate an order number, please retry",
    )


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


async def create_order(
    db: AsyncSession, *, profile: Profile, order_in: OrderCreate
) -> Order:
    """Create an order header and its line items in a single transaction.

    Raises 403 when the customer's KYC is not approved, and 400 for an
    empty cart, missing delivery details or unknown products.
    """
    profile_id = profile.id
    if profile.kyc_status != KYCStatus.APPROVED:
        logger.info(
            "Order rejected for %s: KYC status is %s", profile.id, profile.kyc_status
        )
        raise HTTPException(status_code=403, detail="KYC not approved")

    if not order_in.items:
        raise HTTPException(status_code=400, detail="No items in order")

    if any(not getattr(order_in, field) for field in REQUIRED_DELIVERY_FIELDS):
        raise HTTPException(status_code=400, detail="Missing delivery information")

    product_ids = {item.product_id for item in order_in.items}
    result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    products = {product.id: product for product in result.scalars().all()}
    missing = product_ids - products.keys()
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown product: {sorted(str(pid) for pid in missing)[0]}",
        )

    items = []
    for cart_item in order_in.items:
        product = products[cart_item.product_id]
        items.append(
            OrderItem(
                product_id=product.id,
                product_name=product.name or cart_item.name,
                product_image=product.image_url or cart_item.image_url,
                quantity=cart_item.quantity,
                price=cart_item.price,
                price_per_quantity=cart_item.price_per_quantity,
                unit=cart_item.unit or "piece",
                total=compute_item_total(
                    cart_item.price, cart_item.price_per_quantity, cart_item.quantity
                ),
            )
        )

    subtotal = sum((item.total for item in items), Decimal("0.00"))
    if order_in.total_amount is not None and order_in.total_amount != subtotal:
        logger.warning(
            "Client total %s differs from computed subtotal %s for %s",
            order_in.total_amount,
            subtotal,
            profile_id,
        )

    order = Order(
        order_number=await _unique_order_number(db),
        user_id=profile.id,
        region_id=profile.region_id,
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        payment_method=order_in.payment_method or "cod",
        subtotal=subtotal,
        total_amount=subtotal,
        delivery_address=order_in.delivery_address,
        delivery_city=order_in.delivery_city,
        delivery_state=order_in.delivery_state,
        delivery_pincode=order_in.delivery_pincode,
        delivery_phone=order_in.delivery_phone,
        delivery_lat=order_in.delivery_lat,
        delivery_lng=order_in.delivery_lng,
        location_accuracy=order_in.location_accuracy,
        location_verified=order_in.delivery_lat is not None,
        notes=order_in.notes,
        items=items,
    )
    db.add(order)

    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Order creation failed for %s", profile_id)
        raise

    logger.info(
        "Created order %s for %s (%d items, total=%s)",
        order.order_number,
        profile_id,
        len(items),
        order.total_amount,
    )
    return order


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------


def can_view_invoice(profile: Profile, order: Order) -> bool:
    """Admins of the order's region, its logistics partner and its owner."""
    if profile.is_admin:
        return profile.can_access_region(order.region_id)
    if profile.is_logistics and order.assigned_to == profile.id:
        return True
    return order.user_id == profile.id


async def get_order_for_invoice(db: AsyncSession, order_id: uuid.UUID) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.user),
            selectinload(Order.region),
        )
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def build_invoice(order: Order) -> InvoiceResponse:
    """Assemble the invoice document for an order loaded by ``get_order_for_invoice``.

    Line names come from the live product when it still exists, then the
    checkout snapshot, then a generic "Product"; a deleted product's SKU
    renders as "N/A".
    """
    customer: Optional[Profile] = order.user
    if customer is not None:
        user = InvoiceCustomer(
            full_name=customer.full_name,
            email=customer.email,
            phone=customer.phone,
            business_name=customer.business_name,
            gstin=customer.gstin,
            address_line1=customer.address_line1,
            address_line2=customer.address_line2,
            city=customer.city,
            state=customer.state,
            postal_code=customer.postal_code,
        )
    else:
        user = InvoiceCustomer(
            full_name="Customer", email="", phone=order.delivery_phone or ""
        )

    region: Optional[Region] = order.region
    invoice_region = None
    if region is not None:
        invoice_region = InvoiceRegion(
            name=region.name,
            code=region.code,
            support_email=region.support_email,
            support_phone=region.support_phone,
        )

    lines = []
    for item in order.items:
        product: Optional[Product] = item.product
        lines.append(
            InvoiceItem(
                id=item.id,
                product_id=item.product_id,
                name=(product.name if product else None)
                or item.product_name
                or "Product",
                sku=(product.sku if product else None) or "N/A",
                image_url=(product.image_url if product else None)
                or item.product_image,
                quantity=item.quantity,
                price=item.price,
                price_per_quantity=item.price_per_quantity,
                unit=item.unit,
                total=item.total,
            )
        )

    return InvoiceResponse(
        id=order.id,
        order_number=order.order_number,
        status=order.status,
        payment_status=order.payment_status,
        payment_method=order.payment_method,
        subtotal=order.subtotal,
        total_amount=order.total_amount,
        delivery_address=order.delivery_address,
        delivery_city=order.delivery_city,
        delivery_state=order.delivery_state,
        delivery_pincode=order.delivery_pincode,
        delivery_phone=order.delivery_phone,
        notes=order.notes,
        created_at=order.created_at,
        delivered_at=order.delivered_at,
        user=user,
        region=invoice_region,
        order_items=lines,
    )
