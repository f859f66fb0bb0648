"""Customer orders router: checkout, order history, cancellation and invoices."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.pdf import generate_invoice_pdf
from libs.common.rate_limit import order_create_limit
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import (
    get_current_profile,
    require_kyc_approved,
)
from services.marketplace_service.models import Order, OrderStatus, Profile
from services.marketplace_service.routers._helpers import (
    get_order_or_404,
    order_detail_query,
)
from services.marketplace_service.schemas import (
    InvoiceResponse,
    OrderCreate,
    OrderCreatedResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderSummary,
    StatusChangeResponse,
)
from services.marketplace_service.services.order_lifecycle import (
    Actor,
    InvalidTransitionError,
    state_machine,
)
from services.marketplace_service.services.orders import (
    build_invoice,
    can_view_invoice,
    create_order,
    get_order_for_invoice,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["orders"])
logger = get_logger(__name__)


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("", response_model=OrderCreatedResponse)
@order_create_limit
async def place_order(
    request: Request,
    order_in: OrderCreate,
    profile: Profile = Depends(require_kyc_approved),
    db: AsyncSession = Depends(get_async_db),
):
    """Place an order from the caller's cart."""
    order = await create_order(db, profile=profile, order_in=order_in)
    return OrderCreatedResponse(
        order=OrderSummary(
            id=order.id,
            order_number=order.order_number,
            total_amount=order.total_amount,
            status=order.status,
        )
    )


# ============================================================================
# ORDER HISTORY
# ============================================================================


@router.get("", response_model=OrderListResponse)
async def list_my_orders(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's orders, newest first, with their items."""
    result = await db.execute(
        order_detail_query()
        .where(Order.user_id == profile.id)
        .order_by(Order.created_at.desc())
    )
    orders = result.scalars().all()
    total = await db.scalar(
        select(func.count()).select_from(Order).where(Order.user_id == profile.id)
    )
    return OrderListResponse(orders=orders, total=total or 0)


@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_my_order(
    order_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Get one of the caller's orders."""
    return await get_order_or_404(db, order_id, Order.user_id == profile.id)


@router.patch("/{order_id}/cancel", response_model=StatusChangeResponse)
async def cancel_my_order(
    order_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Cancel an order that has not started processing."""
    order = await get_order_or_404(db, order_id, Order.user_id == profile.id)
    try:
        previous = state_machine.apply(order, OrderStatus.CANCELLED, Actor.CUSTOMER)
    except InvalidTransitionError:
        raise HTTPException(
            status_code=400, detail="Order cannot be cancelled at this stage"
        )
    await db.commit()

    logger.info(
        "Order %s cancelled by customer %s (was %s)",
        order.order_number,
        profile.id,
        previous.value,
    )
    return StatusChangeResponse(status=order.status)


# ============================================================================
# INVOICES
# ============================================================================


async def _load_invoice(
    db: AsyncSession, profile: Profile, order_id: uuid.UUID
) -> InvoiceResponse:
    order = await get_order_for_invoice(db, order_id)
    if not can_view_invoice(profile, order):
        raise HTTPException(status_code=403, detail="Forbidden")
    return build_invoice(order)


@router.get("/{order_id}/invoice", response_model=InvoiceResponse)
async def get_invoice(
    order_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Invoice document for the owner, the assigned partner or an admin."""
    return await _load_invoice(db, profile, order_id)


@router.get("/{order_id}/invoice.pdf")
async def download_invoice_pdf(
    order_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_async_db),
):
    """Same invoice rendered as a PDF download."""
    invoice = await _load_invoice(db, profile, order_id)
    pdf_bytes = generate_invoice_pdf(
        invoice.model_dump(), company_name=get_settings().INVOICE_COMPANY_NAME
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": (
                f'attachment; filename="invoice-{invoice.order_number}.pdf"'
            )
        },
    )
