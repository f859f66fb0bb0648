"""Logistics partner router: assigned deliveries and their status updates."""

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.marketplace_service.dependencies import require_logistics
from services.marketplace_service.models import Order, OrderStatus, Profile
from services.marketplace_service.routers._helpers import (
    get_order_or_404,
    order_detail_query,
)
from services.marketplace_service.schemas import (
    LogisticsStatusUpdate,
    OrderDetailResponse,
    OrderListResponse,
    StatusChangeResponse,
)
from services.marketplace_service.services.order_lifecycle import (
    TERMINAL_STATUSES,
    Actor,
    InvalidTransitionError,
    state_machine,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/logistics", tags=["logistics"])
logger = get_logger(__name__)


@router.get("/orders", response_model=OrderListResponse)
async def list_assigned_orders(
    scope: Literal["active", "completed", "all"] = Query("active"),
    profile: Profile = Depends(require_logistics),
    db: AsyncSession = Depends(get_async_db),
):
    """List orders assigned to the caller.

    ``active`` is everything still to deliver, ``completed`` is delivered
    orders (most recent delivery first).
    """
    query = order_detail_query().where(Order.assigned_to == profile.id)
    if scope == "active":
        query = query.where(Order.status.not_in(list(TERMINAL_STATUSES))).order_by(
            Order.assigned_at.desc()
        )
    elif scope == "completed":
        query = query.where(Order.status == OrderStatus.DELIVERED).order_by(
            Order.delivered_at.desc()
        )
    else:
        query = query.order_by(Order.created_at.desc())

    result = await db.execute(query)
    orders = result.scalars().all()
    return OrderListResponse(orders=orders, total=len(orders))


@router.get("/orders/{order_id}", response_model=OrderDetailResponse)
async def get_assigned_order(
    order_id: uuid.UUID,
    profile: Profile = Depends(require_logistics),
    db: AsyncSession = Depends(get_async_db),
):
    """Get an order assigned to the caller; anything else is not found."""
    return await get_order_or_404(db, order_id, Order.assigned_to == profile.id)


@router.patch("/orders/{order_id}", response_model=StatusChangeResponse)
async def update_delivery_status(
    order_id: uuid.UUID,
    status_in: LogisticsStatusUpdate,
    profile: Profile = Depends(require_logistics),
    db: AsyncSession = Depends(get_async_db),
):
    """Mark an assigned order shipped, then delivered."""
    order = await get_order_or_404(db, order_id)
    if order.assigned_to != profile.id:
        raise HTTPException(status_code=403, detail="Order not assigned to you")

    try:
        previous = state_machine.apply(order, status_in.status, Actor.LOGISTICS)
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    await db.commit()

    logger.info(
        "Order %s moved %s -> %s by logistics partner %s",
        order.order_number,
        previous.value,
        order.status.value,
        profile.id,
    )
    return StatusChangeResponse(status=order.status)
