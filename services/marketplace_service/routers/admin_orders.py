"""Admin order management: region-scoped listing, status override and assignment."""

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
    OrderStatus,
    Profile,
    UserRole,
)
from services.marketplace_service.routers._helpers import (
    get_order_or_404,
    order_detail_query,
    paginate,
)
from services.marketplace_service.schemas import (
    AdminOrderUpdate,
    OrderDetailResponse,
    OrderListResponse,
    OrderMutationResponse,
)
from services.marketplace_service.services.order_lifecycle import (
    Actor,
    state_machine,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/orders", tags=["admin-orders"])
logger = get_logger(__name__)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[OrderStatus] = Query(None),
    assigned_to: Optional[uuid.UUID] = Query(None),
    unassigned: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List orders in the admin's region (every region for super admins)."""
    filters = []
    if status:
        filters.append(Order.status == status)
    if assigned_to:
        filters.append(Order.assigned_to == assigned_to)
    if unassigned:
        filters.append(Order.assigned_to.is_(None))

    query = scope_to_region(
        order_detail_query().where(*filters), Order.region_id, admin
    )
    result = await db.execute(
        paginate(query.order_by(Order.created_at.desc()), limit, offset)
    )
    orders = result.scalars().all()

    count_query = scope_to_region(
        select(func.count()).select_from(Order).where(*filters),
        Order.region_id,
        admin,
    )
    total = await db.scalar(count_query)
    return OrderListResponse(orders=orders, total=total or 0)


@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(
    order_id: uuid.UUID,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Get any order in the admin's region."""
    order = await get_order_or_404(db, order_id)
    ensure_region_access(admin, order.region_id)
    return order


@router.patch("/{order_id}", response_model=OrderMutationResponse)
async def update_order(
    order_id: uuid.UUID,
    order_in: AdminOrderUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Override status, payment status and delivery assignment.

    Send ``assigned_to: null`` to unassign. A status in the same request is
    applied after the assignment, so it always wins.
    """
    order = await get_order_or_404(db, order_id)
    ensure_region_access(admin, order.region_id)

    if "assigned_to" in order_in.model_fields_set:
        if order_in.assigned_to is not None:
            assignee = await db.get(Profile, order_in.assigned_to)
            if assignee is None or assignee.role != UserRole.LOGISTICS:
                raise HTTPException(
                    status_code=400, detail="Assignee must be a logistics partner"
                )
        state_machine.assign(order, order_in.assigned_to)

    if order_in.status is not None:
        state_machine.apply(order, order_in.status, Actor.ADMIN)

    if order_in.payment_status is not None:
        order.payment_status = order_in.payment_status

    await db.commit()

    logger.info(
        "Admin %s updated order %s (status=%s, payment=%s, assigned_to=%s)",
        admin.id,
        order.order_number,
        order.status.value,
        order.payment_status.value,
        order.assigned_to,
    )
    return OrderMutationResponse(order=order)
