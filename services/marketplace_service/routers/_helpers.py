"""Shared order loaders for the customer, logistics and admin routers."""

import uuid
from typing import Optional

from fastapi import HTTPException
from services.marketplace_service.models import Order
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


def order_detail_query() -> Select:
    """Orders with items, customer and region eagerly loaded."""
    return select(Order).options(
        selectinload(Order.items),
        selectinload(Order.user),
        selectinload(Order.region),
    )


async def get_order_or_404(
    db: AsyncSession, order_id: uuid.UUID, *criteria
) -> Order:
    result = await db.execute(
        order_detail_query().where(Order.id == order_id, *criteria)
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def paginate(query: Select, limit: Optional[int], offset: int) -> Select:
    query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query
