"""Catalog models: region-scoped products."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Product(Base):
    """
    A catalog item sold in one region.

    ``price`` is quoted per ``price_per_quantity`` units (bulk pricing), so
    the effective unit price is ``price / price_per_quantity``.
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    price_per_quantity: Mapped[int] = mapped_column(
        Integer, default=1, server_default="1", nullable=False
    )
    mrp: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    stock_quantity: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    unit: Mapped[str] = mapped_column(String(30), default="piece", server_default="piece")
    min_order_quantity: Mapped[int] = mapped_column(
        Integer, default=1, server_default="1"
    )
    max_order_quantity: Mapped[int] = mapped_column(
        Integer, default=100, server_default="100"
    )
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    region_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("regions.id"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        UniqueConstraint("region_id", "sku", name="unique_region_sku"),
        CheckConstraint("price >= 0", name="product_non_negative_price"),
        CheckConstraint("price_per_quantity > 0", name="product_positive_price_per_qty"),
    )

    region = relationship("Region")

    def __repr__(self):
        return f"<Product {self.sku} region={self.region_id}>"
