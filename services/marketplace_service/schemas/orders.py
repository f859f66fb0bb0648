"""Schemas for checkout, order views, status changes and invoices."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.marketplace_service.models import OrderStatus, PaymentStatus
from services.marketplace_service.schemas.accounts import RegionSummary

# ============================================================================
# CHECKOUT SCHEMAS
# ============================================================================


class CartItemIn(BaseModel):
    """Cart line as priced by the client at checkout time."""

    product_id: uuid.UUID
    quantity: int = Field(1, ge=1)
    price: Decimal = Field(Decimal("0"), ge=0)
    price_per_quantity: int = Field(1, ge=1)
    unit: str = Field("piece", max_length=30)
    name: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = None


class OrderCreate(BaseModel):
    """
    Checkout payload.

    Delivery fields are optional here so that missing ones are reported as
    a single "Missing delivery information" error by the endpoint.
    """

    items: list[CartItemIn] = Field(default_factory=list)
    delivery_address: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_pincode: Optional[str] = None
    delivery_phone: Optional[str] = None
    delivery_lat: Optional[float] = Field(None, ge=-90, le=90)
    delivery_lng: Optional[float] = Field(None, ge=-180, le=180)
    location_accuracy: Optional[float] = Field(None, ge=0)
    payment_method: str = Field("cod", max_length=30)
    notes: Optional[str] = None
    # Client-side subtotal; the server recomputes and logs a mismatch
    total_amount: Optional[Decimal] = Field(None, ge=0)


class OrderSummary(BaseModel):
    id: uuid.UUID
    order_number: str
    total_amount: Decimal
    status: OrderStatus


class OrderCreatedResponse(BaseModel):
    success: bool = True
    order: OrderSummary


# ============================================================================
# ORDER VIEW SCHEMAS
# ============================================================================


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    product_name: Optional[str] = None
    product_image: Optional[str] = None
    quantity: int
    price: Decimal
    price_per_quantity: int
    unit: str
    total: Decimal


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    business_name: Optional[str] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID
    region_id: Optional[uuid.UUID] = None
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: str
    subtotal: Decimal
    total_amount: Decimal
    delivery_address: str
    delivery_city: str
    delivery_state: Optional[str] = None
    delivery_pincode: str
    delivery_phone: str
    delivery_lat: Optional[float] = None
    delivery_lng: Optional[float] = None
    location_accuracy: Optional[float] = None
    location_verified: bool
    notes: Optional[str] = None
    assigned_to: Optional[uuid.UUID] = None
    assigned_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = []


class OrderDetailResponse(OrderResponse):
    """Order with the customer and region joined in (admin/logistics views)."""

    user: Optional[CustomerSummary] = None
    region: Optional[RegionSummary] = None


class OrderListResponse(BaseModel):
    orders: list[OrderDetailResponse]
    total: int


# ============================================================================
# STATUS CHANGE SCHEMAS
# ============================================================================


class LogisticsStatusUpdate(BaseModel):
    status: OrderStatus


class AdminOrderUpdate(BaseModel):
    """Every field optional; an explicit ``assigned_to: null`` unassigns."""

    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    assigned_to: Optional[uuid.UUID] = None


class StatusChangeResponse(BaseModel):
    success: bool = True
    status: OrderStatus


class OrderMutationResponse(BaseModel):
    success: bool = True
    order: OrderResponse


# ============================================================================
# INVOICE SCHEMAS
# ============================================================================


class InvoiceCustomer(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    business_name: Optional[str] = None
    gstin: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None


class InvoiceRegion(BaseModel):
    name: str
    code: str
    support_email: Optional[str] = None
    support_phone: Optional[str] = None


class InvoiceItem(BaseModel):
    id: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    name: str
    sku: str
    image_url: Optional[str] = None
    quantity: int
    price: Decimal
    price_per_quantity: int
    unit: str
    total: Decimal


class InvoiceResponse(BaseModel):
    id: uuid.UUID
    order_number: str
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: str
    subtotal: Decimal
    total_amount: Decimal
    delivery_address: str
    delivery_city: str
    delivery_state: Optional[str] = None
    delivery_pincode: str
    delivery_phone: str
    notes: Optional[str] = None
    created_at: datetime
    delivered_at: Optional[datetime] = None
    user: InvoiceCustomer
    region: Optional[InvoiceRegion] = None
    order_items: list[InvoiceItem]
