"""Marketplace service models package."""

from services.marketplace_service.models.accounts import (
    DeliveryAgent,
    Profile,
    Region,
    SavedAddress,
)
from services.marketplace_service.models.catalog import Product
from services.marketplace_service.models.commerce import Order, OrderItem
from services.marketplace_service.models.enums import (
    AdminRole,
    AgentStatus,
    BusinessType,
    KYCStatus,
    OrderStatus,
    PaymentStatus,
    UserRole,
)

__all__ = [
    "AdminRole",
    "AgentStatus",
    "BusinessType",
    "DeliveryAgent",
    "KYCStatus",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Product",
    "Profile",
    "Region",
    "SavedAddress",
    "UserRole",
]
