"""Marketplace service schemas package."""

from services.marketplace_service.schemas.accounts import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    AdminUserCreate,
    CreatedUser,
    CreatedUserResponse,
    KYCDecision,
    KYCQueueItem,
    KYCSubmission,
    LogisticsUserCreate,
    LogisticsUserListResponse,
    LogisticsUserSummary,
    ProfileResponse,
    ProfileUpdate,
    RegionResponse,
    RegionSummary,
    UserListResponse,
)
from services.marketplace_service.schemas.catalog import (
    ProductCreate,
    ProductListResponse,
    ProductMutationResponse,
    ProductResponse,
    ProductUpdate,
)
from services.marketplace_service.schemas.orders import (
    AdminOrderUpdate,
    CartItemIn,
    CustomerSummary,
    InvoiceCustomer,
    InvoiceItem,
    InvoiceRegion,
    InvoiceResponse,
    LogisticsStatusUpdate,
    OrderCreate,
    OrderCreatedResponse,
    OrderDetailResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderMutationResponse,
    OrderResponse,
    OrderSummary,
    StatusChangeResponse,
)

__all__ = [
    "AddressCreate",
    "AddressResponse",
    "AddressUpdate",
    "AdminOrderUpdate",
    "AdminUserCreate",
    "CartItemIn",
    "CreatedUser",
    "CreatedUserResponse",
    "CustomerSummary",
    "InvoiceCustomer",
    "InvoiceItem",
    "InvoiceRegion",
    "InvoiceResponse",
    "KYCDecision",
    "KYCQueueItem",
    "KYCSubmission",
    "LogisticsStatusUpdate",
    "LogisticsUserCreate",
    "LogisticsUserListResponse",
    "LogisticsUserSummary",
    "OrderCreate",
    "OrderCreatedResponse",
    "OrderDetailResponse",
    "OrderItemResponse",
    "OrderListResponse",
    "OrderMutationResponse",
    "OrderResponse",
    "OrderSummary",
    "ProductCreate",
    "ProductListResponse",
    "ProductMutationResponse",
    "ProductResponse",
    "ProductUpdate",
    "ProfileResponse",
    "ProfileUpdate",
    "RegionResponse",
    "RegionSummary",
    "StatusChangeResponse",
    "UserListResponse",
]
