"""Marketplace service routers package."""

from services.marketplace_service.routers.addresses import router as addresses_router
from services.marketplace_service.routers.admin_kyc import router as admin_kyc_router
from services.marketplace_service.routers.admin_orders import (
    router as admin_orders_router,
)
from services.marketplace_service.routers.admin_products import (
    router as admin_products_router,
)
from services.marketplace_service.routers.admin_users import (
    router as admin_users_router,
)
from services.marketplace_service.routers.logistics import router as logistics_router
from services.marketplace_service.routers.orders import router as orders_router
from services.marketplace_service.routers.products import router as products_router
from services.marketplace_service.routers.profile import router as profile_router
from services.marketplace_service.routers.regions import router as regions_router

__all__ = [
    "addresses_router",
    "admin_kyc_router",
    "admin_orders_router",
    "admin_products_router",
    "admin_users_router",
    "logistics_router",
    "orders_router",
    "products_router",
    "profile_router",
    "regions_router",
]
