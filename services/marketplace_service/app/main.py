"""FastAPI application for the Marketplace Service."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.marketplace_service.routers import (
    addresses_router,
    admin_kyc_router,
    admin_orders_router,
    admin_products_router,
    admin_users_router,
    logistics_router,
    orders_router,
    products_router,
    profile_router,
    regions_router,
)
from services.marketplace_service.services.order_lifecycle import (
    InvalidTransitionError,
)
from slowapi.errors import RateLimitExceeded

API_PREFIX = "/api"


async def invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the Marketplace Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Dhaara Marketplace Service",
        version="0.1.0",
        description=(
            "Region-scoped B2B delivery marketplace - catalog, checkout, "
            "KYC review, logistics and invoicing."
        ),
    )

    add_observability_middleware(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "marketplace"}

    # Customer routes
    app.include_router(regions_router, prefix=API_PREFIX)
    app.include_router(profile_router, prefix=API_PREFIX)
    app.include_router(products_router, prefix=API_PREFIX)
    app.include_router(addresses_router, prefix=API_PREFIX)
    app.include_router(orders_router, prefix=API_PREFIX)

    # Logistics partner routes
    app.include_router(logistics_router, prefix=API_PREFIX)

    # Admin routes (region-scoped for regional admins)
    app.include_router(admin_orders_router, prefix=API_PREFIX)
    app.include_router(admin_kyc_router, prefix=API_PREFIX)
    app.include_router(admin_products_router, prefix=API_PREFIX)
    app.include_router(admin_users_router, prefix=API_PREFIX)

    return app


app = create_app()
