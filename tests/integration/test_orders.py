"""Integration tests for customer checkout, order history and cancellation."""

import uuid
from decimal import Decimal

import pytest
from services.marketplace_service.models import (
    KYCStatus,
    Order,
    OrderItem,
    OrderStatus,
)
from sqlalchemy import func, select
from tests.factories import OrderFactory, OrderItemFactory, ProductFactory, ProfileFactory

DELIVERY = {
    "delivery_address": "12 Market Road",
    "delivery_city": "Pune",
    "delivery_state": "Maharashtra",
    "delivery_pincode": "411001",
    "delivery_phone": "+91 98765 43210",
}


async def _product(db, region, **overrides):
    product = ProductFactory.create(region.id, **overrides)
    db.add(product)
    await db.commit()
    return product


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order(client, db_session, login_as, region, customer):
    """POST /api/orders: creates the order and returns its summary."""
    product = await _product(
        db_session, region, price=Decimal("120.00"), price_per_quantity=12
    )
    login_as(customer)

    response = await client.post(
        "/api/orders",
        json={
            "items": [
                {
                    "product_id": str(product.id),
                    "quantity": 6,
                    "price": "120.00",
                    "price_per_quantity": 12,
                    "unit": "kg",
                }
            ],
            "total_amount": "60.00",
            "delivery_lat": 18.5204,
            "delivery_lng": 73.8567,
            "location_accuracy": 12.5,
            **DELIVERY,
        },
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    assert data["order"]["order_number"].startswith("ORD")
    assert len(data["order"]["order_number"]) == 13
    assert Decimal(data["order"]["total_amount"]) == Decimal("60.00")
    assert data["order"]["status"] == "pending"

    order = await db_session.get(Order, uuid.UUID(data["order"]["id"]))
    assert order.location_verified is True
    assert order.region_id == region.id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order_requires_kyc(client, db_session, login_as, region):
    """POST /api/orders: 403 until KYC is approved."""
    pending = ProfileFactory.customer(region_id=region.id, kyc_status=KYCStatus.PENDING)
    db_session.add(pending)
    await db_session.commit()
    product = await _product(db_session, region)
    login_as(pending)

    response = await client.post(
        "/api/orders",
        json={"items": [{"product_id": str(product.id)}], **DELIVERY},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "KYC not approved"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unverified_customer_is_stopped_before_cart_checks(
    client, db_session, login_as, region
):
    """A rejected customer gets 403 even for a cart that would be a 400."""
    rejected = ProfileFactory.customer(
        region_id=region.id, kyc_status=KYCStatus.REJECTED
    )
    db_session.add(rejected)
    await db_session.commit()
    login_as(rejected)

    response = await client.post("/api/orders", json={"items": [], **DELIVERY})

    assert response.status_code == 403
    assert response.json()["detail"] == "KYC not approved"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order_with_empty_cart(client, login_as, customer):
    login_as(customer)

    response = await client.post("/api/orders", json={"items": [], **DELIVERY})

    assert response.status_code == 400
    assert response.json()["detail"] == "No items in order"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order_without_delivery_details(
    client, db_session, login_as, region, customer
):
    product = await _product(db_session, region)
    login_as(customer)

    response = await client.post(
        "/api/orders",
        json={
            "items": [{"product_id": str(product.id)}],
            "delivery_address": "12 Market Road",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing delivery information"
    assert await db_session.scalar(select(func.count()).select_from(Order)) == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_order_rejects_malformed_body(client, login_as, customer):
    """Schema violations come back as 400 with the validation errors."""
    login_as(customer)

    response = await client.post(
        "/api/orders",
        json={"items": [{"product_id": "not-a-uuid", "quantity": 0}], **DELIVERY},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid request"
    assert body["errors"]


# ---------------------------------------------------------------------------
# Order history
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_my_orders_only_returns_own(
    client, db_session, login_as, region, customer
):
    someone_else = ProfileFactory.customer(region_id=region.id)
    db_session.add(someone_else)
    await db_session.flush()
    mine = OrderFactory.create(customer.id, region.id)
    theirs = OrderFactory.create(someone_else.id, region.id)
    db_session.add_all([mine, theirs])
    await db_session.flush()
    db_session.add(OrderItemFactory.create(mine.id))
    await db_session.commit()
    login_as(customer)

    response = await client.get("/api/orders")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert [o["id"] for o in data["orders"]] == [str(mine.id)]
    assert len(data["orders"][0]["items"]) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_someone_elses_order_is_not_found(
    client, db_session, login_as, region, customer
):
    someone_else = ProfileFactory.customer(region_id=region.id)
    db_session.add(someone_else)
    await db_session.flush()
    theirs = OrderFactory.create(someone_else.id, region.id)
    db_session.add(theirs)
    await db_session.commit()
    login_as(customer)

    response = await client.get(f"/api/orders/{theirs.id}")

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cancel_pending_order(client, db_session, login_as, region, customer):
    order = OrderFactory.create(customer.id, region.id)
    db_session.add(order)
    await db_session.commit()
    login_as(customer)

    response = await client.patch(f"/api/orders/{order.id}/cancel")

    assert response.status_code == 200, response.text
    assert response.json() == {"success": True, "status": "cancelled"}
    assert order.status == OrderStatus.CANCELLED
    assert order.cancelled_at is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cancel_shipped_order_is_refused(
    client, db_session, login_as, region, customer
):
    order = OrderFactory.create(customer.id, region.id, status=OrderStatus.SHIPPED)
    db_session.add(order)
    await db_session.commit()
    login_as(customer)

    response = await client.patch(f"/api/orders/{order.id}/cancel")

    assert response.status_code == 400
    assert response.json()["detail"] == "Order cannot be cancelled at this stage"
    assert order.status == OrderStatus.SHIPPED


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_items_survive_with_snapshot(
    client, db_session, login_as, region, customer
):
    """Line items keep their own copy of the product name."""
    product = await _product(db_session, region, name="Sona Masoori 10kg")
    login_as(customer)

    response = await client.post(
        "/api/orders",
        json={"items": [{"product_id": str(product.id), "price": "650"}], **DELIVERY},
    )
    assert response.status_code == 200, response.text

    item = (await db_session.execute(select(OrderItem))).scalar_one()
    assert item.product_name == "Sona Masoori 10kg"
    assert item.total == Decimal("650.00")
