"""Integration tests for the logistics partner endpoints."""

import uuid

import pytest
from services.marketplace_service.models import OrderStatus
from tests.factories import OrderFactory, ProfileFactory


async def _assigned_order(db, customer, courier, status=OrderStatus.PROCESSING):
    order = OrderFactory.create(
        customer.id, customer.region_id, status=status, assigned_to=courier.id
    )
    db.add(order)
    await db.commit()
    return order


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_active_and_completed_orders(
    client, db_session, login_as, customer, courier
):
    active = await _assigned_order(db_session, customer, courier)
    done = await _assigned_order(
        db_session, customer, courier, status=OrderStatus.DELIVERED
    )
    await _assigned_order(db_session, customer, courier, status=OrderStatus.CANCELLED)
    login_as(courier)

    active_resp = await client.get("/api/logistics/orders")
    completed_resp = await client.get("/api/logistics/orders?scope=completed")
    all_resp = await client.get("/api/logistics/orders?scope=all")

    assert [o["id"] for o in active_resp.json()["orders"]] == [str(active.id)]
    assert [o["id"] for o in completed_resp.json()["orders"]] == [str(done.id)]
    assert all_resp.json()["total"] == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_ship_then_deliver(client, db_session, login_as, customer, courier):
    order = await _assigned_order(db_session, customer, courier)
    login_as(courier)

    shipped = await client.patch(
        f"/api/logistics/orders/{order.id}", json={"status": "shipped"}
    )
    delivered = await client.patch(
        f"/api/logistics/orders/{order.id}", json={"status": "delivered"}
    )

    assert shipped.status_code == 200, shipped.text
    assert shipped.json() == {"success": True, "status": "shipped"}
    assert delivered.json() == {"success": True, "status": "delivered"}
    assert order.delivered_at is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cannot_skip_shipping(client, db_session, login_as, customer, courier):
    order = await _assigned_order(db_session, customer, courier)
    login_as(courier)

    response = await client.patch(
        f"/api/logistics/orders/{order.id}", json={"status": "delivered"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == (
        "Cannot transition from processing to delivered"
    )
    assert order.status == OrderStatus.PROCESSING


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cannot_update_delivered_order(
    client, db_session, login_as, customer, courier
):
    order = await _assigned_order(
        db_session, customer, courier, status=OrderStatus.DELIVERED
    )
    login_as(courier)

    response = await client.patch(
        f"/api/logistics/orders/{order.id}", json={"status": "shipped"}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_order_assigned_to_someone_else(
    client, db_session, login_as, region, customer, courier
):
    other = ProfileFactory.logistics(region_id=region.id)
    db_session.add(other)
    await db_session.commit()
    order = await _assigned_order(db_session, customer, other)
    login_as(courier)

    response = await client.patch(
        f"/api/logistics/orders/{order.id}", json={"status": "shipped"}
    )
    detail = await client.get(f"/api/logistics/orders/{order.id}")

    assert response.status_code == 403
    assert response.json()["detail"] == "Order not assigned to you"
    assert detail.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_missing_order(client, login_as, courier):
    login_as(courier)

    response = await client.patch(
        f"/api/logistics/orders/{uuid.uuid4()}", json={"status": "shipped"}
    )

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customers_cannot_use_logistics_routes(client, login_as, customer):
    login_as(customer)

    response = await client.get("/api/logistics/orders")

    assert response.status_code == 403
