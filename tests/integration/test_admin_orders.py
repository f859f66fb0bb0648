"""Integration tests for admin order management."""

import uuid

import pytest
from services.marketplace_service.models import OrderStatus, PaymentStatus
from tests.factories import OrderFactory, ProfileFactory


async def _order(db, customer, **overrides):
    order = OrderFactory.create(customer.id, customer.region_id, **overrides)
    db.add(order)
    await db.commit()
    return order


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_regional_admin_sees_only_own_region(
    client, db_session, login_as, other_region, customer, regional_admin
):
    outsider = ProfileFactory.customer(region_id=other_region.id)
    db_session.add(outsider)
    await db_session.commit()
    local = await _order(db_session, customer)
    await _order(db_session, outsider)
    login_as(regional_admin)

    response = await client.get("/api/admin/orders")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["orders"][0]["id"] == str(local.id)
    assert data["orders"][0]["user"]["business_name"] == "Sharma General Store"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_super_admin_sees_every_region(
    client, db_session, login_as, other_region, customer, super_admin
):
    outsider = ProfileFactory.customer(region_id=other_region.id)
    db_session.add(outsider)
    await db_session.commit()
    await _order(db_session, customer)
    await _order(db_session, outsider)
    login_as(super_admin)

    response = await client.get("/api/admin/orders")

    assert response.json()["total"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_filters_and_pagination(
    client, db_session, login_as, customer, courier, regional_admin
):
    await _order(db_session, customer)
    await _order(db_session, customer)
    await _order(
        db_session,
        customer,
        status=OrderStatus.PROCESSING,
        assigned_to=courier.id,
    )
    login_as(regional_admin)

    unassigned = await client.get("/api/admin/orders?unassigned=true")
    by_partner = await client.get(f"/api/admin/orders?assigned_to={courier.id}")
    processing = await client.get("/api/admin/orders?status=processing")
    page = await client.get("/api/admin/orders?limit=1&offset=1")

    assert unassigned.json()["total"] == 2
    assert by_partner.json()["total"] == 1
    assert processing.json()["total"] == 1
    assert len(page.json()["orders"]) == 1
    assert page.json()["total"] == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customer_cannot_list_admin_orders(client, login_as, customer):
    login_as(customer)

    response = await client.get("/api/admin/orders")

    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_assign_alone_keeps_status(
    client, db_session, login_as, customer, courier, regional_admin
):
    order = await _order(db_session, customer, status=OrderStatus.PENDING)
    order_id = order.id
    login_as(regional_admin)

    response = await client.patch(
        f"/api/admin/orders/{order_id}", json={"assigned_to": str(courier.id)}
    )

    assert response.status_code == 200, response.text
    data = response.json()["order"]
    assert data["status"] == "pending"
    assert data["assigned_to"] == str(courier.id)
    assert data["assigned_at"] is not None

    # Assignment does not take away the customer's cancellation window
    login_as(customer)
    cancel = await client.patch(f"/api/orders/{order_id}/cancel")

    assert cancel.status_code == 200, cancel.text
    assert cancel.json()["status"] == "cancelled"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_assign_with_status_moves_order_to_processing(
    client, db_session, login_as, customer, courier, regional_admin
):
    order = await _order(db_session, customer, status=OrderStatus.CONFIRMED)
    login_as(regional_admin)

    response = await client.patch(
        f"/api/admin/orders/{order.id}",
        json={"assigned_to": str(courier.id), "status": "processing"},
    )

    assert response.status_code == 200, response.text
    data = response.json()["order"]
    assert data["status"] == "processing"
    assert data["assigned_to"] == str(courier.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unassign_keeps_status_unless_one_is_sent(
    client, db_session, login_as, customer, courier, regional_admin
):
    kept = await _order(
        db_session, customer, status=OrderStatus.PROCESSING, assigned_to=courier.id
    )
    reverted = await _order(
        db_session, customer, status=OrderStatus.PROCESSING, assigned_to=courier.id
    )
    login_as(regional_admin)

    unassigned = await client.patch(
        f"/api/admin/orders/{kept.id}", json={"assigned_to": None}
    )
    sent_back = await client.patch(
        f"/api/admin/orders/{reverted.id}",
        json={"assigned_to": None, "status": "confirmed"},
    )

    assert unassigned.json()["order"]["status"] == "processing"
    assert unassigned.json()["order"]["assigned_to"] is None
    assert sent_back.json()["order"]["status"] == "confirmed"
    assert sent_back.json()["order"]["assigned_to"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_status_only_update_keeps_assignment(
    client, db_session, login_as, customer, courier, regional_admin
):
    order = await _order(
        db_session, customer, status=OrderStatus.PROCESSING, assigned_to=courier.id
    )
    login_as(regional_admin)

    response = await client.patch(
        f"/api/admin/orders/{order.id}",
        json={"status": "delivered", "payment_status": "paid"},
    )

    data = response.json()["order"]
    assert data["status"] == "delivered"
    assert data["payment_status"] == "paid"
    assert data["assigned_to"] == str(courier.id)
    assert data["delivered_at"] is not None
    assert order.payment_status == PaymentStatus.PAID


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_can_override_any_status(
    client, db_session, login_as, customer, regional_admin
):
    order = await _order(db_session, customer, status=OrderStatus.DELIVERED)
    login_as(regional_admin)

    response = await client.patch(
        f"/api/admin/orders/{order.id}", json={"status": "refunded"}
    )

    assert response.status_code == 200
    assert response.json()["order"]["status"] == "refunded"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_assignee_must_be_logistics(
    client, db_session, login_as, customer, regional_admin
):
    order = await _order(db_session, customer)
    login_as(regional_admin)

    response = await client.patch(
        f"/api/admin/orders/{order.id}", json={"assigned_to": str(customer.id)}
    )
    missing = await client.patch(
        f"/api/admin/orders/{order.id}", json={"assigned_to": str(uuid.uuid4())}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Assignee must be a logistics partner"
    assert missing.status_code == 400
    assert order.assigned_to is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_regional_admin_cannot_touch_other_region(
    client, db_session, login_as, other_region, regional_admin
):
    outsider = ProfileFactory.customer(region_id=other_region.id)
    db_session.add(outsider)
    await db_session.commit()
    order = await _order(db_session, outsider)
    login_as(regional_admin)

    detail = await client.get(f"/api/admin/orders/{order.id}")
    update = await client.patch(
        f"/api/admin/orders/{order.id}", json={"status": "cancelled"}
    )

    assert detail.status_code == 403
    assert update.status_code == 403
    assert order.status == OrderStatus.PENDING


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_status_value(client, db_session, login_as, customer, regional_admin):
    order = await _order(db_session, customer)
    login_as(regional_admin)

    response = await client.patch(
        f"/api/admin/orders/{order.id}", json={"status": "teleported"}
    )

    assert response.status_code == 400
