"""
Tests for admin endpoints: listings, vendor lifecycle, cascading delete and stats.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from marketplace.models import Booking, Product, User, Vendor


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient, customer_headers, vendor_headers):
    for headers in (customer_headers, vendor_headers):
        response = await client.get("/admin/users", headers=headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Admin privileges required."


@pytest.mark.asyncio
async def test_admin_routes_require_auth(client: AsyncClient):
    response = await client.get("/admin/stats")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_users(client: AsyncClient, admin_headers, customer, vendor_user):
    response = await client.get("/admin/users", headers=admin_headers)
    assert response.status_code == 200
    emails = {u["email"] for u in response.json()}
    assert emails == {"admin@example.com", "customer@example.com", "vendor@example.com"}
    assert all("hashed_password" not in u for u in response.json())


@pytest.mark.asyncio
async def test_list_vendors_and_bookings(client: AsyncClient, admin_headers, booking):
    response = await client.get("/admin/vendors", headers=admin_headers)
    assert len(response.json()) == 1

    response = await client.get("/admin/bookings", headers=admin_headers)
    [listed] = response.json()
    assert listed["id"] == booking.id
    assert listed["customer"]["name"] == "Customer One"


@pytest.mark.asyncio
async def test_set_vendor_status(client: AsyncClient, admin_headers, vendor):
    response = await client.put(f"/admin/vendors/{vendor.id}/status", headers=admin_headers, json={"status": "suspended"})
    assert response.status_code == 200
    assert response.json()["vendor"]["status"] == "suspended"


@pytest.mark.asyncio
async def test_set_vendor_status_invalid(client: AsyncClient, admin_headers, vendor):
    response = await client.put(f"/admin/vendors/{vendor.id}/status", headers=admin_headers, json={"status": "banned"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_override_booking_status(client: AsyncClient, admin_headers, booking):
    response = await client.put(f"/admin/bookings/{booking.id}/status", headers=admin_headers, json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


@pytest.mark.asyncio
async def test_admin_can_use_booking_status_endpoint(client: AsyncClient, admin_headers, booking):
    response = await client.put(f"/bookings/{booking.id}/status", headers=admin_headers, json={
        "status": "cancelled", "reason": "Vendor unavailable",
    })
    assert response.status_code == 200
    assert response.json()["cancellation_reason"] == "Vendor unavailable"


@pytest.mark.asyncio
async def test_delete_vendor_cascades(
    client: AsyncClient, db_session, admin_headers, vendor, vendor_user, product, booking, other_vendor
):
    """Products, related bookings and the owning user go; unrelated rows stay."""
    response = await client.delete(f"/admin/vendors/{vendor.id}", headers=admin_headers)
    assert response.status_code == 200
    details = response.json()["details"]
    assert details == {
        "products_deleted": 1,
        "bookings_deleted": 1,
        "user_deleted": True,
        "vendor_deleted": True,
    }

    assert await db_session.get(Vendor, vendor.id) is None
    assert await db_session.get(User, vendor_user.id) is None
    assert (await db_session.execute(select(func.count(Product.id)))).scalar() == 0
    assert (await db_session.execute(select(func.count(Booking.id)))).scalar() == 0
    assert (await db_session.execute(select(func.count(Vendor.id)))).scalar() == 1


class FailingCounter:
    def inc(self):
        raise RuntimeError("metrics backend down")


@pytest.mark.asyncio
async def test_delete_vendor_failure_rolls_back_everything(
    atomic_client: AsyncClient, db_session, monkeypatch, admin_headers, vendor, vendor_user, product, booking
):
    """A failure after every row is deleted leaves all of them in place."""
    from marketplace.services import vendor_service

    vendor_id, user_id, product_id, booking_id = vendor.id, vendor_user.id, product.id, booking.id
    monkeypatch.setattr(vendor_service, "vendor_deletions", FailingCounter())

    response = await atomic_client.delete(f"/admin/vendors/{vendor_id}", headers=admin_headers)
    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}

    assert (await db_session.execute(select(func.count(Vendor.id)).where(Vendor.id == vendor_id))).scalar() == 1
    assert (await db_session.execute(select(func.count(User.id)).where(User.id == user_id))).scalar() == 1
    assert (await db_session.execute(select(func.count(Product.id)).where(Product.id == product_id))).scalar() == 1
    assert (await db_session.execute(select(func.count(Booking.id)).where(Booking.id == booking_id))).scalar() == 1


@pytest.mark.asyncio
async def test_delete_vendor_commits_through_full_transaction(
    atomic_client: AsyncClient, db_session, admin_headers, vendor, product, booking
):
    vendor_id = vendor.id

    response = await atomic_client.delete(f"/admin/vendors/{vendor_id}", headers=admin_headers)
    assert response.status_code == 200

    assert (await db_session.execute(select(func.count(Vendor.id)).where(Vendor.id == vendor_id))).scalar() == 0
    assert (await db_session.execute(select(func.count(Booking.id)))).scalar() == 0


@pytest.mark.asyncio
async def test_delete_unknown_vendor(client: AsyncClient, admin_headers):
    response = await client.delete("/admin/vendors/99999", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, admin_headers, booking, other_customer):
    response = await client.get("/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["user_count"] == 4
    assert data["vendor_count"] == 1
    assert data["booking_count"] == 1
    assert data["booking_status"] == {"pending": 1, "confirmed": 0, "completed": 0, "cancelled": 0}
