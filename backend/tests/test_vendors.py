"""
Tests for the vendor directory: public reads, self-service profile and the
legacy /vendor endpoints.
"""

import pytest
from httpx import AsyncClient

from conftest import create_user, create_vendor, make_headers

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.mark.asyncio
async def test_list_vendors(client: AsyncClient, vendor, other_vendor):
    response = await client.get("/vendors")
    assert response.status_code == 200
    names = {v["name"] for v in response.json()}
    assert names == {"Elegant Events", "Gourmet Catering"}


@pytest.mark.asyncio
async def test_list_vendors_includes_pending(client: AsyncClient, db_session, vendor):
    """The public directory lists every vendor, whatever its status."""
    owner = await create_user(db_session, "Fresh Owner", "fresh@example.com", "vendor")
    pending = await create_vendor(db_session, owner, "Fresh Florals")
    pending.status = "pending"
    await db_session.commit()

    response = await client.get("/vendors")
    statuses = {v["name"]: v["status"] for v in response.json()}
    assert statuses == {"Elegant Events": "active", "Fresh Florals": "pending"}


@pytest.mark.asyncio
async def test_get_vendor_with_products(client: AsyncClient, vendor, product):
    response = await client.get(f"/vendors/{vendor.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Elegant Events"
    assert data["profile_image_url"] == "/uploads/Logo.jpg"
    assert [p["id"] for p in data["products"]] == [product.id]


@pytest.mark.asyncio
async def test_get_unknown_vendor(client: AsyncClient):
    response = await client.get("/vendors/99999")
    assert response.status_code == 404
    assert response.json()["message"] == "Vendor not found"


@pytest.mark.asyncio
async def test_get_own_profile(client: AsyncClient, vendor, vendor_headers):
    response = await client.get("/vendors/profile", headers=vendor_headers)
    assert response.status_code == 200
    assert response.json()["id"] == vendor.id


@pytest.mark.asyncio
async def test_get_own_profile_as_customer(client: AsyncClient, customer_headers):
    response = await client.get("/vendors/profile", headers=customer_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_own_profile_ignores_empty_values(client: AsyncClient, vendor, vendor_headers):
    response = await client.put("/vendors/profile", headers=vendor_headers, json={
        "name": "Elegant Events & Co",
        "address": "12 Park Street",
        "description": "",
        "category": "catering",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Elegant Events & Co"
    assert data["address"] == "12 Park Street"
    assert data["description"] == "Elegant Events description"
    assert data["category"] == "Catering"
    assert data["status"] == "active"


@pytest.mark.asyncio
async def test_update_own_profile_unknown_category(client: AsyncClient, vendor_headers):
    response = await client.put("/vendors/profile", headers=vendor_headers, json={"category": "Fireworks"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_profile_image(client: AsyncClient, vendor_headers):
    response = await client.put(
        "/vendors/profile/image",
        headers=vendor_headers,
        files={"profile_image": ("me.png", PNG, "image/png")},
    )
    assert response.status_code == 200
    first = response.json()
    assert first["image_url"] == f"/uploads/{first['profile_image']}"

    response = await client.put(
        "/vendors/profile/image",
        headers=vendor_headers,
        files={"profile_image": ("me2.png", PNG, "image/png")},
    )
    assert response.status_code == 200

    # The superseded file is removed
    response = await client.get(first["image_url"])
    assert response.status_code == 404


class FailingLogger:
    def info(self, *args, **kwargs):
        raise RuntimeError("log sink down")


@pytest.mark.asyncio
async def test_failed_profile_image_update_keeps_old_file(atomic_client: AsyncClient, monkeypatch, vendor_headers):
    """A rolled-back image change leaves the stored image on disk."""
    from marketplace.services import vendor_service

    response = await atomic_client.put(
        "/vendors/profile/image",
        headers=vendor_headers,
        files={"profile_image": ("me.png", PNG, "image/png")},
    )
    assert response.status_code == 200
    first = response.json()

    monkeypatch.setattr(vendor_service, "logger", FailingLogger())
    response = await atomic_client.put(
        "/vendors/profile/image",
        headers=vendor_headers,
        files={"profile_image": ("me2.png", PNG, "image/png")},
    )
    assert response.status_code == 500
    monkeypatch.undo()

    response = await atomic_client.get("/vendors/profile", headers=vendor_headers)
    assert response.json()["profile_image"] == first["profile_image"]

    response = await atomic_client.get(first["image_url"])
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_legacy_add_vendor(client: AsyncClient, db_session):
    user = await create_user(db_session, "Fresh Vendor", "fresh@example.com", "vendor")
    headers = make_headers(user)

    payload = {"name": "Fresh Lights", "category": "Lighting", "description": "LED walls", "price": 900}
    response = await client.post("/vendor/add", headers=headers, json=payload)
    assert response.status_code == 201
    assert response.json()["status"] == "pending"

    response = await client.post("/vendor/add", headers=headers, json=payload)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_legacy_add_vendor_requires_vendor_role(client: AsyncClient, customer_headers):
    response = await client.post("/vendor/add", headers=customer_headers, json={
        "name": "Nope", "category": "Lighting", "description": "x", "price": 1,
    })
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_legacy_list_all(client: AsyncClient, vendor):
    response = await client.get("/vendor/all")
    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_legacy_update_vendor_ownership(client: AsyncClient, vendor, vendor_headers, other_vendor_headers):
    response = await client.put(f"/vendor/{vendor.id}", headers=other_vendor_headers, json={"price": 1})
    assert response.status_code == 403

    response = await client.put(f"/vendor/{vendor.id}", headers=vendor_headers, json={"price": 1800})
    assert response.status_code == 200
    assert response.json()["price"] == 1800


@pytest.mark.asyncio
async def test_legacy_update_cannot_change_status(client: AsyncClient, vendor, vendor_headers):
    response = await client.put(f"/vendor/{vendor.id}", headers=vendor_headers, json={"status": "suspended"})
    assert response.status_code == 200
    assert response.json()["status"] == "active"


@pytest.mark.asyncio
async def test_legacy_delete_keeps_user(client: AsyncClient, vendor, vendor_user, product, booking, vendor_headers):
    response = await client.delete(f"/vendor/{vendor.id}", headers=vendor_headers)
    assert response.status_code == 200
    details = response.json()["details"]
    assert details["products_deleted"] == 1
    assert details["bookings_deleted"] == 1
    assert details["user_deleted"] is False

    response = await client.get("/validate", headers=vendor_headers)
    assert response.status_code == 200
