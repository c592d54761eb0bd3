"""
Tests for authentication endpoints: registration, login, validate, logout.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from marketplace.core.security import create_access_token
from marketplace.models import Vendor


def registration(**overrides) -> dict:
    data = {
        "name": "New Person",
        "email": "new@example.com",
        "password": "securepassword123",
        "phone": "1234567890",
        "role": "customer",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_register_customer(client: AsyncClient):
    """Successful registration returns a token and the user, never the hash."""
    response = await client.post("/register", json=registration())
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "customer"
    assert "hashed_password" not in data["user"]
    assert "token" in response.cookies


@pytest.mark.asyncio
async def test_register_lowercases_email(client: AsyncClient):
    response = await client.post("/register", json=registration(email="Mixed.Case@Example.com"))
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "mixed.case@example.com"


@pytest.mark.asyncio
async def test_register_vendor_creates_pending_profile(client: AsyncClient, db_session):
    response = await client.post("/register", json=registration(role="vendor", name="Stage Crew"))
    assert response.status_code == 201
    user_id = response.json()["user"]["id"]

    vendor = (await db_session.execute(select(Vendor).where(Vendor.user_id == user_id))).scalar_one()
    assert vendor.status == "pending"
    assert vendor.name == "Stage Crew"
    assert vendor.category == "Decoration"
    assert vendor.price == 0
    assert vendor.profile_image == "Logo.jpg"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, customer):
    """Duplicate email returns 400, case-insensitively."""
    response = await client.post("/register", json=registration(email="CUSTOMER@example.com"))
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"


@pytest.mark.asyncio
async def test_register_admin_refused(client: AsyncClient):
    response = await client.post("/register", json=registration(role="admin"))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_register_invalid_phone(client: AsyncClient):
    """Validation errors are 400 with a per-field map."""
    response = await client.post("/register", json=registration(phone="12345"))
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation error"
    assert "phone" in data["errors"]


@pytest.mark.asyncio
async def test_register_unknown_role(client: AsyncClient):
    response = await client.post("/register", json=registration(role="superuser"))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, customer):
    """Valid credentials return the token in the body and as an httpOnly cookie."""
    response = await client.post("/login", json={
        "email": "customer@example.com",
        "password": "password123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["id"] == customer.id
    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "max-age=86400" in set_cookie


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, customer):
    response = await client.post("/login", json={
        "email": "customer@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    response = await client.post("/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_validate_with_bearer(client: AsyncClient, customer, customer_headers):
    response = await client.get("/validate", headers=customer_headers)
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "customer@example.com"


@pytest.mark.asyncio
async def test_validate_with_cookie(client: AsyncClient, customer):
    await client.post("/login", json={"email": "customer@example.com", "password": "password123"})
    response = await client.get("/validate")
    assert response.status_code == 200
    assert response.json()["user"]["id"] == customer.id


@pytest.mark.asyncio
async def test_validate_without_token(client: AsyncClient):
    response = await client.get("/validate")
    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


@pytest.mark.asyncio
async def test_validate_with_garbage_token(client: AsyncClient):
    response = await client.get("/validate", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


@pytest.mark.asyncio
async def test_validate_with_expired_token(client: AsyncClient, customer):
    token = create_access_token({"sub": str(customer.id), "role": "customer"}, timedelta(seconds=-1))
    response = await client.get("/validate", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient, customer):
    await client.post("/login", json={"email": "customer@example.com", "password": "password123"})
    response = await client.post("/logout")
    assert response.status_code == 200
    assert "token" not in client.cookies

    response = await client.get("/validate")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, customer, customer_headers):
    response = await client.put("/users/profile", headers=customer_headers, json={
        "name": "Renamed",
        "phone": "1112223333",
    })
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Renamed"
    assert user["phone"] == "1112223333"
    assert user["email"] == "customer@example.com"


@pytest.mark.asyncio
async def test_update_profile_email_taken(client: AsyncClient, customer, other_customer, customer_headers):
    response = await client.put("/users/profile", headers=customer_headers, json={
        "email": "customer2@example.com",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Email already in use"
