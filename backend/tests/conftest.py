"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh schema on TEST_DATABASE_URL (in-memory SQLite by
default, or a disposable Postgres database) and a client whose DB
dependency is bound to the test session.
"""

import os
import tempfile
from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

# Settings are cached on first import, so the environment goes first
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="marketplace-uploads-"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.main import app
from marketplace.db.base import Base
from marketplace.db.session import get_db, transaction, run_after_commit, discard_after_commit
from marketplace.core.config import get_settings
from marketplace.core.security import create_access_token, hash_password
from marketplace.models import User, Vendor, Product, Booking, Category


def _engine_kwargs() -> dict:
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection keeps the in-memory database alive
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def strict_transitions(settings, monkeypatch):
    """Run a test with STRICT_BOOKING_TRANSITIONS on."""
    monkeypatch.setattr(settings, "STRICT_BOOKING_TRANSITIONS", True)
    return settings


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs())
    if TEST_DATABASE_URL.startswith("sqlite"):
        # SQLite leaves foreign keys unenforced unless asked
        @event.listens_for(engine.sync_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client that overrides the DB dependency with the test session.

    Successful requests commit and run after-commit callbacks like get_db.
    Failed requests are not rolled back, so fixture objects stay loaded.
    """

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            discard_after_commit(db_session)
            raise
        await db_session.commit()
        await run_after_commit(db_session)

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def atomic_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Client whose requests run in get_db's full transaction: commit on
    success, rollback on any error. Server errors come back as 500
    responses instead of being raised into the test.
    """

    async def override_get_db():
        async with transaction(db_session):
            yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def make_headers(user: User) -> dict:
    """Bearer headers for a user, the way /login would issue them."""
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


async def create_user(db: AsyncSession, name: str, email: str, role: str, phone: str = "9876543210") -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("password123"),
        phone=phone,
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_vendor(db: AsyncSession, user: User, name: str, category: str = "Decoration", rating: float = 0) -> Vendor:
    vendor = Vendor(
        user_id=user.id,
        name=name,
        category=category,
        description=f"{name} description",
        price=1000,
        profile_image="Logo.jpg",
        images=[],
        reviews=[],
        status="active",
        owner_name=user.name,
        email=user.email,
        phone=user.phone,
        rating=rating,
    )
    db.add(vendor)
    await db.commit()
    await db.refresh(vendor)
    return vendor


async def create_product(
    db: AsyncSession,
    vendor: Vendor,
    name: str,
    price: float,
    category: str = "Decoration",
    description: str = "A bookable service",
) -> Product:
    product = Product(
        vendor_id=vendor.id,
        name=name,
        description=description,
        price=price,
        category=category,
        images=[],
        features=["Setup included"],
        is_available=True,
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> User:
    return await create_user(db_session, "Customer One", "customer@example.com", "customer")


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession) -> User:
    return await create_user(db_session, "Customer Two", "customer2@example.com", "customer")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_user(db_session, "Admin", "admin@example.com", "admin")


@pytest_asyncio.fixture
async def vendor_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "Vendor Owner", "vendor@example.com", "vendor")


@pytest_asyncio.fixture
async def vendor(db_session: AsyncSession, vendor_user: User) -> Vendor:
    return await create_vendor(db_session, vendor_user, "Elegant Events", rating=4.5)


@pytest_asyncio.fixture
async def other_vendor_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "Other Owner", "other-vendor@example.com", "vendor")


@pytest_asyncio.fixture
async def other_vendor(db_session: AsyncSession, other_vendor_user: User) -> Vendor:
    return await create_vendor(db_session, other_vendor_user, "Gourmet Catering", category="Catering", rating=3.0)


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(name="Decoration", description="Venue styling", icon="🎀", is_active=True)
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest_asyncio.fixture
async def product(db_session: AsyncSession, vendor: Vendor) -> Product:
    return await create_product(db_session, vendor, "Premium Decoration Package", 500)


@pytest_asyncio.fixture
async def booking(db_session: AsyncSession, customer: User, vendor: Vendor, product: Product) -> Booking:
    booking = Booking(
        user_id=customer.id,
        vendor_id=vendor.id,
        product_id=product.id,
        date=datetime.now(timezone.utc) + timedelta(days=30),
        time="18:00",
        event_type="Wedding",
        guest_count=50,
        special_requests="",
        amount=product.price,
        status="pending",
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking


@pytest.fixture
def customer_headers(customer: User) -> dict:
    return make_headers(customer)


@pytest.fixture
def other_customer_headers(other_customer: User) -> dict:
    return make_headers(other_customer)


@pytest.fixture
def vendor_headers(vendor_user: User, vendor: Vendor) -> dict:
    return make_headers(vendor_user)


@pytest.fixture
def other_vendor_headers(other_vendor_user: User, other_vendor: Vendor) -> dict:
    return make_headers(other_vendor_user)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return make_headers(admin)


def future_date(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()
