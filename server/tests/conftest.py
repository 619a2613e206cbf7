"""Test configuration and fixtures."""

import os

# Settings are read at import time; point them at SQLite before the app loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hotel_api.core.clock import today
from hotel_api.core.config import settings
from hotel_api.core.database import Base, get_db
from hotel_api.core.seed import seed_sample_data
from hotel_api.models import *  # noqa: F403 - Import all models
from hotel_api.services.payment_service import PaymentGateway, get_payment_gateway

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API = settings.api_prefix
TEST_PASSWORD = "secret123"
VALID_CARD = "4111 1111 1111 1111"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def catalog(test_session):
    """Sample cities, hotels and room types with two rooms a night for 60 days."""
    return await seed_sample_data(test_session, inventory_days=60, rooms_per_night=2)


@pytest.fixture
def gateway():
    """Payment gateway that never declines."""
    return PaymentGateway(card_failure_rate=0.0, other_failure_rate=0.0)


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session, gateway):
    """Create the application with the test session and gateway injected."""
    from hotel_api.main import create_app

    app = create_app()

    # Override database dependency
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def register(client: AsyncClient, email: str, name: str = "Test Guest") -> dict:
    """Register an account and return its auth data (including the token)."""
    response = await client.post(
        f"{API}/auth/register",
        json={"name": name, "email": email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def guest(test_client, catalog):
    """A registered guest: auth data plus ready-made headers."""
    data = await register(test_client, "guest@example.com", "Asha Guest")
    data["headers"] = bearer(data["token"])
    return data


@pytest_asyncio.fixture(scope="function")
async def other_guest(test_client, catalog):
    """A second registered guest."""
    data = await register(test_client, "other@example.com", "Ravi Other")
    data["headers"] = bearer(data["token"])
    return data


@pytest_asyncio.fixture(scope="function")
async def admin(test_client, catalog):
    """The seeded administrator, logged in."""
    response = await test_client.post(
        f"{API}/auth/login",
        json={"email": settings.seed_admin_email, "password": settings.seed_admin_password},
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    data["headers"] = bearer(data["token"])
    return data


@pytest.fixture
def deluxe_room(catalog):
    """Room type id of the Sea Breeze Residency deluxe room (4500.00 a night)."""
    return catalog["room_types"]["Sea Breeze Residency/Deluxe Room"]


@pytest.fixture
def stay():
    """A two-night stay starting tomorrow, as ISO strings."""
    check_in = today() + timedelta(days=1)
    return check_in.isoformat(), (check_in + timedelta(days=2)).isoformat()


@pytest_asyncio.fixture(scope="function")
async def booking(test_client, guest, deluxe_room, stay):
    """A confirmed two-night booking owned by ``guest``."""
    check_in, check_out = stay
    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out},
        headers=guest["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest_asyncio.fixture(scope="function")
async def paid_booking(test_client, guest, booking):
    """The ``booking`` fixture after a successful card payment."""
    response = await test_client.post(
        f"{API}/payments",
        json={
            "booking_id": booking["booking_id"],
            "payment_method": "CARD",
            "card_number": VALID_CARD,
            "expiry": "12/30",
            "cvv": "123",
        },
        headers=guest["headers"],
    )
    assert response.status_code == 200, response.text
    booking["payment"] = response.json()["data"]
    return booking
