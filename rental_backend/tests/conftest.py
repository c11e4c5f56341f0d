"""
Centralized Test Configuration.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool
from sqlalchemy import event
from sqlalchemy.pool import Pool

from rental_backend.app.main import app
from rental_backend.app.db.session import get_db, Base
from rental_backend.app.models import bike, bike_slab, reservation  # noqa: F401
from rental_backend.app.domain.pricing.pricing_config import BikePricingConfig, SimpleTier, Slab
from rental_backend.app.models.pricing_enums import PricingType

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
def apply_overrides():
    """Route the app's database dependency to the in-memory engine."""
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def legacy_config():
    return BikePricingConfig(legacy_hourly_rate=Decimal("10"), km_limit_per_rental=80)


@pytest.fixture
def simple_config():
    return BikePricingConfig(
        legacy_hourly_rate=Decimal("70"),
        km_limit_per_rental=150,
        simple_tier=SimpleTier(
            price_12_hours=Decimal("500"),
            hourly_rates_13_to_24=[Decimal("30"), Decimal("40"), Decimal("50")],
        ),
        gst_percentage=Decimal("18"),
    )


@pytest.fixture
def hourly_slab():
    return Slab(
        price=Decimal("100"),
        duration_min_hours=Decimal("1"),
        duration_max_hours=Decimal("23"),
        included_km=10,
        extra_km_price=Decimal("5"),
    )


@pytest.fixture
def slab_config(hourly_slab):
    return BikePricingConfig(
        slabs={
            PricingType.HOURLY: hourly_slab,
            PricingType.DAILY: Slab(
                price=Decimal("800"),
                duration_min_hours=Decimal("24"),
                duration_max_hours=Decimal("167"),
                included_km=120,
                extra_km_price=Decimal("4"),
            ),
        },
        weekend_surge_multiplier=Decimal("1.5"),
        gst_percentage=Decimal("18"),
    )
