"""
Pytest configuration and fixtures.

Service and API tests run against an in-memory SQLite database
(aiosqlite) created from the models; pure rules are tested without any
database. The mock session is kept for tests that only need to check
what a service does before touching the data.
"""

import os

# Before any crm import: settings and engine are built at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "testing")

import datetime
import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from crm.core.database import get_db
from crm.core.tenant import COMPANY_HEADER, TenantContext
from crm.main import app
from crm.models import Base, Client, Company, Quotation
from crm.schemas.quotation import QuotationCreate, QuotationItemCreate
from crm.services.quotation_service import QuotationService


# ============================================================
# Fixtures for the AsyncSession mock
# ============================================================


@pytest.fixture
def mock_db():
    """AsyncSession mock."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    return db


def scalar_result(value):
    """Result mock returning value from scalar_one_or_none / first."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.first.return_value = value
    result.scalar.return_value = value
    return result


# ============================================================
# Fixtures for the SQLite database
# ============================================================


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# ============================================================
# Fixtures for tenant data
# ============================================================


@pytest.fixture
async def company(db) -> Company:
    company = Company(name="Aarti Infra", code="AARTI", phone="+91 9876543210")
    db.add(company)
    await db.commit()
    return company


@pytest.fixture
async def other_company(db) -> Company:
    company = Company(name="Interior & Turnkey Firm", code="INTERIOR")
    db.add(company)
    await db.commit()
    return company


@pytest.fixture
def tenant(company) -> TenantContext:
    return TenantContext.from_company(company)


@pytest.fixture
def other_tenant(other_company) -> TenantContext:
    return TenantContext.from_company(other_company)


@pytest.fixture
async def client(db, company) -> Client:
    client = Client(
        company_id=company.id,
        name="Ravi Kumar",
        phone="9876500000",
        project_location="Pune",
    )
    db.add(client)
    await db.commit()
    return client


def scenario_payload(client_id: uuid.UUID, **overrides) -> QuotationCreate:
    """1000 sqft at 1500 with 10% discount: grand total 1,593,000."""
    values = dict(
        client_id=client_id,
        total_sqft=Decimal("1000"),
        rate_per_sqft=Decimal("1500"),
        discount_type="percentage",
        discount_value=Decimal("10"),
        cgst_percent=Decimal("9"),
        sgst_percent=Decimal("9"),
    )
    values.update(overrides)
    return QuotationCreate(**values)


@pytest.fixture
async def quotation(db, tenant, client) -> Quotation:
    """Saved quotation of the reference scenario."""
    return await QuotationService().create(db, tenant, scenario_payload(client.id))


@pytest.fixture
def item_payloads() -> list[QuotationItemCreate]:
    return [
        QuotationItemCreate(
            room_label="Master Bedroom",
            item_name="Wardrobe",
            unit="sqft",
            quantity=Decimal("40"),
            rate=Decimal("1800"),
            custom_columns={"finish": "Laminate", "depth_mm": 600},
        ),
        QuotationItemCreate(
            room_label="Kitchen",
            item_name="Modular kitchen",
            unit="rft",
            quantity=Decimal("12"),
            rate=Decimal("9500"),
        ),
    ]


@pytest.fixture
def today() -> datetime.date:
    return datetime.date.today()


# ============================================================
# Fixtures for the HTTP API
# ============================================================


@pytest.fixture
async def http(session_factory):
    """HTTP client on the app, bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def tenant_headers(company) -> dict[str, str]:
    return {COMPANY_HEADER: str(company.id)}
