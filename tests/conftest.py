"""
Shared test fixtures for the Employee Management System test suite.

Every test gets a fresh in-memory database (aiosqlite + StaticPool) and the
app's ``get_db`` dependency is pointed at it.
"""

import os
import sys
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SEED_DEPARTMENTS"] = "false"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ems.api.v1.deps import get_db
from ems.db.base import Base
from ems.db.seed import seed_departments
from ems.db.session import enable_sqlite_foreign_keys
from ems.main import app
from ems.models.contractor import Contractor
from ems.models.department import Department
from ems.models.employee import Employee


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create all tables on a private engine and route the app to it."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine.sync_engine)
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db

    yield factory

    app.dependency_overrides.pop(get_db, None)
    # Disposing the StaticPool connection discards the in-memory database.
    await test_engine.dispose()


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def departments(session_factory) -> dict[str, int]:
    """Seed IT / HR / Finance and return their ids by name."""
    async with session_factory() as session:
        await seed_departments(session)
        rows = (await session.execute(Department.__table__.select())).all()
    return {row.name: row.id for row in rows}


# ── Builders ────────────────────────────────────────────────────────
def make_employee(**overrides) -> Employee:
    """A valid, unsaved plain employee."""
    data = {
        "kind": "employee",
        "employee_number": "EMP001",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "date_of_birth": date(1990, 5, 17),
        "position": "Developer",
        "hire_date": date(2020, 1, 6),
        "salary": Decimal("5000.00"),
        "is_active": True,
    }
    data.update(overrides)
    return Employee(**data)


def make_manager(**overrides) -> Employee:
    data = {
        "kind": "manager",
        "employee_number": "MGR001",
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@example.com",
        "position": "Engineering Manager",
        "salary": Decimal("9000.00"),
        "management_level": "Senior",
        "bonus": Decimal("12000.00"),
    }
    data.update(overrides)
    return make_employee(**data)


def make_contractor(**overrides) -> Contractor:
    data = {
        "contractor_number": "CTR001",
        "first_name": "Linus",
        "last_name": "Torvalds",
        "email": "linus@example.com",
        "date_of_birth": date(1985, 12, 28),
        "company": "Kernel Consulting",
        "specialty": "Operating Systems",
        "contract_start_date": date(2024, 1, 1),
        "contract_end_date": date(2024, 12, 31),
        "hourly_rate": Decimal("100.00"),
        "is_active": True,
    }
    data.update(overrides)
    return Contractor(**data)


def employee_payload(**overrides) -> dict:
    """JSON body for POST /employees."""
    data = {
        "employee_number": "EMP001",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone_number": "+44 20 7946 0000",
        "date_of_birth": "1990-05-17",
        "position": "Developer",
        "hire_date": "2020-01-06",
        "salary": 5000,
    }
    data.update(overrides)
    return data


def contractor_payload(**overrides) -> dict:
    today = date.today()
    data = {
        "contractor_number": "CTR001",
        "first_name": "Linus",
        "last_name": "Torvalds",
        "email": "linus@example.com",
        "date_of_birth": "1985-12-28",
        "company": "Kernel Consulting",
        "specialty": "Operating Systems",
        "contract_start_date": date(today.year - 1, 1, 1).isoformat(),
        "contract_end_date": date(today.year + 1, 1, 1).isoformat(),
        "hourly_rate": 100,
    }
    data.update(overrides)
    return data
