"""
Casework Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the whole test suite.
How:   Environment variables are set before anything from `casework` is
       imported, so settings, engine and storage never point at real resources.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncSession stand-in (no real DB needed)
    ├── make_result:     builds the object returned by `await db.execute(...)`
    ├── temp_storage:    temporary directory for document storage
    ├── sample_*:        document bytes and ORM instances
    └── test_client:     HTTPX AsyncClient wired to the app with the mock session
"""

import os
import tempfile
from datetime import date, datetime, timezone
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any casework import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="casework_test_")
os.environ["LOG_LEVEL"] = "WARNING"

import casework.models  # noqa: E402,F401  registers every mapper
from casework.models.case import Case, CaseStatus, HelperAssignment  # noqa: E402
from casework.models.helper import Helper  # noqa: E402
from casework.models.service_entry import ServiceEntry  # noqa: E402
from casework.models.vacation import Vacation  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    `add()` hands out ids the way a flush would, so services can build
    responses from freshly created rows.

    Usage:
        async def test_get(mock_db_session, make_result):
            mock_db_session.execute.return_value = make_result(one=vacation)
    """
    ids = count(100)

    def _add(obj):
        if getattr(obj, "id", None) is None:
            obj.id = next(ids)

    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.delete = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock(side_effect=_add)
    return session


@pytest.fixture
def make_result():
    """
    Factory for query results.

    make_result(rows=[...])  → result.scalars().all() returns the rows
    make_result(one=obj)     → result.scalar_one_or_none() returns obj
    make_result(scalar=3)    → result.scalar() returns 3
    """
    def _make(rows=None, one=None, scalar=None):
        result = MagicMock()
        result.scalars.return_value.all.return_value = list(rows or [])
        result.scalar_one_or_none.return_value = one
        result.scalar.return_value = scalar
        return result
    return _make


# ══════════════════════════════════════════════════════════════════════════
# Storage Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_jpeg_bytes():
    """Smallest technically valid JPEG: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_pdf_bytes():
    return (
        b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n"
        b"trailer\n<< /Root 1 0 R >>\n%%EOF\n"
    )


# ══════════════════════════════════════════════════════════════════════════
# ORM Instances
# ══════════════════════════════════════════════════════════════════════════

def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def sample_helper():
    helper = Helper(
        id=7,
        first_name="Anna",
        last_name="Schmidt",
        email="anna.schmidt@example.org",
        city="Köln",
        highest_degree="Sozialpädagogin",
        created_at=utc(2024, 1, 10, 9, 0),
    )
    helper.assignments = []
    helper.services = []
    helper.vacations = []
    return helper


@pytest.fixture
def sample_case():
    case = Case(
        id=3,
        case_number="F-2024-001",
        first_name="Max",
        last_name="Müller",
        school="Grundschule Lindenthal",
        city="Köln",
        status=CaseStatus.IN_PROGRESS.value,
        created_at=utc(2024, 2, 1, 8, 0),
    )
    case.services = []
    case.assignments = []
    return case


@pytest.fixture
def make_service():
    """
    Factory for ServiceEntry rows; hours are counted from 09:00 on `day`.

    Setting `service.case` and `service.helper` also appends the entry to
    `case.services` and `helper.services` through back_populates.
    """
    ids = count(1)

    def _make(case, helper, day, hours, approved=True, **kwargs):
        start = utc(day.year, day.month, day.day, 9, 0)
        end = start.replace(hour=9 + int(hours), minute=int(round((hours % 1) * 60)))
        service = ServiceEntry(
            id=next(ids),
            case_id=case.id,
            helper_id=helper.id,
            start_time=start,
            end_time=end,
            approved=approved,
            created_at=start,
            **kwargs,
        )
        service.case = case
        service.helper = helper
        return service
    return _make


@pytest.fixture
def make_vacation():
    ids = count(1)

    def _make(helper_id, from_date, to_date, approved=False, vacation_id=None):
        return Vacation(
            id=vacation_id or next(ids),
            helper_id=helper_id,
            from_date=from_date,
            to_date=to_date,
            approved=approved,
        )
    return _make


@pytest.fixture
def make_assignment():
    """Like make_service, the new assignment lands in both `assignments` lists."""

    def _make(helper, case, active=True):
        assignment = HelperAssignment(helper_id=helper.id, case_id=case.id, active=active)
        assignment.helper = helper
        assignment.case = case
        return assignment
    return _make


@pytest.fixture
def today():
    return date(2024, 6, 1)


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The request-scoped session dependency is replaced by `mock_db_session`.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from casework.database import get_db_session
    from casework.main import app

    async def _override():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _override
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
