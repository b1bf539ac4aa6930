"""Shared test fixtures for ClinicBook API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SENDGRID_API_KEY", "")

from datetime import date, timedelta
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app

# Import all models to ensure they're registered with Base.metadata
from app.models.appointment import Appointment
from app.models.branch import Branch
from app.models.lead import Lead
from app.models.service import BranchService, Service, ServiceCategory
from app.models.user import User, UserRole
from app.services.auth import create_user_token, hash_password


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def mock_email():
    """Never talk to SendGrid from tests; expose the mock for assertions."""
    with patch("app.services.email_service.email_service.send_email", new_callable=AsyncMock) as mocked:
        mocked.return_value = True
        yield mocked


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


@pytest.fixture
def tomorrow() -> date:
    return date.today() + timedelta(days=1)


@pytest_asyncio.fixture
async def branch(db):
    """Active branch open 09:00-11:00, i.e. four 30-minute slots."""
    branch = Branch(
        name="Jubilee Hills",
        code="HYD-JH-001",
        address="Road No. 36, Jubilee Hills",
        city="Hyderabad",
        state="Telangana",
        pincode="500033",
        phone="+914040123456",
        opening_time="09:00",
        closing_time="11:00",
        is_active=True,
    )
    db.add(branch)
    await db.commit()
    await db.refresh(branch)
    return branch


@pytest_asyncio.fixture
async def category(db):
    category = ServiceCategory(name="Skin Care", slug="skin-care", sort_order=1)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@pytest_asyncio.fixture
async def service(db, branch, category):
    service = Service(
        name="Hydrafacial",
        slug="hydrafacial",
        description="Deep cleansing facial",
        duration=30,
        price=6000.0,
        category_id=category.id,
    )
    db.add(service)
    await db.flush()
    db.add(BranchService(branch_id=branch.id, service_id=service.id))
    await db.commit()
    await db.refresh(service)
    return service


async def _create_user(db, email: str, role: UserRole, phone: str) -> User:
    user = User(
        email=email,
        hashed_password=hash_password("testpass123"),
        first_name="Test",
        last_name=role.value.title(),
        phone=phone,
        role=role,
        is_active=True,
        is_verified=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def patient(db):
    return await _create_user(db, "patient@example.com", UserRole.PATIENT, "+919000000001")


@pytest_asyncio.fixture
async def other_patient(db):
    return await _create_user(db, "other@example.com", UserRole.PATIENT, "+919000000002")


@pytest_asyncio.fixture
async def admin(db):
    return await _create_user(db, "admin@example.com", UserRole.ADMIN, "+919000000003")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def patient_headers(patient):
    return auth_headers(patient)


@pytest.fixture
def other_patient_headers(other_patient):
    return auth_headers(other_patient)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def booking_payload(branch, service, tomorrow):
    """camelCase booking body for the 09:30 slot tomorrow."""
    return {
        "appointmentDate": tomorrow.isoformat(),
        "timeSlot": "09:30",
        "patientName": "Ananya Reddy",
        "patientPhone": "+919123456780",
        "patientEmail": "ananya@example.com",
        "serviceId": str(service.id),
        "branchId": str(branch.id),
    }
