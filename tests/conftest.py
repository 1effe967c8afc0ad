# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

Every test runs against a fresh in-memory SQLite database. The app's
get_session dependency is overridden so request handlers and the test code
talk to the same database.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BREVO_API_KEY"] = ""

from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from main import create_app
from models import Base, Property, PropertyManager, Tenant, Unit, User
from models.enums import ManagerStatus, PropertyType, TenantStatus, UnitStatus, UserRole
from services.auth_service import create_access_token, hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


def override_get_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """A session for arranging and inspecting test data."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def app(db):
    """Create a test FastAPI application instance."""
    application = create_app()
    application.dependency_overrides[get_session] = override_get_session
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


def make_user(db: Session, role: UserRole, email: str, **fields) -> User:
    user = User(
        email=email,
        password=PASSWORD_HASH,
        role=role,
        first_name=fields.pop("first_name", role.value.title()),
        last_name=fields.pop("last_name", "User"),
        is_active=True,
        **fields,
    )
    db.add(user)
    db.commit()
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def super_admin(db) -> User:
    return make_user(db, UserRole.SUPER_ADMIN, "admin@renta.rw")


@pytest.fixture
def owner(db) -> User:
    return make_user(db, UserRole.OWNER, "owner@renta.rw")


@pytest.fixture
def other_owner(db) -> User:
    return make_user(db, UserRole.OWNER, "other.owner@renta.rw")


@pytest.fixture
def manager(db) -> User:
    return make_user(db, UserRole.MANAGER, "manager@renta.rw")


@pytest.fixture
def agent(db) -> User:
    return make_user(db, UserRole.AGENT, "agent@renta.rw")


@pytest.fixture
def tenant_user(db) -> User:
    return make_user(db, UserRole.TENANT, "aline@renta.rw", first_name="Aline", last_name="Uwase")


@pytest.fixture
def property_(db, owner) -> Property:
    prop = Property(
        user_id=owner.id,
        name="Kacyiru Heights",
        type=PropertyType.APARTMENT,
        address="KG 7 Ave, Kacyiru",
        city="Kigali",
    )
    db.add(prop)
    db.commit()
    return prop


@pytest.fixture
def unit(db, property_) -> Unit:
    unit = Unit(
        property_id=property_.id,
        unit_number="A1",
        monthly_rent=Decimal("150000"),
        status=UnitStatus.VACANT,
    )
    db.add(unit)
    db.commit()
    return unit


@pytest.fixture
def tenant(db, owner, unit, tenant_user) -> Tenant:
    """A tenant living in `unit`, with a linked login."""
    tenant = Tenant(
        user_id=owner.id,
        unit_id=unit.id,
        user_account_id=tenant_user.id,
        first_name="Aline",
        last_name="Uwase",
        email=tenant_user.email,
        phone="+250788123456",
        status=TenantStatus.ACTIVE,
    )
    unit.status = UnitStatus.OCCUPIED
    db.add(tenant)
    db.commit()
    return tenant


def assign_manager(db: Session, property_: Property, manager: User, status=ManagerStatus.ACTIVE, **permissions) -> PropertyManager:
    flags = {
        "can_view_tenants": True,
        "can_edit_tenants": False,
        "can_view_payments": True,
        "can_record_payments": False,
        "can_view_maintenance": True,
        "can_manage_maintenance": False,
        "can_edit_property": False,
    }
    flags.update(permissions)
    assignment = PropertyManager(
        property_id=property_.id,
        manager_id=manager.id,
        invited_by=property_.user_id,
        permissions=flags,
        status=status,
    )
    db.add(assignment)
    db.commit()
    return assignment
