"""
Test fixtures - in-memory SQLite database + authenticated HTTP clients per role
"""
from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from logitrack.database import Base, enable_sqlite_foreign_keys, get_db
from logitrack.main import app
from logitrack.api.auth import get_password_hash, create_access_token
from logitrack.models.user import User, UserRole
from logitrack.models.client import Client

PASSWORD = "testpass123"


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: one user per role, a second employee, one client"""
    def make_user(username, role):
        return User(
            username=username,
            email=f"{username}@logitrack.io",
            full_name=username.title(),
            hashed_password=get_password_hash(PASSWORD),
            role=role,
        )

    admin = make_user("admin", UserRole.ADMIN)
    manager = make_user("manager", UserRole.MANAGER)
    employee = make_user("employee", UserRole.EMPLOYEE)
    other = make_user("other", UserRole.EMPLOYEE)
    customer = make_user("customer", UserRole.CLIENT)
    acme = Client(name="Acme Corp", email="contact@acmecorp.com", country="USA")

    records = [admin, manager, employee, other, customer, acme]
    db_session.add_all(records)
    await db_session.commit()
    for record in records:
        await db_session.refresh(record)

    return {
        "admin": admin,
        "manager": manager,
        "employee": employee,
        "other": other,
        "customer": customer,
        "acme": acme,
    }


@asynccontextmanager
async def _http_client(db_session, user=None):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        if user is not None:
            token = create_access_token(data={"sub": str(user.id)})
            ac.headers["Authorization"] = f"Bearer {token}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """Admin-authenticated httpx AsyncClient bound to the FastAPI app"""
    async with _http_client(db_session, seed_data["admin"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def manager_client(db_session, seed_data):
    async with _http_client(db_session, seed_data["manager"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def employee_client(db_session, seed_data):
    async with _http_client(db_session, seed_data["employee"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def customer_client(db_session, seed_data):
    """Authenticated as a client-role (customer-facing) user"""
    async with _http_client(db_session, seed_data["customer"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def unauth_client(db_session):
    """Unauthenticated httpx AsyncClient"""
    async with _http_client(db_session) as ac:
        yield ac
