from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser, OwnerContext
from libs.db.base import Base
from libs.db.session import get_async_db
from services.gateway_service.app.main import create_app

# Import all models so metadata includes every table
from services.communications_service import models as _communications_models  # noqa: F401
from services.cpd_service import models as _cpd_models  # noqa: F401
from services.members_service import models as _member_models  # noqa: F401
from services.sessions_service import models as _session_models  # noqa: F401

from tests.factories import TEST_USER_EMAIL, TEST_USER_ID, ProfileFactory


@pytest_asyncio.fixture
async def test_engine():
    """
    A fresh in-memory database per test. StaticPool keeps every session on
    the one connection that holds the database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def current_user() -> AuthUser:
    """The signed-in user for API tests; override per test to switch users."""
    return AuthUser(user_id=TEST_USER_ID, email=TEST_USER_EMAIL)


@pytest.fixture
def owner() -> OwnerContext:
    return OwnerContext(user_id=TEST_USER_ID, email=TEST_USER_EMAIL)


@pytest.fixture
def app(db_session, current_user):
    application = create_app(create_tables=False)

    async def _db():
        yield db_session

    application.dependency_overrides[get_async_db] = _db
    application.dependency_overrides[get_current_user] = lambda: current_user
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def coach_profile(db_session):
    """Profile row for the signed-in user."""
    profile = ProfileFactory.create(user_id=TEST_USER_ID, email=TEST_USER_EMAIL)
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def admin_profile(db_session):
    """The signed-in user, promoted to admin."""
    from services.members_service.models import UserRole

    profile = ProfileFactory.create(
        user_id=TEST_USER_ID, email=TEST_USER_EMAIL, role=UserRole.ADMIN
    )
    db_session.add(profile)
    await db_session.commit()
    return profile
