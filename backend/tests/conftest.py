"""
Letter Writer Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the whole suite.
How:   Environment variables are set before anything under `app` is
       imported, so the settings singleton and the engine pick up the
       in-memory SQLite database and test secrets. Google SDKs are never
       called for real; tests patch the service that would call them.

Fixture Hierarchy (all function-scoped):
    ├── engine / session_factory: in-memory SQLite with the schema created
    │   ├── db_session: one AsyncSession for service tests
    │   ├── make_user: insert and commit a User
    │   ├── make_letter: insert and commit a Letter
    │   └── test_client: HTTPX AsyncClient, get_db_session overridden
    ├── mock_db_session: AsyncMock session (no database)
    └── auth_headers: Authorization header for a user
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["GOOGLE_CALLBACK_URL"] = "http://localhost:3001/api/auth/google/callback"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["FRONTEND_URL"] = "http://localhost:3000"
os.environ["BACKEND_URL"] = "http://localhost:3001"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import AsyncGenerator, Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db_session  # noqa: E402
from app.models import Letter, User  # noqa: E402
from app.services.session_service import session_service  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test; StaticPool keeps one shared connection."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock async session for tests that must observe calls (commit order,
    error wrapping) without a database.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Data Helpers
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(session_factory):
    """
    Usage:
        user = await make_user(email="ann@example.com", access_token=None)
    """

    async def _make_user(
        email: str = "writer@example.com",
        name: str = "Writer",
        access_token: Optional[str] = "google-access-token",
        refresh_token: Optional[str] = "google-refresh-token",
        token_expiry: Optional[datetime] = None,
    ) -> User:
        if token_expiry is None and access_token:
            token_expiry = datetime.now(timezone.utc) + timedelta(hours=1)
        async with session_factory() as session:
            user = User(
                email=email,
                name=name,
                google_id=f"gid-{email}",
                access_token=access_token,
                refresh_token=refresh_token,
                token_expiry=token_expiry,
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def make_letter(session_factory):
    async def _make_letter(
        owner: User,
        title: str = "Dear Ann",
        content: str = "<p>Hello</p>",
        is_draft: bool = True,
    ) -> Letter:
        async with session_factory() as session:
            letter = Letter(title=title, content=content, is_draft=is_draft, user_id=owner.id)
            session.add(letter)
            await session.commit()
            return letter

    return _make_letter


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User, expires_delta: Optional[timedelta] = None) -> dict:
        token = session_service.issue_token(user.id, user.email, expires_delta=expires_delta)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX client bound to the FastAPI app. Each request gets a session from
    the test database with the same commit/rollback behavior as production.
    ASGITransport does not run the lifespan.
    """
    from app.main import app

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
