"""
Bloglist Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Unit tests use a mocked AsyncSession; API and store tests use an
       in-memory SQLite database (aiosqlite) shared through a StaticPool,
       created fresh for every test.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── db_engine:       in-memory SQLite engine with all tables created
    ├── db_session:      real AsyncSession on db_engine
    ├── app_settings:    Settings with a test secret and cheap bcrypt rounds
    ├── app:             create_app(app_settings) with its session factory
    │                    pointed at db_engine
    ├── test_client:     HTTPX AsyncClient over ASGITransport
    └── register_and_login: helper coroutine returning an auth header
"""

import os

# Environment must be in place before bloglist.config is imported:
# bloglist.main builds a module-level app from it.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"

from typing import AsyncGenerator, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import bloglist.models  # noqa: E402,F401
from bloglist.config import Settings  # noqa: E402
from bloglist.database import Base, build_session_factory  # noqa: E402
from bloglist.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-key-not-for-production-0123456789"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = post
        await service.get_post(mock_db_session, str(post.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite; StaticPool keeps the single connection (and its data) alive."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Application
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture
def app(app_settings, db_engine):
    """A fresh application per test, bound to the test database."""
    application = create_app(app_settings)
    application.state.session_factory = build_session_factory(db_engine)
    return application


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_and_login(test_client):
    """Registers an account, logs in, and returns the Authorization header."""

    async def _register_and_login(
        username: str = "mluukkai", password: str = "salainen", name: str = "Matti Luukkainen"
    ) -> Dict[str, str]:
        created = await test_client.post(
            "/api/users", json={"username": username, "name": name, "password": password}
        )
        assert created.status_code == 201, created.text
        login = await test_client.post(
            "/api/login", json={"username": username, "password": password}
        )
        assert login.status_code == 200, login.text
        return {"Authorization": f"Bearer {login.json()['token']}"}

    return _register_and_login
