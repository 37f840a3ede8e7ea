"""
Guestbook API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the backend test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── mock_db_session: AsyncMock standing in for AsyncSession (no DB)
    ├── test_settings:   Settings pointing at a fresh SQLite file per test
    ├── database:        Database with the schema created
    ├── db_session:      A session on that database
    └── test_client:     HTTPX AsyncClient talking to an app built on it
"""

import os

# Settings are read when app.main is imported; keep that import off PostgreSQL
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import Settings
from app.database import Database
from app.main import create_app


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_create(mock_db_session):
            await service.create_message(mock_db_session, "Ada", "Hello")
            mock_db_session.commit.assert_awaited_once()
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def test_settings(tmp_path):
    """Settings bound to a SQLite database file inside pytest's tmp_path."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'guestbook.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database with the Message table created; disposed after the test."""
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(test_settings):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(test_settings)
    await app.state.database.create_all()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await app.state.database.dispose()
