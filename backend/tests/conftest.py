"""
Bookshelf Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied at the top of this module, before
       any `bookshelf` import, because settings and the engine are built at
       import time.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock standing in for AsyncSession (unit tests)
    ├── db_tables: creates/drops all tables in a throwaway SQLite file
    ├── test_client: HTTPX AsyncClient wired to the app (needs db_tables)
    └── enable_password_change: turns the password-change feature on
"""

import os
import tempfile

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup (BEFORE any bookshelf import)
# ══════════════════════════════════════════════════════════════════════════

_TEST_DIR = tempfile.mkdtemp(prefix="bookshelf_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum work factor keeps the suite fast
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["ENABLE_PASSWORD_CHANGE"] = "false"

from types import SimpleNamespace  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from bookshelf.config import settings  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_user(mock_db_session):
            result = MagicMock()
            result.scalar_one_or_none.return_value = user
            mock_db_session.execute.return_value = result
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
def sample_user():
    """An object shaped like a users row, for controller tests."""
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        id=uuid4(),
        email="ada@example.com",
        full_name="Ada Lovelace",
        password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhash",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def enable_password_change(monkeypatch):
    monkeypatch.setattr(settings, "enable_password_change", True)


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures (real SQLite database)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_tables():
    """
    Creates every table before the test and drops them afterwards.

    The engine is disposed at the end so no pooled connection outlives the
    test's event loop.
    """
    from bookshelf.database import Base, engine
    from bookshelf.models import book, user  # noqa: F401  (register tables)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_tables):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from bookshelf.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

