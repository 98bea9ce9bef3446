"""
Shared pytest configuration for backend tests.

Tests run against TEST_DATABASE_URL. When it is not set, a throwaway SQLite
file in a temporary directory is used so the suite runs without a database
server; point TEST_DATABASE_URL at a Postgres test database to exercise the
row-locking paths for real.

SAFETY: This module REFUSES to run against any database whose name does not
contain the substring "test".  This prevents accidental drops of the
development or production database when environment variables are
misconfigured.
"""

import os
import tempfile

# Configure the app before anything from backend is imported: the engine,
# rate limiter and JWT key are all read at import time.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="sportconnect_")
os.environ.setdefault(
    "TEST_DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB_DIR}/sportconnect_test.db"
)
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
os.environ["ENV"] = "test"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from backend.database.db import Base  # noqa: E402
from backend.services import auth_service, user_service  # noqa: E402


def _resolve_test_database_url() -> str:
    """Return the test database URL, refusing names that do not contain "test"."""
    url = os.environ["TEST_DATABASE_URL"]

    # ── Safety gate: database name MUST contain "test" ──────────────────
    db_name = url.rsplit("/", 1)[-1].split("?")[0]  # strip query params
    if "test" not in db_name.lower():
        raise RuntimeError(
            f"\n{'=' * 70}\n"
            f"  SAFETY: Refusing to run tests against database '{db_name}'.\n"
            f"  The database name must contain 'test' to prevent accidental\n"
            f"  data loss in development or production databases.\n\n"
            f"  Resolved URL: {url}\n\n"
            f"  Fix: set TEST_DATABASE_URL to a test database, e.g.:\n"
            f"    export TEST_DATABASE_URL=postgresql+asyncpg://.../sportconnect_test\n"
            f"{'=' * 70}"
        )

    return url


TEST_DATABASE_URL = _resolve_test_database_url()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine with fresh tables for each test."""
    # NullPool avoids reusing connections across event loops
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

    async with engine.begin() as conn:
        from backend.database import models  # noqa: F401

        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # Point db.AsyncSessionLocal at the test engine so request handlers
    # (via get_db_session) see the same database as the fixtures
    from backend.database import db

    original_async_session_local = db.AsyncSessionLocal
    db.AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    yield engine

    db.AsyncSessionLocal = original_async_session_local

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Database session against a clean schema."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


async def _make_user(session, email, name, password="password123"):
    user_id = await user_service.create_user(
        session, email, name, auth_service.hash_password(password)
    )
    return await user_service.get_user_by_id(session, user_id)


@pytest_asyncio.fixture
async def make_user(db_session):
    """Factory for extra registered users."""
    async def _factory(email, name, password="password123"):
        return await _make_user(db_session, email, name, password)
    return _factory


@pytest_asyncio.fixture
async def host_user(db_session):
    """A registered user who hosts sessions."""
    return await _make_user(db_session, "host@example.com", "Hannah Host")


@pytest_asyncio.fixture
async def player_user(db_session):
    """A registered user who joins sessions."""
    return await _make_user(db_session, "player@example.com", "Pat Player")


@pytest_asyncio.fixture
async def other_user(db_session):
    """A second joining user."""
    return await _make_user(db_session, "other@example.com", "Oscar Other")
