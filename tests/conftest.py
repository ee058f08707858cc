"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    By default, tests use an in-memory SQLite database for speed.
    To test against another database, set the TEST_DATABASE_URL
    environment variable:

        export TEST_DATABASE_URL="sqlite+aiosqlite:///./test.db"

    Tables are created fresh for every test and dropped afterwards.
"""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from nicenote.backend.models.base import Base
from nicenote.backend.models.note import Note


# =============================================================================
# Database Configuration
# =============================================================================


def get_test_database_url() -> str:
    """
    Get the test database URL.

    Returns TEST_DATABASE_URL if set, otherwise uses in-memory SQLite.
    """
    return os.environ.get(
        "TEST_DATABASE_URL",
        "sqlite+aiosqlite:///:memory:",
    )


def is_sqlite() -> bool:
    """Check if using SQLite database."""
    return "sqlite" in get_test_database_url()


# =============================================================================
# Database Engine Fixtures
# =============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create the test database engine.

    SQLite in-memory needs a single shared connection (StaticPool) so every
    session sees the same database.
    """
    url = get_test_database_url()

    if is_sqlite():
        engine = create_async_engine(
            url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# =============================================================================
# Database Session Fixtures
# =============================================================================


@pytest.fixture
async def db_session(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a database session for a single test.

    Changes are rolled back after the test.

    Usage:
        async def test_create_note(db_session: AsyncSession):
            note = Note(title="Hello")
            db_session.add(note)
            await db_session.flush()
            assert note.id is not None
    """
    async with db_session_factory() as session:
        yield session
        await session.rollback()


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def make_note(db_session: AsyncSession):
    """
    Insert a note with explicit timestamps.

    Usage:
        note = await make_note("Groceries", updated_at=datetime(2026, 2, 14))
    """
    base = datetime(2026, 2, 14, 12, 0, 0)

    async def factory(
        title: str = "Note",
        content: str = "",
        updated_at: datetime | None = None,
        note_id: str | None = None,
    ) -> Note:
        stamp = updated_at or base
        fields = {
            "title": title,
            "content": content,
            "summary": None,
            "created_at": stamp - timedelta(minutes=1),
            "updated_at": stamp,
        }
        if note_id is not None:
            fields["id"] = note_id
        note = Note(**fields)
        db_session.add(note)
        await db_session.flush()
        return note

    return factory
