"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases
or the network.
"""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from nicenote.client.api import NotesApiClient
from nicenote.client.models import Note, NoteListItem, NotesPage


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = note
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    result.rowcount = 0
    return result


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                ...
                mock_logger.warning.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger


# =============================================================================
# Client Data Fixtures
# =============================================================================


BASE_TIME = datetime(2026, 2, 14, 12, 0, 0, tzinfo=timezone.utc)


def build_note(
    note_id: str = "n1",
    title: str = "Groceries",
    content: str | None = "- milk\n- eggs",
    summary: str | None = "milk eggs",
    updated_at: datetime = BASE_TIME,
) -> Note:
    return Note(
        id=note_id,
        title=title,
        content=content,
        summary=summary,
        created_at=updated_at,
        updated_at=updated_at,
    )


def build_page(
    notes: list[Note],
    next_cursor: str | None = None,
    next_cursor_id: str | None = None,
) -> NotesPage:
    return NotesPage(
        data=[NoteListItem.from_note(note) for note in notes],
        next_cursor=next_cursor,
        next_cursor_id=next_cursor_id,
    )


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Factory for client-side Note records."""
    return build_note


@pytest.fixture
def make_page() -> Callable[..., NotesPage]:
    """Factory for NotesPage built from client Notes."""
    return build_page


# =============================================================================
# Async Helpers
# =============================================================================


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays and returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep() -> SleepRecorder:
    return SleepRecorder()


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


class RecordingTransport:
    """
    httpx.MockTransport wrapper that records every request.

    Usage:
        transport = RecordingTransport(lambda request: httpx.Response(200, json={}))
        client = NotesApiClient("http://test", 1.0, transport=transport.mock)
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.mock = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def mock_api() -> Callable[..., tuple[NotesApiClient, RecordingTransport]]:
    """
    Build a NotesApiClient backed by a recording mock transport.

    Usage:
        api, transport = mock_api(lambda request: httpx.Response(200, json=...))
    """

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> tuple[NotesApiClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        return NotesApiClient("http://test", 1.0, transport=transport.mock), transport

    return factory
