"""
Unit Tests for Note Service.

Tests the NoteService business logic with mocked dependencies.
"""

from datetime import datetime

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from nicenote.backend.core.exceptions import NotFoundError, ValidationError
from nicenote.backend.core.pagination import KeysetPage
from nicenote.backend.schemas.note import NoteCreate, NoteUpdate
from nicenote.backend.services.note import NoteService

FIXED_NOW = datetime(2026, 2, 14, 12, 0, 0)


@pytest.fixture
def service(mock_db_session):
    """Create NoteService with mocked session."""
    return NoteService(mock_db_session)


class TestNoteServiceCreate:
    """Tests for note creation."""

    @pytest.mark.asyncio
    async def test_create_note_sanitizes_and_summarizes(self, service):
        """Should store sanitized content, its summary and one timestamp for both fields."""
        mock_note = MagicMock(id="note-123")

        with patch.object(service.repo, "create", AsyncMock(return_value=mock_note)) as mock_create, \
             patch("nicenote.backend.services.note.utc_now", return_value=FIXED_NOW):
            data = NoteCreate(title="Links", content="Try [this](javascript:alert(1))")
            result = await service.create_note(data)

        mock_create.assert_awaited_once_with(
            title="Links",
            content="Try [this](#)",
            summary="Try this",
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        assert result is mock_note

    @pytest.mark.asyncio
    async def test_create_note_defaults(self, service):
        """Missing title becomes the default, missing content becomes empty."""
        with patch.object(service.repo, "create", AsyncMock(return_value=MagicMock())) as mock_create:
            await service.create_note(NoteCreate())

        kwargs = mock_create.call_args.kwargs
        assert kwargs["title"] == "Untitled"
        assert kwargs["content"] == ""
        assert kwargs["summary"] is None

    @pytest.mark.asyncio
    async def test_blank_title_becomes_default(self, service):
        with patch.object(service.repo, "create", AsyncMock(return_value=MagicMock())) as mock_create:
            await service.create_note(NoteCreate(title="   ", content="x"))

        assert mock_create.call_args.kwargs["title"] == "Untitled"


class TestNoteServiceGet:
    """Tests for getting notes."""

    @pytest.mark.asyncio
    async def test_get_note_success(self, service):
        mock_note = MagicMock(id="note-123", title="Found Note")

        with patch.object(service.repo, "get_by_id", AsyncMock(return_value=mock_note)):
            result = await service.get_note("note-123")

        assert result.title == "Found Note"

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, service):
        with patch.object(service.repo, "get_by_id", AsyncMock(side_effect=NotFoundError("Note not found"))):
            with pytest.raises(NotFoundError):
                await service.get_note("nonexistent")


class TestNoteServiceList:
    """Tests for listing notes."""

    @pytest.mark.asyncio
    async def test_passes_cursor_through(self, service):
        page = KeysetPage(items=[MagicMock(), MagicMock()])

        with patch.object(service.repo, "list_page", AsyncMock(return_value=page)) as mock_list:
            result = await service.list_notes(cursor=FIXED_NOW, cursor_id="abc", limit=2)

        mock_list.assert_awaited_once_with(cursor=FIXED_NOW, cursor_id="abc", limit=2)
        assert result is page


class TestNoteServiceUpdate:
    """Tests for note updates."""

    @pytest.mark.asyncio
    async def test_content_update_resanitizes_and_resummarizes(self, service):
        with patch.object(service.repo, "update", AsyncMock(return_value=MagicMock())) as mock_update, \
             patch("nicenote.backend.services.note.utc_now", return_value=FIXED_NOW):
            await service.update_note("n1", NoteUpdate(content="# New [x](vbscript:y)"))

        mock_update.assert_awaited_once_with(
            "n1",
            updated_at=FIXED_NOW,
            content="# New [x](#)",
            summary="New x",
        )

    @pytest.mark.asyncio
    async def test_title_only_update_leaves_content_alone(self, service):
        with patch.object(service.repo, "update", AsyncMock(return_value=MagicMock())) as mock_update:
            await service.update_note("n1", NoteUpdate(title="Renamed"))

        kwargs = mock_update.call_args.kwargs
        assert kwargs["title"] == "Renamed"
        assert "content" not in kwargs
        assert "summary" not in kwargs
        assert "updated_at" in kwargs

    @pytest.mark.asyncio
    async def test_null_content_is_ignored(self, service):
        with patch.object(service.repo, "update", AsyncMock(return_value=MagicMock())) as mock_update:
            await service.update_note("n1", NoteUpdate(title="Kept", content=None))

        kwargs = mock_update.call_args.kwargs
        assert "content" not in kwargs
        assert "summary" not in kwargs

    @pytest.mark.asyncio
    async def test_empty_title_update_becomes_default(self, service):
        with patch.object(service.repo, "update", AsyncMock(return_value=MagicMock())) as mock_update:
            await service.update_note("n1", NoteUpdate(title=""))

        assert mock_update.call_args.kwargs["title"] == "Untitled"

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, service):
        """A payload with no fields never reaches the repository."""
        data = NoteUpdate.model_construct()

        with patch.object(service.repo, "update", AsyncMock()) as mock_update:
            with pytest.raises(ValidationError):
                await service.update_note("n1", data)

        mock_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_note(self, service):
        with patch.object(service.repo, "update", AsyncMock(side_effect=NotFoundError())):
            with pytest.raises(NotFoundError):
                await service.update_note("missing", NoteUpdate(title="x"))

    def test_update_schema_requires_a_field(self):
        from pydantic import ValidationError as PydanticValidationError

        with pytest.raises(PydanticValidationError):
            NoteUpdate()

    def test_update_schema_rejects_null_title(self):
        from pydantic import ValidationError as PydanticValidationError

        with pytest.raises(PydanticValidationError, match="not null"):
            NoteUpdate(title=None)

        assert NoteUpdate(content="x").title is None


class TestNoteServiceDelete:
    """Tests for note deletion."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, service):
        with patch.object(service.repo, "delete", AsyncMock(return_value=True)):
            assert await service.delete_note("n1") is True

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_an_error(self, service):
        with patch.object(service.repo, "delete", AsyncMock(return_value=False)):
            assert await service.delete_note("n1") is False
