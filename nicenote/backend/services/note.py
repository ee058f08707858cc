"""
Note Service.

Business logic layer for notes. Owns content sanitization, summary
derivation, the default title and timestamp handling; the repository
only persists what it is given.
"""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from nicenote.backend.core.exceptions import ValidationError
from nicenote.backend.core.markdown import generate_summary, normalize_title, sanitize_content
from nicenote.backend.core.pagination import DEFAULT_LIMIT, KeysetPage
from nicenote.backend.core.utils import utc_now
from nicenote.backend.models.note import Note
from nicenote.backend.repositories.note import NoteRepository
from nicenote.backend.schemas.note import NoteCreate, NoteUpdate
from nicenote.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, listing and removal with
    proper validation and error handling.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def list_notes(
        self,
        cursor: datetime | None = None,
        cursor_id: str | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> KeysetPage[Note]:
        """
        List one page of notes, newest first.

        Args:
            cursor: updated_at of the last note already seen
            cursor_id: id of the last note already seen
            limit: Page size

        Returns:
            KeysetPage of notes
        """
        self._log_debug("Listing notes", cursor=cursor, cursor_id=cursor_id, limit=limit)
        return await self._execute_db_operation(
            "list_notes",
            self.repo.list_page(cursor=cursor, cursor_id=cursor_id, limit=limit),
        )

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Content is sanitized before it is stored and the summary is
        derived from the sanitized text.
        """
        content = sanitize_content(data.content or "")
        now = utc_now()

        self._log_operation("Creating note", content_length=len(content))

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=normalize_title(data.title),
                content=content,
                summary=generate_summary(content),
                created_at=now,
                updated_at=now,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Update an existing note.

        Only fields present in the request are applied. Content and summary
        are recomputed only when content is supplied; null content is ignored.
        updated_at is rewritten on every call.

        Raises:
            ValidationError: If no field was supplied
            NotFoundError: If note not found
        """
        supplied = data.model_dump(exclude_unset=True)
        if not supplied:
            raise ValidationError(
                "At least one field must be provided for update",
                details={"fields": ["title", "content"]},
            )

        updates: dict[str, Any] = {"updated_at": utc_now()}

        if "title" in supplied:
            updates["title"] = normalize_title(supplied["title"])

        if supplied.get("content") is not None:
            content = sanitize_content(supplied["content"])
            updates["content"] = content
            updates["summary"] = generate_summary(content)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=sorted(supplied.keys()),
        )

        return await self._execute_db_operation(
            "update_note",
            self.repo.update(note_id, **updates),
        )

    async def delete_note(self, note_id: str) -> bool:
        """
        Delete a note.

        Returns:
            True if the note existed and was removed, False otherwise.
            Deleting twice is not an error.
        """
        self._log_operation("Deleting note", note_id=note_id)

        removed = await self._execute_db_operation(
            "delete_note",
            self.repo.delete(note_id),
        )
        if not removed:
            self._log_debug("Note already absent", note_id=note_id)
        return removed
