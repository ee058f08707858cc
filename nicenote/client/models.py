"""
Client Models.

Pydantic models for API payloads as seen by the editor client. Every
response is validated against these before it reaches the cache.
"""

from pydantic import Field

from nicenote.backend.schemas.base import CamelModel, TimestampedModel


class Note(TimestampedModel):
    """Full note record, as returned by GET/POST/PATCH /notes."""

    id: str
    title: str
    content: str | None = None
    summary: str | None = None


class NoteListItem(TimestampedModel):
    """Note as it appears in a list page (no content)."""

    id: str
    title: str
    summary: str | None = None

    @classmethod
    def from_note(cls, note: Note) -> "NoteListItem":
        return cls(
            id=note.id,
            title=note.title,
            summary=note.summary,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NotesPage(CamelModel):
    """
    One page of the note list.

    The cursor pair is kept as the server sent it and echoed back verbatim
    when the next page is requested.
    """

    data: list[NoteListItem] = Field(default_factory=list)
    next_cursor: str | None = None
    next_cursor_id: str | None = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_cursor and self.next_cursor_id)
