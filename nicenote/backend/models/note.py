"""
Note Model.

Database model for notes, the only persistent entity.
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nicenote.backend.core.markdown import DEFAULT_NOTE_TITLE
from nicenote.backend.models.base import Base, TimestampMixin, UUIDMixin


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    content is Markdown, already sanitized. summary is derived from
    content by the service layer and is never written by clients.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("idx_notes_updated_at", "updated_at"),
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_NOTE_TITLE,
    )
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    summary: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
