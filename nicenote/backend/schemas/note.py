"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from nicenote.backend.core.utils import to_iso
from nicenote.backend.schemas.base import CamelModel, TimestampedModel


class NoteCreate(BaseModel):
    """Schema for creating a new note. Both fields are optional."""

    title: str | None = Field(
        default=None,
        max_length=255,
        description="Note title; empty or missing becomes 'Untitled'",
        examples=["My First Note"],
    )
    content: str | None = Field(
        default=None,
        description="Markdown content",
        examples=["# Heading\n\nSome *markdown*."],
    )

    model_config = ConfigDict(extra="forbid")


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. At least one field is required."""

    title: str | None = Field(
        default=None,
        max_length=255,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Markdown content",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def _title_not_null(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("title may be omitted but not null")
        return value

    @model_validator(mode="after")
    def _require_a_field(self) -> "NoteUpdate":
        if not self.model_fields_set & {"title", "content"}:
            raise ValueError("At least one field must be provided for update")
        return self


class NoteResponse(TimestampedModel):
    """Schema for a full note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str | None = Field(description="Markdown content")
    summary: str | None = Field(default=None, description="Derived plain-text excerpt")


class NoteListItem(TimestampedModel):
    """Schema for a note in list responses (no content)."""

    id: str
    title: str
    summary: str | None = None


class NoteListResponse(CamelModel):
    """One page of notes plus the cursor for the next page."""

    data: list[NoteListItem]
    next_cursor: datetime | None = None
    next_cursor_id: str | None = None

    @field_serializer("next_cursor")
    def _serialize_cursor(self, value: datetime | None) -> str | None:
        return to_iso(value) if value is not None else None
