# Pydantic schemas package
from nicenote.backend.schemas.base import (
    CamelModel,
    DeleteResponse,
    ErrorResponse,
    TimestampedModel,
)
from nicenote.backend.schemas.note import (
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)

__all__ = [
    "CamelModel",
    "DeleteResponse",
    "ErrorResponse",
    "NoteCreate",
    "NoteListItem",
    "NoteListResponse",
    "NoteResponse",
    "NoteUpdate",
    "TimestampedModel",
]
