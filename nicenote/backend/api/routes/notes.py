"""
Notes API Endpoints.

REST API endpoints for note management.
"""

from fastapi import APIRouter, Depends

from nicenote.backend.core.dependencies import DbSession, RequestId
from nicenote.backend.core.exceptions import NotFoundError
from nicenote.backend.core.pagination import KeysetParams, get_keyset_params
from nicenote.backend.schemas.base import DeleteResponse, ErrorResponse
from nicenote.backend.schemas.note import (
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from nicenote.backend.services.note import NoteService

router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note not found"}}


@router.get(
    "",
    response_model=NoteListResponse,
    summary="List notes (keyset paginated)",
    description=(
        "Get one page of notes ordered by updatedAt then id, newest first. "
        "Pass nextCursor/nextCursorId from the previous page as cursor/cursorId."
    ),
)
async def list_notes(
    db: DbSession,
    request_id: RequestId,
    pagination: KeysetParams = Depends(get_keyset_params),
) -> NoteListResponse:
    """List notes one page at a time."""
    service = NoteService(db)
    page = await service.list_notes(
        cursor=pagination.cursor,
        cursor_id=pagination.cursor_id,
        limit=pagination.limit,
    )
    return NoteListResponse(
        data=[NoteListItem.model_validate(note) for note in page.items],
        next_cursor=page.next_cursor,
        next_cursor_id=page.next_cursor_id,
    )


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_NOT_FOUND,
    summary="Get a note",
    description="Get a single note by ID.",
)
async def get_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
) -> NoteResponse:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    return NoteResponse.model_validate(note)


@router.post(
    "",
    response_model=NoteResponse,
    status_code=201,
    summary="Create a note",
    description="Create a new note. Title defaults to 'Untitled', content to empty.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    request_id: RequestId,
) -> NoteResponse:
    """Create a new note."""
    service = NoteService(db)
    note = await service.create_note(data)
    return NoteResponse.model_validate(note)


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_NOT_FOUND,
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    request_id: RequestId,
) -> NoteResponse:
    """Update a note."""
    service = NoteService(db)
    note = await service.update_note(note_id, data)
    return NoteResponse.model_validate(note)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses=_NOT_FOUND,
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
) -> DeleteResponse:
    """Delete a note."""
    service = NoteService(db)
    if not await service.delete_note(note_id):
        raise NotFoundError(f"Note not found: {note_id}")
    return DeleteResponse()
