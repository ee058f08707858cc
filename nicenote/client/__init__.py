"""
Editor Client.

Client-side half of NiceNote: HTTP transport, note cache, debounced
autosave and toast notifications.

Usage:
    from nicenote.client import NotesSession

    async with NotesSession.from_config() as session:
        await session.load_notes()
"""

from nicenote.client.api import (
    ApiRequestError,
    ClientApiError,
    InvalidResponseError,
    NotesApiClient,
    NotesClientError,
    NotFoundApiError,
    ServerApiError,
)
from nicenote.client.autosave import AutosavePipeline, SaveStatus
from nicenote.client.cache import NoteCache
from nicenote.client.notifications import NotificationChannel
from nicenote.client.session import LoadState, NotesSession

__all__ = [
    "ApiRequestError",
    "AutosavePipeline",
    "ClientApiError",
    "InvalidResponseError",
    "LoadState",
    "NoteCache",
    "NotesApiClient",
    "NotesClientError",
    "NotesSession",
    "NotFoundApiError",
    "NotificationChannel",
    "SaveStatus",
    "ServerApiError",
]
