"""
Notes Session.

One editor session: the note list, open notes, create/delete with
optimistic cache updates, and autosave of edits. Front ends (the CLI or
any UI) drive a session instead of talking to the API directly.
"""

from enum import Enum
from typing import Any

import httpx

from nicenote.backend.core.config import get_app_config
from nicenote.backend.core.logging import get_logger, log_with_source
from nicenote.backend.core.markdown import DEFAULT_NOTE_TITLE
from nicenote.client.api import NotesApiClient, NotesClientError, NotFoundApiError
from nicenote.client.autosave import AutosavePipeline
from nicenote.client.cache import NoteCache
from nicenote.client.models import Note, NoteListItem
from nicenote.client.notifications import NotificationChannel

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50

CREATE_FAILED_MESSAGE = "Failed to create note. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete note. Please try again."

_REQUEST_ERRORS = (NotesClientError, httpx.HTTPError)


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class NotesSession:
    """
    Client-side state for one editor session.

    Usage:
        async with NotesSession.from_config() as session:
            await session.load_notes()
            note = await session.create_note()
            session.edit(note.id, content="# Hello")
    """

    def __init__(
        self,
        api: NotesApiClient,
        *,
        cache: NoteCache | None = None,
        notifications: NotificationChannel | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        **autosave_options: Any,
    ) -> None:
        """
        Args:
            api: Transport to the Notes API
            cache: Shared cache, or a fresh one
            notifications: Toast channel, or a fresh one
            page_size: Notes requested per list page
            **autosave_options: Passed through to AutosavePipeline
        """
        self.api = api
        self.cache = cache if cache is not None else NoteCache()
        self.notifications = notifications if notifications is not None else NotificationChannel()
        self.page_size = page_size
        self.autosave = AutosavePipeline(
            api.update_note,
            self.cache,
            self.notifications,
            **autosave_options,
        )
        self.list_state = LoadState.IDLE
        self.selected_note_id: str | None = None
        self._detail_states: dict[str, LoadState] = {}

    @classmethod
    def from_config(cls, api: NotesApiClient | None = None, **overrides: Any) -> "NotesSession":
        """Build a session with the timings from config/settings/client.yaml."""
        client_config = get_app_config().client
        options: dict[str, Any] = {
            "notifications": NotificationChannel(client_config.notifications.duration_ms),
            "page_size": client_config.list.page_size,
            "debounce_ms": client_config.autosave.debounce_ms,
            "max_retries": client_config.autosave.max_retries,
            "retry_delays": tuple(client_config.autosave.retry_delays_ms),
            "saved_display_ms": client_config.autosave.saved_display_ms,
        }
        options.update(overrides)
        return cls(api if api is not None else NotesApiClient(), **options)

    async def __aenter__(self) -> "NotesSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load_notes(self) -> list[NoteListItem]:
        """
        Fetch the first page, dropping any pages cached so far.

        Raises whatever the transport raised, after marking the list FAILED.
        """
        self.list_state = LoadState.LOADING
        try:
            page = await self.api.list_notes(limit=self.page_size)
        except Exception:
            self.list_state = LoadState.FAILED
            log_with_source(logger, "client", "warning", "Note list failed to load")
            raise
        self.cache.set_first_page(page)
        self.list_state = LoadState.LOADED
        return list(page.data)

    async def load_more(self) -> list[NoteListItem]:
        """Fetch the page after the last cached one. Returns the new items."""
        params = self.cache.next_page_params()
        if params is None:
            return []
        cursor, cursor_id = params

        self.list_state = LoadState.LOADING
        try:
            page = await self.api.list_notes(cursor=cursor, cursor_id=cursor_id, limit=self.page_size)
        except Exception:
            self.list_state = LoadState.FAILED
            log_with_source(logger, "client", "warning", "Next note page failed to load", cursor=cursor)
            raise
        self.cache.append_page(page)
        self.list_state = LoadState.LOADED
        return list(page.data)

    @property
    def has_more(self) -> bool:
        return self.cache.next_page_params() is not None

    def detail_state(self, note_id: str) -> LoadState:
        return self._detail_states.get(note_id, LoadState.IDLE)

    async def open_note(self, note_id: str) -> Note:
        """Load a note's full record and select it."""
        self.selected_note_id = note_id
        self._detail_states[note_id] = LoadState.LOADING
        try:
            note = await self.api.get_note(note_id)
        except Exception:
            self._detail_states[note_id] = LoadState.FAILED
            log_with_source(logger, "client", "warning", "Note failed to load", note_id=note_id)
            raise
        self.cache.set_detail(note)
        self._detail_states[note_id] = LoadState.LOADED
        return note

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_note(self) -> Note | None:
        """
        Create an empty note, put it at the head of the list and select it.

        Returns None (and shows a toast) if the server refused.
        """
        try:
            note = await self.api.create_note(title=DEFAULT_NOTE_TITLE, content="")
        except _REQUEST_ERRORS as e:
            log_with_source(logger, "client", "warning", "Note create failed", error=str(e))
            self.notifications.add(CREATE_FAILED_MESSAGE)
            return None

        self.cache.set_detail(note)
        self.cache.insert_at_head(NoteListItem.from_note(note))
        self._detail_states[note.id] = LoadState.LOADED
        self.selected_note_id = note.id
        return note

    async def delete_note(self, note_id: str) -> bool:
        """
        Delete a note, removing it from the cache before the server answers.

        On failure the list entry is put back (first page re-sorted), the
        detail record restored and a toast shown. A 404 counts as deleted.
        """
        self.autosave.cancel_pending_save(note_id)

        list_entry = self.cache.read_list_entry(note_id)
        detail = self.cache.read_detail(note_id)
        self.cache.remove(note_id)
        if self.selected_note_id == note_id:
            self.selected_note_id = None

        try:
            await self.api.delete_note(note_id)
        except NotFoundApiError:
            log_with_source(logger, "client", "debug", "Note already deleted", note_id=note_id)
        except _REQUEST_ERRORS as e:
            log_with_source(logger, "client", "warning", "Note delete failed", note_id=note_id, error=str(e))
            if list_entry is not None:
                self.cache.restore_list_entry(list_entry)
            if detail is not None:
                self.cache.set_detail(detail)
            self.notifications.add(DELETE_FAILED_MESSAGE)
            return False

        self._detail_states.pop(note_id, None)
        return True

    def edit(
        self,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> None:
        """Queue an edit for autosave. Fields left as None are not touched."""
        updates: dict[str, Any] = {}
        if title is not None:
            updates["title"] = title
        if content is not None:
            updates["content"] = content
        if updates:
            self.autosave.schedule_save(note_id, updates)

    async def close(self) -> None:
        """Send queued edits once (no retries), wait for saves in flight, release the transport."""
        self.autosave.close()
        await self.autosave.drain()
        self.notifications.clear()
        await self.api.close()
