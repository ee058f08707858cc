"""
Autosave Pipeline.

Per-note pending updates, trailing-edge debounce, retried saves and
cache rollback when the retry budget is spent.

Lifecycle of one note:
    idle -> unsaved (edit) -> saving (flush) -> saved -> idle

Edits made while a save is in flight keep the note unsaved and are flushed
by a fresh debounce cycle once the flight resolves. A flush that exhausts
its retries rolls the cache back to the state captured when the flush
started, puts the failed updates back in the queue and posts one toast.
It does not re-arm the debounce; the next edit or close() retries them.

Usage:
    pipeline = AutosavePipeline(api.update_note, cache, notifications)
    pipeline.schedule_save(note_id, {"title": "Draft"})
    ...
    await pipeline.drain()
"""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_chain,
    wait_fixed,
    wait_none,
)

from nicenote.backend.core.logging import get_logger, log_with_source
from nicenote.backend.core.resilience import log_retry
from nicenote.client.api import ClientApiError
from nicenote.client.cache import NoteCache
from nicenote.client.debounce import Debouncer
from nicenote.client.models import Note
from nicenote.client.notifications import NotificationChannel

logger = get_logger(__name__)

DEBOUNCE_MS = 1000
MAX_RETRIES = 3
RETRY_DELAYS: tuple[int, ...] = (1000, 2000)
SAVED_DISPLAY_MS = 2000

SAVE_FAILED_MESSAGE = "Failed to save note. Your changes may not be persisted."

SaveFn = Callable[[str, dict[str, Any]], Awaitable[Note]]
SleepFn = Callable[[float], Awaitable[None]]


class SaveStatus(str, Enum):
    """Save state shown to the user. Declared in display priority order."""

    SAVING = "saving"
    UNSAVED = "unsaved"
    SAVED = "saved"
    IDLE = "idle"


@dataclass
class PendingSaveEntry:
    """Unsaved edits for one note."""

    updates: dict[str, Any] = field(default_factory=dict)
    saving: bool = False


def is_retryable(exc: BaseException) -> bool:
    """Anything except a 4xx answer is worth another attempt."""
    return not isinstance(exc, ClientApiError)


def _retry_wait(delays_ms: Sequence[int]) -> Any:
    if not delays_ms:
        return wait_none()
    return wait_chain(*(wait_fixed(ms / 1000) for ms in delays_ms))


async def attempt_save(
    save: SaveFn,
    note_id: str,
    updates: dict[str, Any],
    *,
    max_retries: int = MAX_RETRIES,
    retry_delays: Sequence[int] = RETRY_DELAYS,
    sleep: SleepFn = asyncio.sleep,
) -> Note | None:
    """
    Call save(note_id, updates) until it succeeds or the budget is spent.

    Attempt n+1 waits retry_delays[n-1] milliseconds; there is no wait after
    the final attempt. Client errors (4xx) end the loop at once.

    Returns:
        The saved note, or None if every attempt failed
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=_retry_wait(retry_delays),
        retry=retry_if_exception(is_retryable),
        before_sleep=log_retry,
        sleep=sleep,
        reraise=True,
    )
    try:
        return await retrying(save, note_id, updates)
    except Exception as e:
        log_with_source(
            logger,
            "client",
            "warning",
            "Note save failed",
            note_id=note_id,
            fields=sorted(updates),
            error=str(e),
            error_type=type(e).__name__,
        )
        return None


class AutosavePipeline:
    """
    Debounced, retried autosave for any number of notes.

    Must be driven from inside a running event loop. Failures never escape
    a flush: they end in a rollback and a toast.
    """

    def __init__(
        self,
        save: SaveFn,
        cache: NoteCache,
        notifications: NotificationChannel,
        *,
        debounce_ms: int = DEBOUNCE_MS,
        max_retries: int = MAX_RETRIES,
        retry_delays: Sequence[int] = RETRY_DELAYS,
        saved_display_ms: int = SAVED_DISPLAY_MS,
        sleep: SleepFn = asyncio.sleep,
        on_status: Callable[[SaveStatus], None] | None = None,
    ) -> None:
        self._save = save
        self._cache = cache
        self._notifications = notifications
        self.debounce_ms = debounce_ms
        self.max_retries = max_retries
        self.retry_delays = tuple(retry_delays)
        self.saved_display_ms = saved_display_ms
        self._sleep = sleep
        self._on_status = on_status

        self._entries: dict[str, PendingSaveEntry] = {}
        self._debouncer = Debouncer(debounce_ms / 1000, self._on_timer)
        self._tasks: set[asyncio.Task[Any]] = set()
        self._saved_timers: dict[str, asyncio.TimerHandle] = {}
        self._status = SaveStatus.IDLE

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @property
    def status(self) -> SaveStatus:
        """Overall status: saving > unsaved > saved > idle."""
        return self._status

    def status_of(self, note_id: str) -> SaveStatus:
        entry = self._entries.get(note_id)
        if entry is not None:
            # Edits typed during a flight keep the note unsaved.
            return SaveStatus.SAVING if entry.saving and not entry.updates else SaveStatus.UNSAVED
        if note_id in self._saved_timers:
            return SaveStatus.SAVED
        return SaveStatus.IDLE

    def pending_updates(self, note_id: str) -> dict[str, Any]:
        """Copy of the queued, unsent updates for a note."""
        entry = self._entries.get(note_id)
        return dict(entry.updates) if entry is not None else {}

    def has_pending(self, note_id: str) -> bool:
        return note_id in self._entries

    def _compute_status(self) -> SaveStatus:
        per_note = {self.status_of(note_id) for note_id in self._entries}
        for status in (SaveStatus.SAVING, SaveStatus.UNSAVED):
            if status in per_note:
                return status
        if self._saved_timers:
            return SaveStatus.SAVED
        return SaveStatus.IDLE

    def _publish(self) -> None:
        status = self._compute_status()
        if status is self._status:
            return
        self._status = status
        if self._on_status is not None:
            self._on_status(status)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def schedule_save(self, note_id: str, updates: dict[str, Any]) -> None:
        """
        Queue an edit: merge it, patch the cache now, restart the debounce.

        Later values win per field.
        """
        entry = self._entries.setdefault(note_id, PendingSaveEntry())
        entry.updates.update(updates)
        self._cache.apply_local_edit(note_id, updates)
        self._clear_saved(note_id)
        self._debouncer.schedule(note_id)
        self._publish()

    def cancel_pending_save(self, note_id: str) -> None:
        """Stop the timer and drop queued updates. A flight in progress finishes on its own."""
        self._debouncer.cancel(note_id)
        self._entries.pop(note_id, None)
        self._clear_saved(note_id)
        self._publish()

    async def flush(self, note_id: str) -> None:
        """Send the queued updates for one note now."""
        entry = self._entries.get(note_id)
        if entry is None or entry.saving:
            return

        self._debouncer.cancel(note_id)

        if not entry.updates:
            del self._entries[note_id]
            self._publish()
            return

        snapshot = self._cache.snapshot(note_id)
        updates = entry.updates
        entry.updates = {}
        entry.saving = True
        self._publish()

        saved = await attempt_save(
            self._save,
            note_id,
            updates,
            max_retries=self.max_retries,
            retry_delays=self.retry_delays,
            sleep=self._sleep,
        )

        entry.saving = False
        if self._entries.get(note_id) is not entry:
            # Cancelled or closed while in flight
            if saved is not None:
                self._cache.merge_server_timestamps(note_id, saved)
            self._publish()
            return

        if saved is not None:
            self._cache.merge_server_timestamps(note_id, saved)
            if entry.updates:
                self._debouncer.schedule(note_id)
            else:
                del self._entries[note_id]
                self._mark_saved(note_id)
            log_with_source(logger, "client", "debug", "Note saved", note_id=note_id)
        else:
            self._cache.restore(snapshot)
            entry.updates = {**updates, **entry.updates}
            self._notifications.add(SAVE_FAILED_MESSAGE)

        self._publish()

    def close(self) -> list[asyncio.Task[Any]]:
        """
        Tear down: cancel every timer and fire one unretried save per note
        with queued updates.

        Does not wait for those saves. The tasks are returned for callers
        that are about to stop their event loop.
        """
        self._debouncer.cancel_all()

        tasks = []
        for note_id, entry in self._entries.items():
            if not entry.updates:
                continue
            tasks.append(self._spawn(attempt_save(
                self._save,
                note_id,
                dict(entry.updates),
                max_retries=1,
                retry_delays=(),
                sleep=self._sleep,
            )))
        self._entries.clear()

        for handle in self._saved_timers.values():
            handle.cancel()
        self._saved_timers.clear()

        self._publish()
        return tasks

    async def drain(self) -> None:
        """Wait for every flush and teardown save started so far."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _on_timer(self, note_id: str) -> None:
        self._spawn(self.flush(note_id))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _mark_saved(self, note_id: str) -> None:
        self._clear_saved(note_id)
        loop = asyncio.get_running_loop()
        self._saved_timers[note_id] = loop.call_later(
            self.saved_display_ms / 1000, self._expire_saved, note_id
        )

    def _expire_saved(self, note_id: str) -> None:
        self._saved_timers.pop(note_id, None)
        self._publish()

    def _clear_saved(self, note_id: str) -> None:
        handle = self._saved_timers.pop(note_id, None)
        if handle is not None:
            handle.cancel()
