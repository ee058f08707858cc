"""
Toast Notifications.

Short-lived, user-facing messages. The autosave pipeline and the client
session post here when something fails that the user should know about.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from nicenote.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

DEFAULT_DURATION_MS = 5000


@dataclass(frozen=True)
class Toast:
    id: str
    message: str


ToastListener = Callable[[list[Toast]], None]


class NotificationChannel:
    """
    Ordered list of active toasts with timed auto-dismissal.

    Each instance owns its own toasts, id counter and listeners.
    Auto-dismissal needs a running event loop; without one, toasts stay
    until removed.
    """

    def __init__(self, duration_ms: int = DEFAULT_DURATION_MS) -> None:
        self.duration_ms = duration_ms
        self._toasts: list[Toast] = []
        self._next_id = 0
        self._listeners: list[ToastListener] = []
        self._timers: dict[str, asyncio.TimerHandle] = {}

    @property
    def toasts(self) -> list[Toast]:
        return list(self._toasts)

    def subscribe(self, listener: ToastListener) -> Callable[[], None]:
        """Register a listener called with the toast list on every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, message: str) -> str:
        """Show a toast. Returns its id."""
        self._next_id += 1
        toast_id = str(self._next_id)
        self._toasts.append(Toast(id=toast_id, message=message))

        log_with_source(logger, "client", "info", "Toast shown", toast_id=toast_id, toast=message)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timers[toast_id] = loop.call_later(
                self.duration_ms / 1000, self.remove, toast_id
            )

        self._notify()
        return toast_id

    def remove(self, toast_id: str) -> None:
        handle = self._timers.pop(toast_id, None)
        if handle is not None:
            handle.cancel()
        remaining = [t for t in self._toasts if t.id != toast_id]
        if len(remaining) != len(self._toasts):
            self._toasts = remaining
            self._notify()

    def clear(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        if self._toasts:
            self._toasts = []
            self._notify()

    def _notify(self) -> None:
        snapshot = self.toasts
        for listener in list(self._listeners):
            listener(snapshot)
