"""
Keyed Debounce.

Trailing-edge debounce built on event-loop timer handles, one handle per
key. Re-arming a key cancels its previous handle; cancellation is
idempotent.
"""

import asyncio
from collections.abc import Callable


class Debouncer:
    """
    Run callback(key) once, delay seconds after the last schedule(key).

    Must be used from inside a running event loop.

    Usage:
        debouncer = Debouncer(1.0, lambda note_id: print("flush", note_id))
        debouncer.schedule("n1")
        debouncer.schedule("n1")  # restarts the timer; one call in total
    """

    def __init__(self, delay: float, callback: Callable[[str], None]) -> None:
        self.delay = delay
        self._callback = callback
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def schedule(self, key: str) -> None:
        """(Re)start the timer for key."""
        self.cancel(key)
        loop = asyncio.get_running_loop()
        self._handles[key] = loop.call_later(self.delay, self._fire, key)

    def cancel(self, key: str) -> bool:
        """Cancel the timer for key. Returns True if one was pending."""
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    def is_pending(self, key: str) -> bool:
        return key in self._handles

    def _fire(self, key: str) -> None:
        self._handles.pop(key, None)
        self._callback(key)
