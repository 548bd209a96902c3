"""Cooperative cancellation token shared between a caller and the worker."""

from __future__ import annotations

import threading


class CancellationToken:
    """Single flag set by any caller and polled by the extraction loop.

    The worker polls once per bucket, so a request takes effect at the next
    bucket boundary. Observing a set token clears it.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def consume(self) -> bool:
        """Return True and reset the flag if cancellation was requested."""
        if self._event.is_set():
            self._event.clear()
            return True
        return False

    def reset(self) -> None:
        """Drop any pending request without observing it."""
        self._event.clear()
