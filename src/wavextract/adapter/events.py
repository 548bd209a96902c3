"""Event sink interface for progress delivery.

The extraction core never reaches into a global dispatcher; a sink is
injected into each session. Delivery is fire-and-forget.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from typing import Any

logger = logging.getLogger(__name__)

ON_CURRENT_EXTRACTED_WAVEFORM_DATA = "onCurrentExtractedWaveformData"


class EventSink(ABC):
    """Abstract event sink.

    Implementations must not block the caller for long: dispatch is
    invoked from the extraction worker between buckets.
    """

    @abstractmethod
    def dispatch(self, event_name: str, payload: dict[str, Any]) -> None:
        """Deliver one event.

        Args:
            event_name: Event channel name.
            payload: Structured event body.
        """
        pass


class SessionEventSink(EventSink):
    """Per-session wrapper that goes silent once the session is torn down."""

    def __init__(self, inner: EventSink):
        self._inner = inner
        self._torn_down = threading.Event()

    def mark_torn_down(self) -> None:
        """Suppress all further dispatches."""
        self._torn_down.set()

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down.is_set()

    def dispatch(self, event_name: str, payload: dict[str, Any]) -> None:
        if self._torn_down.is_set():
            logger.debug(f"Dropping {event_name}: session torn down")
            return
        self._inner.dispatch(event_name, payload)


class RecordingEventSink(EventSink):
    """Thread-safe in-memory sink.

    Keeps events in arrival order plus the latest progress payload per
    session key. Both are optionally bounded: `history` caps the event
    log (oldest dropped first, 0 keeps none) and `max_sessions` caps the
    number of session keys whose latest payload is retained.
    """

    def __init__(self, history: int | None = None, max_sessions: int | None = None) -> None:
        self._lock = threading.Lock()
        self._events: deque[tuple[str, dict[str, Any]]] = deque(maxlen=history)
        self._latest: OrderedDict[str, dict[str, Any]] = OrderedDict()
        self._max_sessions = max_sessions

    def dispatch(self, event_name: str, payload: dict[str, Any]) -> None:
        with self._lock:
            self._events.append((event_name, payload))
            key = payload.get("sessionKey")
            if event_name == ON_CURRENT_EXTRACTED_WAVEFORM_DATA and key is not None:
                self._latest[key] = payload
                self._latest.move_to_end(key)
                if self._max_sessions is not None and len(self._latest) > self._max_sessions:
                    self._latest.popitem(last=False)

    @property
    def events(self) -> list[tuple[str, dict[str, Any]]]:
        with self._lock:
            return list(self._events)

    def events_for(self, session_key: str) -> list[dict[str, Any]]:
        """Progress payloads dispatched for one session, in order."""
        with self._lock:
            return [
                payload
                for name, payload in self._events
                if name == ON_CURRENT_EXTRACTED_WAVEFORM_DATA
                and payload.get("sessionKey") == session_key
            ]

    def latest(self, session_key: str) -> dict[str, Any] | None:
        """Most recent progress payload for a session, if any."""
        with self._lock:
            return self._latest.get(session_key)

    def forget(self, session_key: str) -> None:
        """Drop recorded state for a session."""
        with self._lock:
            self._latest.pop(session_key, None)
            kept = [
                (name, payload)
                for name, payload in self._events
                if payload.get("sessionKey") != session_key
            ]
            self._events = deque(kept, maxlen=self._events.maxlen)
