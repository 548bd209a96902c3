"""Extraction service: the boundary between callers and the extraction core.

Architecture:
- ExtractionService: owns the worker pool, per-session tokens and sinks
- _run_session: resolve -> open (materialize) -> extract, on the worker;
  the session token is reset once its last queued run ends
- Every WaveformError is converted to an ErrorPayload on the outcome;
  cancellation resolves with neither data nor error
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from wavextract.adapter.events import EventSink, SessionEventSink
from wavextract.adapter.locator import resolve_locator
from wavextract.adapter.media.source import open_source
from wavextract.config import ExtractorSettings
from wavextract.core.cancel import CancellationToken
from wavextract.core.extractor import WaveformExtractor
from wavextract.errors import WaveformError
from wavextract.models.domain import ExtractionOutcome, ExtractionRequest
from wavextract.models.types import SourceDescriptor

logger = logging.getLogger(__name__)


@dataclass
class _Session:
    """Bookkeeping for one session key."""

    token: CancellationToken
    sink: SessionEventSink
    future: Future | None = None
    pending: int = 0


class ExtractionService:
    """Runs extraction sessions on a dedicated worker.

    Usage:
        service = ExtractionService(sink)
        outcome = service.extract("player-1", path="song.wav", samples_per_pixel=200)
        if outcome.error:
            report(outcome.error.code, outcome.error.message)
    """

    def __init__(self, sink: EventSink, settings: ExtractorSettings | None = None):
        """Initialize service.

        Args:
            sink: Event sink receiving progress events of every session.
            settings: Extractor settings (defaults if omitted).
        """
        self.sink = sink
        self.settings = settings or ExtractorSettings()
        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="wavextract",
        )
        self._sessions: dict[str, _Session] = {}
        self._lock = threading.Lock()

    def _session_locked(self, session_key: str) -> _Session:
        session = self._sessions.pop(session_key, None)
        if session is None:
            session = _Session(token=CancellationToken(), sink=SessionEventSink(self.sink))
        self._sessions[session_key] = session
        self._prune_locked(keep=session_key)
        return session

    def _prune_locked(self, keep: str) -> None:
        excess = len(self._sessions) - self.settings.max_retained_sessions
        if excess <= 0:
            return
        idle = [
            key for key, session in self._sessions.items() if key != keep and session.pending == 0
        ]
        for key in idle[:excess]:
            del self._sessions[key]
            logger.debug(f"Evicted idle session {key!r}")

    def submit(
        self,
        session_key: str,
        *,
        path: str | Path | None = None,
        source: SourceDescriptor | Mapping[str, Any] | None = None,
        samples_per_pixel: int | None = None,
        offset: int | None = 0,
        length: int | None = None,
    ) -> Future:
        """Schedule an extraction on the worker.

        Args:
            session_key: Key identifying the session and its events.
            path: Local path or URL of the audio.
            source: Structured source (uri + headers); wins over path.
            samples_per_pixel: Output bucket count (settings default if None).
            offset: Start bucket; None or negative is relative to the
                current read position.
            length: Maximum number of buckets to produce.

        Returns:
            Future resolving to an ExtractionOutcome. It never raises a
            WaveformError.
        """
        if samples_per_pixel is None:
            samples_per_pixel = self.settings.default_samples_per_pixel
        request = ExtractionRequest(
            samples_per_pixel=samples_per_pixel,
            offset=offset,
            length=length,
        )

        with self._lock:
            session = self._session_locked(session_key)
            future = self._executor.submit(
                self._run_session, session_key, session, request, path, source
            )
            session.pending += 1
            session.future = future
        return future

    def extract(self, session_key: str, **kwargs: Any) -> ExtractionOutcome:
        """Run an extraction off the calling thread and wait for its outcome."""
        return self.submit(session_key, **kwargs).result()

    def cancel(self, session_key: str) -> None:
        """Request cancellation of a session. Idempotent.

        A cancel for a key with no extraction yet is held for its first
        run. A cancel arriving after the key's last run finished is dropped.
        """
        with self._lock:
            session = self._sessions.get(session_key)
            if session is not None and session.future is not None and session.pending == 0:
                logger.debug(f"Ignoring cancel for finished session {session_key!r}")
                return
            if session is None:
                session = self._session_locked(session_key)
            session.token.cancel()

    def teardown(self, session_key: str) -> None:
        """Silence a session's events, cancel it and forget the key."""
        with self._lock:
            session = self._sessions.pop(session_key, None)
        if session is None:
            return
        session.sink.mark_torn_down()
        session.token.cancel()

    def future(self, session_key: str) -> Future | None:
        with self._lock:
            session = self._sessions.get(session_key)
        return session.future if session else None

    def shutdown(self, wait: bool = True) -> None:
        """Tear down all sessions and stop the worker."""
        with self._lock:
            keys = list(self._sessions)
        for key in keys:
            self.teardown(key)
        self._executor.shutdown(wait=wait)

    def _run_session(
        self,
        session_key: str,
        session: _Session,
        request: ExtractionRequest,
        path: str | Path | None,
        source: SourceDescriptor | Mapping[str, Any] | None,
    ) -> ExtractionOutcome:
        try:
            return self._extract_session(session_key, session, request, path, source)
        finally:
            with self._lock:
                session.pending -= 1
                if session.pending == 0:
                    # a cancel that arrived too late to be observed dies with the run
                    session.token.reset()

    def _extract_session(
        self,
        session_key: str,
        session: _Session,
        request: ExtractionRequest,
        path: str | Path | None,
        source: SourceDescriptor | Mapping[str, Any] | None,
    ) -> ExtractionOutcome:
        logger.info(
            f"Extraction {session_key!r} started: samples_per_pixel={request.samples_per_pixel} "
            f"offset={request.offset} length={request.length}"
        )
        try:
            locator = resolve_locator(path=path, source=source)
            with open_source(locator, self.settings) as sample_source:
                extractor = WaveformExtractor(sample_source, session.sink, session.token)
                data = extractor.extract(request, session_key=session_key)
        except WaveformError as e:
            logger.warning(f"Extraction {session_key!r} failed: [{e.code}] {e.message}")
            return ExtractionOutcome(session_key=session_key, error=e.to_payload())

        if data is None:
            return ExtractionOutcome(session_key=session_key, cancelled=True)

        logger.info(f"Extraction {session_key!r} finished: {data.shape[0]}x{data.shape[1]}")
        return ExtractionOutcome(session_key=session_key, data=data)
