"""Extractions API endpoint.

POST /api/extractions - Start an extraction session
GET /api/extractions/{session_key} - Get session status and progress
DELETE /api/extractions/{session_key} - Cancel a session
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from wavextract.adapter.events import RecordingEventSink
from wavextract.api.app import get_event_sink, get_service
from wavextract.models.types import ExtractionCreate, ExtractionStatus
from wavextract.worker.service import ExtractionService

router = APIRouter()


def _build_status(
    session_key: str,
    service: ExtractionService,
    sink: RecordingEventSink,
) -> ExtractionStatus:
    """Build ExtractionStatus from the session future and recorded events."""
    future = service.future(session_key)
    if future is None:
        raise HTTPException(status_code=404, detail="Extraction not found")

    latest = sink.latest(session_key) or {}
    progress = latest.get("progress", 0.0)
    waveform_data = latest.get("waveformData", [])

    if not future.done():
        return ExtractionStatus(
            session_key=session_key,
            state="running",
            progress=progress,
            waveform_data=waveform_data,
            data=None,
            error=None,
        )

    outcome = future.result()
    return ExtractionStatus(
        session_key=session_key,
        state=outcome.state,
        progress=progress,
        waveform_data=waveform_data,
        data=outcome.data.tolist() if outcome.data is not None else None,
        error=outcome.error,
    )


@router.post("/extractions", response_model=ExtractionStatus, status_code=201)
def create_extraction(
    body: ExtractionCreate,
    service: ExtractionService = Depends(get_service),
    sink: RecordingEventSink = Depends(get_event_sink),
) -> ExtractionStatus:
    """Start an extraction session.

    Raises:
        HTTPException: 409 if a session with this key is still running.
    """
    existing = service.future(body.session_key)
    if existing is not None and not existing.done():
        raise HTTPException(status_code=409, detail="Extraction already running")

    sink.forget(body.session_key)
    service.submit(
        body.session_key,
        path=body.path,
        source=body.source,
        samples_per_pixel=body.samples_per_pixel,
        offset=body.offset,
        length=body.length,
    )
    return _build_status(body.session_key, service, sink)


@router.get("/extractions/{session_key}", response_model=ExtractionStatus)
def get_extraction(
    session_key: str,
    service: ExtractionService = Depends(get_service),
    sink: RecordingEventSink = Depends(get_event_sink),
) -> ExtractionStatus:
    """Get extraction status.

    Raises:
        HTTPException: 404 if the session is unknown.
    """
    return _build_status(session_key, service, sink)


@router.delete("/extractions/{session_key}", status_code=202)
def cancel_extraction(
    session_key: str,
    service: ExtractionService = Depends(get_service),
) -> dict:
    """Cancel an extraction. Always succeeds."""
    service.cancel(session_key)
    return {"session_key": session_key, "cancel_requested": True}
