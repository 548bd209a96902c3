"""FastAPI application factory.

API layer:
- Validates inputs, starts/cancels extraction sessions
- Returns session status payloads for UI polling
- Forbidden: decoding, ffmpeg work, RMS computation
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from wavextract.adapter.events import RecordingEventSink
from wavextract.config import ExtractorSettings, load_settings
from wavextract.worker.service import ExtractionService


def get_service(request: Request) -> ExtractionService:
    """Dependency to get the extraction service bound to the app."""
    return request.app.state.service


def get_event_sink(request: Request) -> RecordingEventSink:
    """Dependency to get the recording event sink bound to the app."""
    return request.app.state.sink


def create_app(settings: ExtractorSettings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional extractor settings (loaded from the environment
            if omitted).

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.service.shutdown(wait=False)

    app = FastAPI(
        title="wavextract API",
        description="Waveform extraction with streamed progress",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware for UI access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    settings = settings or load_settings()
    # status polling only reads the latest payload per session
    sink = RecordingEventSink(history=0, max_sessions=settings.max_retained_sessions)
    app.state.sink = sink
    app.state.service = ExtractionService(sink, settings)

    from wavextract.api.routes import extractions

    app.include_router(extractions.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
