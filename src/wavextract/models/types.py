"""Pydantic models for the wavextract service boundary.

Progress events are dispatched with camelCase keys (waveformData, progress,
sessionKey) so host applications receive the same payload shape the event
channel has always used.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SourceDescriptor(BaseModel):
    """Structured audio source: a uri plus optional request headers."""

    uri: str
    headers: dict[str, str] = Field(default_factory=dict)


class ErrorPayload(BaseModel):
    """Uniform failure payload handed to the caller."""

    code: str
    message: str


class ProgressEvent(BaseModel):
    """Payload of one onCurrentExtractedWaveformData event."""

    model_config = ConfigDict(populate_by_name=True)

    waveform_data: list[float] = Field(alias="waveformData")
    progress: float = Field(gt=0.0, le=1.0)
    session_key: str = Field(alias="sessionKey")


class ExtractionCreate(BaseModel):
    """Request body for starting an extraction session."""

    session_key: str = Field(min_length=1)
    path: str | None = None
    source: SourceDescriptor | None = None
    samples_per_pixel: int | None = None
    offset: int | None = 0
    length: int | None = None


class ExtractionStatus(BaseModel):
    """Extraction session state for API responses."""

    session_key: str
    state: Literal["running", "succeeded", "failed", "cancelled"]
    progress: float
    waveform_data: list[float]
    data: list[list[float]] | None
    error: ErrorPayload | None
