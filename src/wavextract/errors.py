"""Error taxonomy for waveform extraction.

Every failure a caller can observe is a WaveformError subclass carrying a
stable `code` and a human-readable `message`. The service boundary converts
them to ErrorPayload objects instead of letting them propagate.
"""

from __future__ import annotations

from typing import Literal

from wavextract.models.types import ErrorPayload

MaterializeReason = Literal["timeout", "load_failed", "export_failed"]


class WaveformError(Exception):
    """Base exception for all extraction errors."""

    code: str = "waveform_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_payload(self) -> ErrorPayload:
        """Convert to the uniform {code, message} payload."""
        return ErrorPayload(code=self.code, message=self.message)


class DecodeError(WaveformError):
    """Raised when an audio source cannot be opened or parsed."""

    code = "decode_error"


class MaterializeError(WaveformError):
    """Raised when a remote asset cannot be fetched or exported in time."""

    def __init__(self, reason: MaterializeReason, message: str):
        self.reason = reason
        super().__init__(message)

    @property
    def code(self) -> str:  # type: ignore[override]
        return f"materialize_{self.reason}"


class ReadError(WaveformError):
    """Raised on I/O failure while reading frames mid-extraction."""

    code = "read_error"


class RangeError(WaveformError):
    """Raised when offset/length do not fit the requested bucket count."""

    code = "range_error"

    def __init__(self, message: str = "offset exceeds available length"):
        super().__init__(message)


class MergeError(WaveformError):
    """Raised when no channel carries data to merge."""

    code = "merge_error"

    def __init__(self, message: str = "no channel data"):
        super().__init__(message)


class LocatorError(WaveformError):
    """Raised when neither a path nor a source uri can be resolved."""

    code = "locator_error"
