"""Adapter module for external tools and IO boundaries.

Adapters wrap external dependencies behind domain-focused interfaces.
Extraction logic should use adapters rather than calling external tools directly.

Structure:
- adapter/media/   - ffprobe/ffmpeg materialization, soundfile decoding
- adapter/events   - event sink interface for progress delivery
- adapter/locator  - path / source descriptor resolution
"""

# Re-export commonly used items for convenience
from wavextract.adapter.events import (
    ON_CURRENT_EXTRACTED_WAVEFORM_DATA,
    EventSink,
    RecordingEventSink,
    SessionEventSink,
)
from wavextract.adapter.locator import Locator, resolve_locator
from wavextract.adapter.media import SampleSource, check_available, materialize, open_source

__all__ = [
    # Events
    "ON_CURRENT_EXTRACTED_WAVEFORM_DATA",
    "EventSink",
    "RecordingEventSink",
    "SessionEventSink",
    # Locator
    "Locator",
    "resolve_locator",
    # Media
    "SampleSource",
    "check_available",
    "materialize",
    "open_source",
]
