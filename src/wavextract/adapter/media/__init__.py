"""Media adapters for audio file operations.

Adapters for IO/system boundary operations:
- probe: ffprobe-based remote metadata loading
- materialize: ffmpeg export of remote assets to a local copy
- source: random-access frame reads from local audio files
"""

from wavextract.adapter.media.materialize import materialize
from wavextract.adapter.media.probe import RemoteAssetInfo, check_available, probe_remote
from wavextract.adapter.media.source import SampleSource, open_source

__all__ = [
    "RemoteAssetInfo",
    "SampleSource",
    "check_available",
    "materialize",
    "open_source",
    "probe_remote",
]
