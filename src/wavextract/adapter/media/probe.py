"""Remote media metadata probing via ffprobe.

Adapter for loading duration and stream list of a remote asset using an
ffprobe subprocess. Handles timeouts, error handling, and output parsing.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field

from wavextract.errors import MaterializeError

logger = logging.getLogger(__name__)


@dataclass
class RemoteAssetInfo:
    """Metadata of a remote asset."""

    duration_ms: int
    stream_types: list[str] = field(default_factory=list)

    @property
    def has_audio(self) -> bool:
        return "audio" in self.stream_types


def check_available() -> bool:
    """Check if media tools are available.

    Returns:
        True if ffmpeg and ffprobe are available.
    """
    try:
        subprocess.run(["ffmpeg", "-version"], capture_output=True, timeout=5)
        subprocess.run(["ffprobe", "-version"], capture_output=True, timeout=5)
        return True
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False


def header_args(headers: dict[str, str] | None) -> list[str]:
    """Build the ffmpeg/ffprobe `-headers` option for HTTP request headers."""
    if not headers:
        return []
    lines = "".join(f"{key}: {value}\r\n" for key, value in headers.items())
    return ["-headers", lines]


def probe_remote(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout_s: float = 30.0,
) -> RemoteAssetInfo:
    """Load duration and track list of a remote asset.

    Args:
        url: Remote media URL.
        headers: Optional HTTP request headers.
        timeout_s: Bound on the metadata load.

    Returns:
        RemoteAssetInfo with duration and stream types.

    Raises:
        MaterializeError: `timeout` if the load exceeds timeout_s,
            `load_failed` if the asset cannot be loaded or has no audio.
    """
    cmd = [
        "ffprobe",
        "-v", "error",
        *header_args(headers),
        "-show_entries", "format=duration:stream=codec_type",
        "-of", "json",
        url,
    ]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout_s,
        )
    except subprocess.TimeoutExpired as e:
        raise MaterializeError(
            "timeout", f"Timeout loading remote audio file after {timeout_s}s: {url}"
        ) from e
    except FileNotFoundError as e:
        raise MaterializeError("load_failed", "ffprobe not available") from e

    if result.returncode != 0:
        stderr = (result.stderr or "")[:500]
        raise MaterializeError("load_failed", f"Remote audio load failed: {stderr}")

    try:
        data = json.loads(result.stdout or "{}")
        duration_str = data.get("format", {}).get("duration") or "0"
        duration_ms = int(float(duration_str) * 1000)
    except (json.JSONDecodeError, ValueError, AttributeError) as e:
        raise MaterializeError("load_failed", f"Unreadable metadata for {url}") from e

    stream_types = [
        stream.get("codec_type", "") for stream in data.get("streams", []) if isinstance(stream, dict)
    ]
    info = RemoteAssetInfo(duration_ms=duration_ms, stream_types=stream_types)

    if not info.has_audio:
        raise MaterializeError("load_failed", f"No audio track found in {url}")

    logger.debug(f"Probed {url}: duration={duration_ms}ms streams={stream_types}")
    return info
