"""Remote asset materialization via ffmpeg.

Turns a remote media URL into a local, randomly seekable file in two
bounded phases: metadata load (ffprobe) then export (ffmpeg). The export
container is 32-bit float WAV so the sample source can seek frame-exactly.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
import uuid
from pathlib import Path

from wavextract.adapter.media.probe import header_args, probe_remote
from wavextract.config import DEFAULT_EXPORT_TIMEOUT_S, DEFAULT_FETCH_TIMEOUT_S
from wavextract.errors import MaterializeError

logger = logging.getLogger(__name__)

EXPORT_SUFFIX = ".wav"
EXPORT_CODEC = "pcm_f32le"


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove temp file {path}: {e}")


def materialize(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout_fetch: float = DEFAULT_FETCH_TIMEOUT_S,
    timeout_export: float = DEFAULT_EXPORT_TIMEOUT_S,
    temp_dir: Path | None = None,
) -> Path:
    """Fetch a remote asset into a fresh local temp file.

    Every call produces a new uniquely named file; the caller owns it.

    Args:
        url: Remote media URL.
        headers: Optional HTTP request headers.
        timeout_fetch: Bound on the metadata load.
        timeout_export: Bound on the export.
        temp_dir: Directory for the temp file (system temp dir by default).

    Returns:
        Path to the local copy.

    Raises:
        MaterializeError: `timeout`, `load_failed` or `export_failed`.
            No temp file is left behind on failure.
    """
    info = probe_remote(url, headers=headers, timeout_s=timeout_fetch)

    out_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
    out_dir.mkdir(parents=True, exist_ok=True)
    output_path = out_dir / f"{uuid.uuid4()}{EXPORT_SUFFIX}"

    cmd = [
        "ffmpeg",
        "-y",
        "-v", "error",
        *header_args(headers),
        "-i", url,
        "-vn",
        "-map", "0:a:0",
        "-acodec", EXPORT_CODEC,
        str(output_path),
    ]

    logger.info(f"Exporting {url} ({info.duration_ms}ms) to {output_path}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout_export,
        )
    except subprocess.TimeoutExpired as e:
        _remove_quietly(output_path)
        raise MaterializeError(
            "timeout", f"Timeout exporting remote audio file after {timeout_export}s: {url}"
        ) from e
    except FileNotFoundError as e:
        _remove_quietly(output_path)
        raise MaterializeError("export_failed", "ffmpeg not available") from e

    if result.returncode != 0:
        _remove_quietly(output_path)
        stderr = (result.stderr or "")[:500]
        raise MaterializeError("export_failed", f"Export failed: {stderr}")

    if not output_path.exists():
        raise MaterializeError("export_failed", f"Export produced no file for {url}")

    return output_path
