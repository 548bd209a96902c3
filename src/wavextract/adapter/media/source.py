"""Random-access PCM frame reading via soundfile.

Adapter for reading float frames from local audio containers. Handles:
- File open/close and resource cleanup
- Seek + read of arbitrary frame ranges, per channel
- Materializing remote locators into a temp copy, deleted on exit
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import numpy as np
import soundfile as sf

from wavextract.adapter.locator import Locator
from wavextract.adapter.media.materialize import materialize
from wavextract.config import ExtractorSettings
from wavextract.errors import DecodeError, ReadError

logger = logging.getLogger(__name__)


class SampleSource:
    """Seekable multi-channel PCM source.

    Usage:
        with SampleSource(path) as source:
            buffers = source.read(start_frame=0, frame_count=1024)
    """

    def __init__(self, path: Path, is_remote_backed: bool = False):
        """Open an audio file for reading.

        Args:
            path: Local audio file.
            is_remote_backed: True when path is a materialized remote copy.

        Raises:
            DecodeError: If the file is missing, corrupt, or unsupported.
        """
        self._path = Path(path)
        self.is_remote_backed = is_remote_backed

        if not self._path.exists():
            raise DecodeError(f"Audio file not found: {self._path}")

        try:
            self._file = sf.SoundFile(str(self._path), mode="r")
        except (RuntimeError, OSError, TypeError) as e:
            raise DecodeError(f"Failed to open audio file {self._path}: {e}") from e

        if not self._file.seekable():
            self._file.close()
            raise DecodeError(f"Audio file is not seekable: {self._path}")

    def __enter__(self) -> "SampleSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying file handle."""
        if not self._file.closed:
            self._file.close()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def total_frames(self) -> int:
        return int(self._file.frames)

    @property
    def channel_count(self) -> int:
        return int(self._file.channels)

    @property
    def sample_rate(self) -> int:
        return int(self._file.samplerate)

    @property
    def position(self) -> int:
        """Current read position in frames."""
        try:
            return int(self._file.tell())
        except (RuntimeError, OSError) as e:
            raise ReadError(f"Could not query read position: {e}") from e

    @position.setter
    def position(self, frame: int) -> None:
        try:
            self._file.seek(frame)
        except (RuntimeError, OSError, ValueError) as e:
            raise ReadError(f"Could not seek to frame {frame}: {e}") from e

    def read(self, start_frame: int, frame_count: int) -> np.ndarray:
        """Read a frame range as per-channel float buffers.

        Fewer than frame_count frames are returned at end-of-stream.

        Args:
            start_frame: First frame to read.
            frame_count: Number of frames requested.

        Returns:
            float32 array of shape (channel_count, frames_read).

        Raises:
            ReadError: On seek or read failure.
        """
        self.position = start_frame
        try:
            frames = self._file.read(frames=max(0, frame_count), dtype="float32", always_2d=True)
        except (RuntimeError, OSError) as e:
            raise ReadError(f"Couldn't read into buffer. {e}") from e
        return frames.T


@contextmanager
def open_source(locator: Locator, settings: ExtractorSettings | None = None) -> Iterator[SampleSource]:
    """Open a SampleSource for a locator, scoped to the with-block.

    Remote locators are materialized first; the temp copy is deleted when
    the block exits, whatever the exit path.

    Raises:
        DecodeError: If the (local or materialized) file cannot be opened.
        MaterializeError: If a remote asset cannot be materialized.
    """
    settings = settings or ExtractorSettings()

    if not locator.is_remote:
        with SampleSource(locator.path) as source:
            yield source
        return

    temp_path = materialize(
        locator.uri,
        headers=locator.headers,
        timeout_fetch=settings.fetch_timeout_s,
        timeout_export=settings.export_timeout_s,
        temp_dir=settings.temp_dir,
    )
    try:
        with SampleSource(temp_path, is_remote_backed=True) as source:
            yield source
    finally:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Could not remove materialized copy {temp_path}: {e}")
