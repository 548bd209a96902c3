"""Shared pytest fixtures for wavextract tests."""

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from wavextract.adapter.events import RecordingEventSink

SAMPLE_RATE = 8000
STEREO_FRAMES = 10000


def write_wav(path: Path, data: np.ndarray, sample_rate: int = SAMPLE_RATE) -> Path:
    """Write float samples to a 32-bit float WAV file."""
    sf.write(str(path), data, sample_rate, subtype="FLOAT")
    return path


def stereo_samples(frames: int = STEREO_FRAMES) -> np.ndarray:
    """Left channel ramps from -1 to 1, right channel is a constant 0.5."""
    left = np.linspace(-1.0, 1.0, frames, dtype=np.float32)
    right = np.full(frames, 0.5, dtype=np.float32)
    return np.column_stack([left, right])


@pytest.fixture
def stereo_wav(tmp_path: Path) -> Path:
    """10000-frame stereo file."""
    return write_wav(tmp_path / "stereo.wav", stereo_samples())


@pytest.fixture
def mono_wav(tmp_path: Path) -> Path:
    """5000-frame mono file at a constant 0.25."""
    return write_wav(tmp_path / "mono.wav", np.full(5000, 0.25, dtype=np.float32))


@pytest.fixture
def sink() -> RecordingEventSink:
    """In-memory event sink."""
    return RecordingEventSink()
