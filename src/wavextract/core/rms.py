"""Root-mean-square reduction of per-channel sample buffers."""

from __future__ import annotations

from typing import Sequence

import numpy as np


def reduce_rms(samples: Sequence[float] | np.ndarray, frame_count: int | None = None) -> float:
    """Compute the RMS amplitude of one channel's bucket.

    Args:
        samples: Float samples delivered for the bucket.
        frame_count: Number of leading samples to reduce (defaults to all).
            May be smaller than the nominal bucket span at end-of-stream.

    Returns:
        sqrt(sum(x^2) / N), or 0.0 when N == 0.
    """
    data = np.asarray(samples)
    if frame_count is not None:
        data = data[:frame_count]
    if data.size == 0:
        return 0.0

    # Accumulate in float64 so long buckets don't lose precision
    squares = np.square(data, dtype=np.float64)
    return float(np.sqrt(squares.sum() / data.size))


def reduce_channels(buffers: np.ndarray) -> np.ndarray:
    """Reduce a (channels, frames) buffer to one RMS value per channel."""
    return np.array([reduce_rms(channel) for channel in buffers], dtype=np.float32)
