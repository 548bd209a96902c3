"""Channel merging for the emitted waveform.

Two populated channels are averaged. Otherwise the first populated channel
of the first two wins (channel 0 before channel 1), which covers mono
sources and a missing or empty second channel.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from wavextract.errors import MergeError


def _has_data(channel) -> bool:
    return channel is not None and np.asarray(channel).size > 0


def merge_channels(channels: Sequence) -> np.ndarray | float:
    """Merge per-channel amplitudes into a single sequence.

    Args:
        channels: One entry per channel. Each entry is an amplitude value or
            an amplitude sequence; None or an empty sequence means the
            channel has no data.

    Returns:
        Merged amplitudes with the shape of a single channel entry
        (a float for scalar inputs).

    Raises:
        MergeError: If neither of the first two channels has data.
    """
    first = channels[0] if len(channels) > 0 else None
    second = channels[1] if len(channels) > 1 else None

    if len(channels) == 2 and _has_data(first) and _has_data(second):
        merged = (np.asarray(first) + np.asarray(second)) / 2
    elif _has_data(first):
        merged = np.asarray(first)
    elif _has_data(second):
        merged = np.asarray(second)
    else:
        raise MergeError("no channel data: both audio channels are empty")

    if merged.ndim == 0:
        return float(merged)
    return merged
