"""Tests for RMS reduction."""

import math

import numpy as np
import pytest

from wavextract.core.rms import reduce_channels, reduce_rms


class TestReduceRms:
    """Root-mean-square of one channel's bucket."""

    def test_known_values(self):
        """RMS of [3, 4] is sqrt(12.5)."""
        assert reduce_rms([3.0, 4.0]) == pytest.approx(math.sqrt(12.5))

    def test_matches_definition(self):
        """Result equals sqrt(sum(x^2)/N) for arbitrary samples."""
        rng = np.random.default_rng(7)
        samples = rng.uniform(-1.0, 1.0, 4096).astype(np.float32)
        expected = math.sqrt(sum(float(x) ** 2 for x in samples) / len(samples))
        assert reduce_rms(samples) == pytest.approx(expected, rel=1e-9)

    def test_empty_is_exactly_zero(self):
        """N == 0 gives 0.0, not NaN."""
        result = reduce_rms(np.array([], dtype=np.float32))
        assert result == 0.0
        assert not math.isnan(result)

    def test_zero_frame_count_is_zero(self):
        """frame_count=0 reduces nothing."""
        assert reduce_rms([0.5, 0.5], frame_count=0) == 0.0

    def test_frame_count_limits_samples(self):
        """Only the first frame_count samples contribute."""
        assert reduce_rms([1.0, 1.0, 10.0], frame_count=2) == pytest.approx(1.0)

    def test_sign_independent(self):
        """Negative samples contribute like positive ones."""
        assert reduce_rms([-0.5, 0.5, -0.5, 0.5]) == pytest.approx(0.5)

    def test_long_float32_bucket_is_stable(self):
        """A million float32 samples reduce without precision drift."""
        samples = np.full(1_000_000, 0.1, dtype=np.float32)
        assert reduce_rms(samples) == pytest.approx(0.1, rel=1e-6)

    def test_returns_python_float(self):
        """Result is a plain float."""
        assert isinstance(reduce_rms(np.ones(4, dtype=np.float32)), float)


class TestReduceChannels:
    """Per-channel reduction of a (channels, frames) buffer."""

    def test_one_value_per_channel(self):
        """Each row reduces independently."""
        buffers = np.array([[1.0, -1.0], [0.0, 0.0], [3.0, 4.0]], dtype=np.float32)
        result = reduce_channels(buffers)
        assert result.shape == (3,)
        np.testing.assert_allclose(result, [1.0, 0.0, math.sqrt(12.5)], rtol=1e-6)

    def test_zero_frames(self):
        """A short read with no frames yields zeros."""
        result = reduce_channels(np.zeros((2, 0), dtype=np.float32))
        np.testing.assert_array_equal(result, [0.0, 0.0])
