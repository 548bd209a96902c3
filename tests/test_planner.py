"""Tests for bucket planning.

Invariants:
1. 0 <= start_bucket <= end_bucket <= samples_per_pixel for every valid plan
2. Buckets never read past the end of the source
3. An offset past the end bucket is a RangeError, not a crash
"""

import itertools

import pytest

from wavextract.core.planner import Bucket, plan
from wavextract.errors import RangeError

TOTALS = [0, 1, 99, 100, 10000, 10007]
SAMPLES = [0, 1, 3, 100, 20000]
OFFSETS = [None, 0, 5, -3, 99, 150]
LENGTHS = [None, 0, 1, 50, 500]
POSITIONS = [0, 37, 5000]


def _grid():
    for total, spp, offset, length, position in itertools.product(
        TOTALS, SAMPLES, OFFSETS, LENGTHS, POSITIONS
    ):
        yield total, spp, offset, length, min(position, total)


class TestPlanBounds:
    """Bucket bounds hold across the parameter grid."""

    def test_bounds_hold_or_range_error(self):
        """Every plan satisfies the bucket bound ordering."""
        for total, spp, offset, length, position in _grid():
            try:
                result = plan(total, spp, offset, length, position)
            except RangeError:
                continue
            assert 0 <= result.start_bucket <= result.end_bucket <= max(1, spp)

    def test_buckets_never_overrun_source(self):
        """Every yielded bucket lies inside [0, total_frames]."""
        for total, spp, offset, length, position in _grid():
            try:
                result = plan(total, spp, offset, length, position)
            except RangeError:
                continue
            buckets = list(result.iter_buckets())
            assert len(buckets) <= result.bucket_count
            for bucket in buckets:
                assert bucket.frame_count > 0
                assert bucket.start_frame + bucket.frame_count <= total
                assert result.start_bucket <= bucket.index < result.end_bucket


class TestPlanComputation:
    """Start/end bucket and frame computation."""

    def test_full_range_from_zero(self):
        """offset=0 with no length covers all buckets."""
        result = plan(10000, 100, offset=0)
        assert result.start_bucket == 0
        assert result.end_bucket == 100
        assert result.frames_per_bucket == 100
        assert result.start_frame == 0

    def test_samples_per_pixel_clamped_to_one(self):
        """A zero bucket count is treated as one."""
        result = plan(10000, 0, offset=0)
        assert result.end_bucket == 1
        assert result.frames_per_bucket == 10000

    def test_positive_offset_is_absolute(self):
        """A non-negative offset is the start bucket regardless of position."""
        result = plan(10000, 100, offset=20, current_position=5000)
        assert result.start_bucket == 20
        assert result.start_frame == 2000

    def test_absent_offset_starts_at_current_position(self):
        """offset=None starts at the bucket containing the read position."""
        result = plan(10000, 100, offset=None, current_position=5050)
        assert result.start_bucket == 50
        assert result.start_frame == 5050

    def test_negative_offset_is_relative_to_position(self):
        """A negative offset steps back from the current bucket."""
        result = plan(10000, 100, offset=-10, current_position=5000)
        assert result.start_bucket == 40
        assert result.start_frame == 4000

    def test_negative_offset_clamped_to_zero(self):
        """Stepping back past the start clamps to bucket 0."""
        result = plan(10000, 100, offset=-10, current_position=300)
        assert result.start_bucket == 0

    def test_length_limits_end(self):
        """length caps the end bucket relative to start."""
        result = plan(10000, 100, offset=20, length=10)
        assert result.start_bucket == 20
        assert result.end_bucket == 30

    def test_length_clamped_to_bucket_count(self):
        """end never exceeds samples_per_pixel."""
        result = plan(10000, 100, offset=90, length=50)
        assert result.end_bucket == 100

    def test_offset_past_end_raises_range_error(self):
        """offset=150 with 100 buckets is reported as a RangeError."""
        with pytest.raises(RangeError) as exc_info:
            plan(10000, 100, offset=150)
        assert "offset exceeds available length" in str(exc_info.value)
        assert exc_info.value.code == "range_error"

    def test_offset_equal_to_end_is_empty_plan(self):
        """start == end is valid and yields nothing."""
        result = plan(10000, 100, offset=100)
        assert result.bucket_count == 0
        assert list(result.iter_buckets()) == []

    def test_empty_source_plans_without_error(self):
        """A zero-length source produces no buckets."""
        result = plan(0, 100, offset=None)
        assert result.frames_per_bucket == 0
        assert list(result.iter_buckets()) == []


class TestIterBuckets:
    """Lazy bucket generation."""

    def test_even_split(self):
        """10000 frames over 100 buckets yields 100 buckets of 100."""
        buckets = list(plan(10000, 100).iter_buckets())
        assert len(buckets) == 100
        assert buckets[0] == Bucket(index=0, start_frame=0, frame_count=100)
        assert buckets[-1] == Bucket(index=99, start_frame=9900, frame_count=100)

    def test_remainder_frames_are_not_read(self):
        """Frames beyond samples_per_pixel * frames_per_bucket are ignored."""
        buckets = list(plan(10050, 100).iter_buckets())
        assert len(buckets) == 100
        assert buckets[-1].start_frame + buckets[-1].frame_count == 10000

    def test_last_bucket_shrinks_at_end_of_stream(self):
        """An unaligned start shrinks the final bucket to the remaining frames."""
        buckets = list(plan(10000, 100, offset=None, current_position=150).iter_buckets())
        assert buckets[0] == Bucket(index=1, start_frame=150, frame_count=100)
        assert buckets[-1] == Bucket(index=99, start_frame=9950, frame_count=50)

    def test_stops_early_when_span_reaches_zero(self):
        """Starting at the last frame yields a single one-frame bucket."""
        buckets = list(plan(10000, 100, offset=None, current_position=9999).iter_buckets())
        assert buckets == [Bucket(index=99, start_frame=9999, frame_count=1)]

    def test_is_lazy(self):
        """iter_buckets returns a generator, not a list."""
        buckets = plan(10000, 100).iter_buckets()
        assert next(buckets).index == 0
