"""Bucket planning: map a frame count onto a fixed number of output buckets.

The plan is a pair of bucket bounds plus the per-bucket frame span. Buckets
themselves are produced lazily by BucketPlan.iter_buckets(), one at a time,
with the span shrinking near end-of-stream so the final read never overruns
the source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from wavextract.errors import RangeError


@dataclass(frozen=True)
class Bucket:
    """One output unit: a contiguous run of frames."""

    index: int
    start_frame: int
    frame_count: int


@dataclass(frozen=True)
class BucketPlan:
    """Frame-range partition for one extraction call.

    Attributes:
        start_bucket: First bucket index to produce.
        end_bucket: One past the last bucket index (<= samples_per_pixel).
        frames_per_bucket: Nominal frame span of each bucket.
        start_frame: Frame at which the first bucket is read.
        total_frames: Source length in frames.
    """

    start_bucket: int
    end_bucket: int
    frames_per_bucket: int
    start_frame: int
    total_frames: int

    @property
    def bucket_count(self) -> int:
        return self.end_bucket - self.start_bucket

    def iter_buckets(self) -> Iterator[Bucket]:
        """Yield buckets in order, shrinking the last span at end-of-stream.

        Iteration stops early (without error) once the remaining span
        reaches zero frames.
        """
        span = self.frames_per_bucket
        if span <= 0:
            return

        frame = self.start_frame
        for index in range(self.start_bucket, self.end_bucket):
            if frame + span > self.total_frames:
                span = self.total_frames - frame
                if span <= 0:
                    return

            yield Bucket(index=index, start_frame=frame, frame_count=span)
            frame += span


def plan(
    total_frames: int,
    samples_per_pixel: int,
    offset: int | None = 0,
    length: int | None = None,
    current_position: int = 0,
) -> BucketPlan:
    """Compute the bucket range for an extraction.

    Args:
        total_frames: Source length in frames.
        samples_per_pixel: Requested output bucket count (clamped to >= 1).
        offset: Start bucket. None starts from the current read position;
            a negative value starts that many buckets before it.
        length: Maximum number of buckets to produce from the start bucket.
        current_position: Source read position in frames.

    Returns:
        BucketPlan with 0 <= start_bucket <= end_bucket <= samples_per_pixel.

    Raises:
        RangeError: If the start bucket lies past the end bucket.
    """
    samples_per_pixel = max(1, samples_per_pixel)
    frames_per_bucket = total_frames // samples_per_pixel

    if offset is not None and offset >= 0:
        start = offset
    else:
        start = current_position // frames_per_bucket if frames_per_bucket else 0
        if offset is not None:
            start += offset
        start = max(0, start)

    end = start + length if length is not None else samples_per_pixel
    end = min(end, samples_per_pixel)

    if start > end:
        raise RangeError(
            f"offset exceeds available length: start bucket {start} > end bucket {end}. "
            "Please select fewer samples"
        )

    start_frame = current_position if offset is None else start * frames_per_bucket

    return BucketPlan(
        start_bucket=start,
        end_bucket=end,
        frames_per_bucket=frames_per_bucket,
        start_frame=start_frame,
        total_frames=total_frames,
    )
