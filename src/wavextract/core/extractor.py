"""Waveform extraction controller.

Drives one extraction call over an open SampleSource:

    poll cancel -> plan -> (poll cancel -> read -> reduce -> emit)* -> done

The source read position is saved once before the loop and restored on
every exit path: completion, failure and cancellation.
"""

from __future__ import annotations

import logging

import numpy as np

from wavextract.adapter.events import ON_CURRENT_EXTRACTED_WAVEFORM_DATA, EventSink
from wavextract.adapter.media.source import SampleSource
from wavextract.core.cancel import CancellationToken
from wavextract.core.merge import merge_channels
from wavextract.core.planner import plan
from wavextract.core.rms import reduce_rms
from wavextract.errors import ReadError, WaveformError
from wavextract.models.domain import ExtractionRequest, ExtractionState
from wavextract.models.types import ProgressEvent

logger = logging.getLogger(__name__)


class WaveformExtractor:
    """Extracts a per-bucket RMS envelope from a sample source.

    The extractor owns neither the source nor the sink; it is bound to one
    session and may be called repeatedly on the same source.
    """

    def __init__(
        self,
        source: SampleSource,
        sink: EventSink,
        token: CancellationToken | None = None,
    ):
        """Initialize extractor.

        Args:
            source: Open sample source, exclusively used by this session.
            sink: Destination for progress events.
            token: Cancellation token polled between buckets.
        """
        self.source = source
        self.sink = sink
        self.token = token or CancellationToken()
        self.state: ExtractionState = "idle"
        self.progress: float = 0.0

    def cancel(self) -> None:
        """Request cancellation at the next bucket boundary."""
        self.token.cancel()

    def extract(self, request: ExtractionRequest, session_key: str = "") -> np.ndarray | None:
        """Run one extraction.

        Args:
            request: Bucket count, offset and length limit.
            session_key: Key echoed in every progress event.

        Returns:
            float32 array of shape (channel_count, samples_per_pixel), or
            None if the extraction was cancelled.

        Raises:
            RangeError: If the offset lies past the requested length.
            ReadError: On I/O failure mid-extraction.
            MergeError: If no channel has data to merge.
        """
        samples_per_pixel = request.samples_per_pixel
        saved_position = self.source.position
        self.progress = 0.0
        completed = False

        try:
            if self.token.consume():
                self._transition("aborted")
                logger.info(f"Extraction {session_key!r} cancelled before start")
                completed = True
                return None

            self._transition("planning")
            bucket_plan = plan(
                total_frames=self.source.total_frames,
                samples_per_pixel=samples_per_pixel,
                offset=request.offset,
                length=request.length,
                current_position=saved_position,
            )

            data = np.zeros((self.source.channel_count, samples_per_pixel), dtype=np.float32)
            processed = 0

            for bucket in bucket_plan.iter_buckets():
                if self.token.consume():
                    self._transition("aborted")
                    logger.info(f"Extraction {session_key!r} cancelled at bucket {bucket.index}")
                    completed = True
                    return None

                self._transition("reading")
                buffers = self.source.read(bucket.start_frame, bucket.frame_count)

                self._transition("reducing")
                for channel, samples in enumerate(buffers):
                    data[channel, bucket.index] = reduce_rms(samples)

                self._transition("emitting")
                processed += 1
                self.progress = processed / samples_per_pixel
                self._emit(data, session_key)

            self._transition("done")
            completed = True
            return data

        except WaveformError:
            self._transition("failed")
            raise
        finally:
            self._restore_position(saved_position, suppress=not completed)

    def _restore_position(self, position: int, suppress: bool) -> None:
        # suppress is set while another exception is propagating
        try:
            self.source.position = position
        except ReadError as e:
            if not suppress:
                raise
            logger.warning(f"Could not restore read position {position}: {e.message}")

    def _emit(self, data: np.ndarray, session_key: str) -> None:
        merged = merge_channels(list(data))
        event = ProgressEvent(
            waveform_data=np.asarray(merged, dtype=np.float64).tolist(),
            progress=self.progress,
            session_key=session_key,
        )
        self.sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, event.model_dump(by_alias=True))

    def _transition(self, state: ExtractionState) -> None:
        logger.debug(f"Extraction state {self.state} -> {state}")
        self.state = state
