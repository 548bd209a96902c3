"""Domain models for wavextract.

Pure Python dataclasses used between the controller, the worker service
and the API layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from wavextract.models.types import ErrorPayload

# ============================================================================
# Extraction Domain
# ============================================================================

ExtractionState = Literal[
    "idle",
    "planning",
    "reading",
    "reducing",
    "emitting",
    "done",
    "aborted",
    "failed",
]

SessionState = Literal["running", "succeeded", "failed", "cancelled"]


@dataclass(frozen=True)
class ExtractionRequest:
    """Immutable arguments of one extraction call.

    Attributes:
        samples_per_pixel: Output bucket count (clamped to >= 1).
        offset: Start bucket. None or negative means relative to the
            source's current read position.
        length: Maximum number of buckets to produce, or None for all.
    """

    samples_per_pixel: int
    offset: int | None = 0
    length: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples_per_pixel", max(1, self.samples_per_pixel))


@dataclass
class ExtractionOutcome:
    """Resolved result of an extraction session.

    Exactly one of `data` / `error` is set, unless the session was
    cancelled, in which case both are None.
    """

    session_key: str
    data: np.ndarray | None = None
    error: ErrorPayload | None = None
    cancelled: bool = False

    @property
    def state(self) -> SessionState:
        if self.cancelled:
            return "cancelled"
        if self.error is not None:
            return "failed"
        return "succeeded"
