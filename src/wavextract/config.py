"""Extractor settings and environment loading.

Timeouts bound the two blocking phases of remote materialization; the
remaining fields shape the worker service.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

ENV_PREFIX = "WAVEXTRACT_"

DEFAULT_FETCH_TIMEOUT_S = 30.0
DEFAULT_EXPORT_TIMEOUT_S = 60.0
DEFAULT_SAMPLES_PER_PIXEL = 100
DEFAULT_MAX_RETAINED_SESSIONS = 256


class ExtractorSettings(BaseModel):
    """Resolved configuration for extraction sessions."""

    fetch_timeout_s: float = Field(default=DEFAULT_FETCH_TIMEOUT_S, gt=0.0)
    export_timeout_s: float = Field(default=DEFAULT_EXPORT_TIMEOUT_S, gt=0.0)
    default_samples_per_pixel: int = Field(default=DEFAULT_SAMPLES_PER_PIXEL, ge=1)
    temp_dir: Path | None = None
    max_workers: int = Field(default=1, ge=1)
    max_retained_sessions: int = Field(default=DEFAULT_MAX_RETAINED_SESSIONS, ge=1)


_ENV_FIELDS = {
    "FETCH_TIMEOUT": "fetch_timeout_s",
    "EXPORT_TIMEOUT": "export_timeout_s",
    "SAMPLES_PER_PIXEL": "default_samples_per_pixel",
    "TEMP_DIR": "temp_dir",
    "MAX_WORKERS": "max_workers",
    "MAX_SESSIONS": "max_retained_sessions",
}


def load_settings(environ: dict[str, str] | None = None) -> ExtractorSettings:
    """Load settings from WAVEXTRACT_* environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ).

    Returns:
        Validated ExtractorSettings; unset variables keep their defaults.

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value.
    """
    env = os.environ if environ is None else environ
    values = {}
    for suffix, field_name in _ENV_FIELDS.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw:
            values[field_name] = raw
    return ExtractorSettings(**values)
