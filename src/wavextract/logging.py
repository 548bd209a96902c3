"""Centralized logging configuration for scripts and the API process."""

from __future__ import annotations

import logging

logger = logging.getLogger("wavextract")


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the wavextract package.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise INFO level.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
