"""Logging helpers."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(verbose: bool = False, *, force: bool = False) -> None:
    """Configure the root logger; sidecar evictions and fallbacks log at WARNING."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=force,
    )


__all__ = ["LOG_FORMAT", "setup_logging"]
