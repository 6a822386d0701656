"""Small filesystem helpers used by the sidecar store.

Missing paths are a normal result here: the predicates return ``False`` rather
than raising, and only the helpers that mutate the tree surface ``OSError``.
"""
from __future__ import annotations

import logging
import os
from typing import IO

logger = logging.getLogger(__name__)


def is_file(path: str) -> bool:
    return bool(path) and os.path.isfile(path)


def is_dir(path: str) -> bool:
    return bool(path) and os.path.isdir(path)


def make_path(path: str) -> None:
    """Create ``path`` and any missing parents."""

    os.makedirs(path, exist_ok=True)


def fsync_file(handle: IO[str]) -> None:
    """Push buffered bytes of an open file down to the storage device."""

    handle.flush()
    os.fsync(handle.fileno())


def fsync_directory(path: str) -> None:
    """Flush the directory entry changes of the directory containing ``path``."""

    directory = os.path.dirname(path) or "."
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError as exc:
        logger.debug("Cannot open %s for fsync: %s", directory, exc)
        return
    try:
        os.fsync(fd)
    except OSError as exc:
        # Some platforms and filesystems refuse fsync on directories.
        logger.debug("Directory fsync unsupported for %s: %s", directory, exc)
    finally:
        os.close(fd)


def remove_empty_dirs(path: str, stop_at: str) -> None:
    """Remove ``path`` if empty, then each empty ancestor below ``stop_at``.

    ``stop_at`` itself is never removed. Stops at the first directory that
    cannot be removed (typically because it is not empty).
    """

    stop = os.path.normpath(stop_at)
    prefix = stop if stop.endswith(os.sep) else stop + os.sep
    current = os.path.normpath(path)
    while current != stop and current.startswith(prefix):
        try:
            os.rmdir(current)
        except OSError as exc:
            logger.debug("Keeping directory %s: %s", current, exc)
            return
        logger.debug("Removed empty directory %s", current)
        current = os.path.dirname(current)


__all__ = [
    "fsync_directory",
    "fsync_file",
    "is_dir",
    "is_file",
    "make_path",
    "remove_empty_dirs",
]
