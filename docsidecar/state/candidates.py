"""Ordering of the existing sidecar files a document may be loaded from."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List

from ..paths.resolver import BACKUP_SUFFIX

logger = logging.getLogger(__name__)


@dataclass
class SidecarCandidate:
    """An existing sidecar file with its effective mtime and priority rank."""

    path: str
    mtime: float
    priority: int


def build_candidates(paths: Iterable[str]) -> List[SidecarCandidate]:
    """Return the existing files among ``paths``, most recent first.

    ``paths`` is in priority order and may contain empty strings for locations
    that do not apply. A ``.old`` backup listed right after its existing
    primary shares the newer of the two mtimes with it, so the pair ranks
    together and the priority tiebreak keeps the primary in front.
    """

    candidates: List[SidecarCandidate] = []
    previous_entry_exists = False

    for priority, path in enumerate(paths):
        if not path or not os.path.isfile(path):
            previous_entry_exists = False
            continue
        try:
            mtime = os.stat(path).st_mtime
        except OSError:
            previous_entry_exists = False
            continue

        if path.endswith(BACKUP_SUFFIX) and previous_entry_exists:
            primary = candidates[-1]
            if primary.mtime < mtime:
                logger.warning(
                    "Backup %s is newer (%s) than its primary %s (%s), using the backup mtime for both",
                    path,
                    mtime,
                    primary.path,
                    primary.mtime,
                )
                primary.mtime = mtime
            else:
                mtime = primary.mtime

        candidates.append(SidecarCandidate(path=path, mtime=mtime, priority=priority))
        previous_entry_exists = True

    candidates.sort(key=lambda candidate: (-candidate.mtime, candidate.priority))
    return candidates


__all__ = ["SidecarCandidate", "build_candidates"]
