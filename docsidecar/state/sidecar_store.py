"""Per-document settings stored in sidecar files.

A :class:`SidecarHandle` is resolved for one document path. ``load`` picks the
most recent valid file among every current and legacy location, ``write``
persists the blob with a rename-to-backup and fsync protocol, and ``purge``
removes the copies that the write superseded.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional, Tuple

from ..config import Settings, load_settings
from ..paths.resolver import (
    BACKUP_SUFFIX,
    get_history_path,
    get_kpdfview_file,
    get_legacy_sidecar_file,
    get_sidecar_dir,
    get_sidecar_file,
)
from ..utils.fs_utils import fsync_directory, fsync_file, is_dir, is_file, make_path, remove_empty_dirs
from . import codec
from .candidates import SidecarCandidate, build_candidates

logger = logging.getLogger(__name__)

DOC_PATH_KEY = "doc_path"


class SidecarHandle:
    """Resolved sidecar locations and the current settings of one document."""

    def __init__(self, doc_path: str, settings: Optional[Settings] = None) -> None:
        self.settings = settings or load_settings()
        self.doc_path = doc_path or ""
        self.doc_sidecar_dir = get_sidecar_dir(self.doc_path, "doc", self.settings)
        self.doc_sidecar_file = get_sidecar_file(self.doc_path, "doc", self.settings)
        self.dir_sidecar_dir = get_sidecar_dir(self.doc_path, "dir", self.settings)
        self.dir_sidecar_file = get_sidecar_file(self.doc_path, "dir", self.settings)
        self.history_file = get_history_path(self.doc_path, self.settings)
        self.candidates: Optional[List[SidecarCandidate]] = None
        self.data: Dict[str, Any] = {DOC_PATH_KEY: self.doc_path}

    def __repr__(self) -> str:
        return f"SidecarHandle(doc_path={self.doc_path!r})"

    # Candidate discovery -------------------------------------------------
    def candidate_paths(self) -> List[str]:
        """Every location a settings file may live at, in priority order."""

        doc_file = legacy_file = dir_file = ""
        if is_dir(self.doc_sidecar_dir):
            doc_file = self.doc_sidecar_file
            legacy_file = get_legacy_sidecar_file(self.doc_path, self.settings)
        if is_dir(self.dir_sidecar_dir):
            dir_file = self.dir_sidecar_file
        history_file = self.history_file

        return [
            doc_file,
            doc_file + BACKUP_SUFFIX if doc_file else "",
            legacy_file,
            dir_file,
            dir_file + BACKUP_SUFFIX if dir_file else "",
            history_file,
            history_file + BACKUP_SUFFIX if history_file else "",
            get_kpdfview_file(self.doc_path),
        ]

    def scan(self) -> List[SidecarCandidate]:
        """Return the existing candidates, most recent first, without loading them."""

        return build_candidates(self.candidate_paths())

    # Loading -------------------------------------------------------------
    def load(self) -> Dict[str, Any]:
        """Load the most recent valid candidate into ``self.data``."""

        candidates = self.scan()
        stored: Dict[str, Any] = {}
        for candidate in candidates:
            data = self._read_candidate(candidate.path)
            if data:
                logger.debug("Settings for %s read from %s", self.doc_path, candidate.path)
                stored = data
                break
            self._evict(candidate.path)

        self.candidates = candidates
        self.data = stored
        self.data[DOC_PATH_KEY] = self.doc_path
        return self.data

    def _read_candidate(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            if os.path.getsize(path) == 0:
                return None
            with open(path, "r", encoding="utf-8") as handle:
                return codec.loads(handle.read())
        except (OSError, ValueError) as exc:
            logger.debug("Cannot decode %s: %s", path, exc)
            return None

    def _evict(self, path: str) -> None:
        if not self.settings.evict_corrupt:
            logger.warning("Skipping invalid sidecar %s", path)
            return
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Invalid sidecar %s could not be removed: %s", path, exc)
            return
        logger.warning("Invalid sidecar %s removed", path)

    # Blob accessors --------------------------------------------------------
    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> "SidecarHandle":
        self.data[key] = value
        return self

    def has(self, key: str) -> bool:
        return key in self.data

    def delete(self, key: str) -> "SidecarHandle":
        self.data.pop(key, None)
        return self

    def is_true(self, key: str) -> bool:
        return self.data.get(key) is True

    def is_false(self, key: str) -> bool:
        return self.data.get(key) is False

    # Writing ---------------------------------------------------------------
    def write_targets(self) -> List[Tuple[str, str]]:
        """(directory, file) pairs to try, in order, for the configured mode."""

        centralized = (self.dir_sidecar_dir, self.dir_sidecar_file)
        if self.settings.metadata_folder == "doc":
            return [(self.doc_sidecar_dir, self.doc_sidecar_file), centralized]
        return [centralized]

    def write(self, data: Optional[Dict[str, Any]] = None) -> bool:
        """Persist ``data`` (default: the current blob) to the first usable target.

        Returns ``False`` when no target could be written. The in-memory blob
        is never modified.
        """

        payload = self.data if data is None else data
        if not self.doc_path:
            logger.debug("No document path, nothing to write")
            return False
        if not payload:
            logger.debug("Refusing to write empty settings for %s", self.doc_path)
            return False

        text = codec.dumps(payload)
        for sidecar_dir, sidecar_file in self.write_targets():
            if self._write_target(sidecar_dir, sidecar_file, text):
                self.purge(sidecar_file)
                return True

        logger.error("Settings for %s could not be written to any location", self.doc_path)
        return False

    def _write_target(self, sidecar_dir: str, sidecar_file: str, text: str) -> bool:
        try:
            make_path(sidecar_dir)
        except OSError as exc:
            logger.warning("Cannot create %s: %s", sidecar_dir, exc)
            return False

        directory_updated = False
        if is_file(sidecar_file):
            # A backup must never share a timestamp with the write in flight.
            mtime = os.stat(sidecar_file).st_mtime
            if mtime < time.time() - self.settings.backup_min_age:
                try:
                    os.replace(sidecar_file, sidecar_file + BACKUP_SUFFIX)
                except OSError as exc:
                    logger.warning("Cannot back up %s: %s", sidecar_file, exc)
                else:
                    logger.debug("Renamed %s to %s", sidecar_file, sidecar_file + BACKUP_SUFFIX)
                    directory_updated = True

        logger.debug("Writing settings to %s", sidecar_file)
        try:
            with open(sidecar_file, "w", encoding="utf-8") as handle:
                handle.write(text)
                fsync_file(handle)
        except OSError as exc:
            logger.warning("Cannot write %s: %s", sidecar_file, exc)
            return False

        if directory_updated:
            fsync_directory(sidecar_file)
        return True

    # Purging ---------------------------------------------------------------
    def purge(self, keep: Optional[str] = None) -> None:
        """Remove loaded candidates other than ``keep`` and its backup, then empty sidecar dirs."""

        keep_paths = {keep, keep + BACKUP_SUFFIX} if keep else set()
        for candidate in self.candidates or []:
            path = candidate.path
            if path in keep_paths or not is_file(path):
                continue
            try:
                os.remove(path)
            except OSError as exc:
                logger.warning("Cannot purge %s: %s", path, exc)
            else:
                logger.debug("Purged %s", path)

        if is_dir(self.doc_sidecar_dir):
            try:
                os.rmdir(self.doc_sidecar_dir)
            except OSError as exc:
                logger.debug("Keeping %s: %s", self.doc_sidecar_dir, exc)
        if is_dir(self.dir_sidecar_dir):
            remove_empty_dirs(self.dir_sidecar_dir, self.settings.docsettings_dir)


def resolve(doc_path: str, settings: Optional[Settings] = None) -> SidecarHandle:
    """Return a handle with resolved paths and nothing loaded."""

    return SidecarHandle(doc_path, settings)


def open_document(doc_path: str, settings: Optional[Settings] = None) -> SidecarHandle:
    """Resolve and load the settings of ``doc_path``."""

    handle = resolve(doc_path, settings)
    handle.load()
    return handle


def exists(doc_path: str, settings: Optional[Settings] = None) -> bool:
    """True if a current in-place, centralized or history sidecar file exists."""

    if not doc_path:
        return False
    return (
        is_file(get_sidecar_file(doc_path, "doc", settings))
        or is_file(get_sidecar_file(doc_path, "dir", settings))
        or is_file(get_history_path(doc_path, settings))
    )


__all__ = ["DOC_PATH_KEY", "SidecarHandle", "exists", "open_document", "resolve"]
