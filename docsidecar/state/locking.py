"""In-process mutual exclusion around a document's sidecar.

The rename, write and fsync sequence of :meth:`SidecarHandle.write` is not
atomic, so callers sharing a process must not interleave on one document.
Locks are keyed by the in-place sidecar directory, which is the same for
every storage mode. The registry keeps one lock per document touched for the
life of the process; entries are never dropped because a lock may be held or
awaited while another caller looks it up.
"""
from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager
from typing import Dict, Iterator, Optional

from ..config import Settings, load_settings
from ..paths.resolver import get_sidecar_dir
from .sidecar_store import SidecarHandle, open_document

_LOCKS: Dict[str, threading.RLock] = {}
_REGISTRY_LOCK = threading.Lock()


def lock_key(doc_path: str, settings: Optional[Settings] = None) -> str:
    return get_sidecar_dir(doc_path, "doc", settings)


def _lock(key: str) -> threading.RLock:
    with _REGISTRY_LOCK:
        lock = _LOCKS.get(key)
        if lock is None:
            lock = threading.RLock()
            _LOCKS[key] = lock
        return lock


def lock_for(doc_path: str, settings: Optional[Settings] = None) -> threading.RLock:
    return _lock(lock_key(doc_path, settings))


@contextmanager
def hold(*doc_paths: str, settings: Optional[Settings] = None) -> Iterator[None]:
    """Hold the locks of every document in ``doc_paths``, in a stable order."""

    settings = settings or load_settings()
    keys = sorted({lock_key(path, settings) for path in doc_paths if path})
    with ExitStack() as stack:
        for key in keys:
            stack.enter_context(_lock(key))
        yield


@contextmanager
def edit(doc_path: str, settings: Optional[Settings] = None, *, save: bool = True) -> Iterator[SidecarHandle]:
    """Load ``doc_path`` under its lock and write it back when the block exits cleanly."""

    settings = settings or load_settings()
    with hold(doc_path, settings=settings):
        handle = open_document(doc_path, settings)
        yield handle
        if save:
            handle.write()


__all__ = ["edit", "hold", "lock_for", "lock_key"]
