"""Sidecar candidate resolution, durable writes and purging."""
from .candidates import SidecarCandidate, build_candidates
from .codec import SidecarDecodeError
from .sidecar_store import DOC_PATH_KEY, SidecarHandle, exists, open_document, resolve
from .locking import edit, hold
from .migrate import migrate

__all__ = [
    "DOC_PATH_KEY",
    "SidecarCandidate",
    "SidecarDecodeError",
    "SidecarHandle",
    "build_candidates",
    "edit",
    "exists",
    "hold",
    "migrate",
    "open_document",
    "resolve",
]
