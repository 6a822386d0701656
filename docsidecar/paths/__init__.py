"""Sidecar path resolution."""
from .resolver import (
    basename_from_history_name,
    dir_from_history_name,
    doc_id_from_history_name,
    get_history_path,
    get_kpdfview_file,
    get_legacy_sidecar_file,
    get_sidecar_dir,
    get_sidecar_file,
    history_name_for,
)

__all__ = [
    "basename_from_history_name",
    "dir_from_history_name",
    "doc_id_from_history_name",
    "get_history_path",
    "get_kpdfview_file",
    "get_legacy_sidecar_file",
    "get_sidecar_dir",
    "get_sidecar_file",
    "history_name_for",
]
