"""Pure functions mapping a document path to its sidecar locations.

Document identifiers are ``/``-separated strings. Every function returns an
empty string for an empty identifier instead of raising.

Layout for ``/books/novel.epub``::

    /books/novel.sdr/metadata.epub.lua           in-place ("doc")
    <docsettings>/books/novel.sdr/metadata.epub.lua   centralized ("dir")
    /books/novel.sdr/novel.epub.lua              legacy in-place
    <history>/[#books#] novel.epub.lua           legacy history
    /books/novel.epub.kpdfview.lua               legacy kpdfview
"""
from __future__ import annotations

import posixpath
from typing import Optional, Tuple

from ..config import Settings, load_settings

SIDECAR_SUFFIX = ".sdr"
HISTORY_SEPARATOR = "#"
BACKUP_SUFFIX = ".old"


def _split_extension(doc_path: str) -> Tuple[str, str]:
    stem, ext = posixpath.splitext(doc_path)
    return stem, ext[1:]


def get_sidecar_dir(doc_path: str, location: Optional[str] = None, settings: Optional[Settings] = None) -> str:
    """Return the ``.sdr`` directory for ``doc_path``.

    ``location`` defaults to ``settings.metadata_folder``; ``"dir"`` roots the
    result under the centralized docsettings directory.
    """

    if not doc_path:
        return ""
    settings = settings or load_settings()
    stem, _ = _split_extension(doc_path)
    if (location or settings.metadata_folder) == "dir":
        root = settings.docsettings_dir.rstrip("/")
        stem = root + stem if stem.startswith("/") else f"{root}/{stem}"
    return stem + SIDECAR_SUFFIX


def get_sidecar_file(doc_path: str, location: Optional[str] = None, settings: Optional[Settings] = None) -> str:
    """Return ``<sidecar dir>/metadata.<ext>.lua`` for ``doc_path``."""

    if not doc_path:
        return ""
    _, ext = _split_extension(doc_path)
    return f"{get_sidecar_dir(doc_path, location, settings)}/metadata.{ext}.lua"


def get_legacy_sidecar_file(doc_path: str, settings: Optional[Settings] = None) -> str:
    if not doc_path:
        return ""
    sidecar_dir = get_sidecar_dir(doc_path, "doc", settings)
    return f"{sidecar_dir}/{posixpath.basename(doc_path)}.lua"


def get_kpdfview_file(doc_path: str) -> str:
    if not doc_path:
        return ""
    return doc_path + ".kpdfview.lua"


def history_name_for(doc_path: str) -> str:
    """Return the flat legacy history file name, e.g. ``[#books#] novel.epub.lua``."""

    if not doc_path:
        return ""
    directory, name = posixpath.split(doc_path)
    if directory:
        directory = directory.rstrip("/") + "/"
    return "[" + directory.replace("/", HISTORY_SEPARATOR) + "] " + name + ".lua"


def get_history_path(doc_path: str, settings: Optional[Settings] = None) -> str:
    if not doc_path:
        return ""
    settings = settings or load_settings()
    return posixpath.join(settings.history_dir, history_name_for(doc_path))


def _bracketed_span(hist_name: str) -> Optional[Tuple[int, int]]:
    """Return the span of the first balanced ``[...]`` group, if any."""

    start = hist_name.find("[")
    if start < 0:
        return None
    depth = 0
    for index in range(start, len(hist_name)):
        char = hist_name[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return start, index + 1
    return None


def _parse_history_name(hist_name: str) -> Optional[Tuple[str, str]]:
    # .lua.old backups and anything else are not history entries
    if not hist_name or not hist_name.endswith(".lua"):
        return None
    span = _bracketed_span(hist_name)
    if span is None or span[0] != 0:
        return None
    inner = hist_name[1 : span[1] - 1]
    directory = inner.replace(HISTORY_SEPARATOR, "/")
    if directory != "/":
        directory = directory.rstrip("/")
    name = hist_name[span[1] + 1 : -len(".lua")]
    return directory, name


def dir_from_history_name(hist_name: str) -> str:
    """Return the directory of the document a history file was named after."""

    parsed = _parse_history_name(hist_name)
    return parsed[0] if parsed else ""


def basename_from_history_name(hist_name: str) -> str:
    parsed = _parse_history_name(hist_name)
    return parsed[1] if parsed else ""


def doc_id_from_history_name(hist_name: str) -> str:
    """Inverse of :func:`history_name_for`; ``""`` for malformed names."""

    parsed = _parse_history_name(hist_name)
    if not parsed or not parsed[1]:
        return ""
    directory, name = parsed
    if not directory:
        return name
    return posixpath.join(directory, name)


__all__ = [
    "BACKUP_SUFFIX",
    "SIDECAR_SUFFIX",
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
