"""Follow a document's settings when the document is renamed, copied or deleted."""
from __future__ import annotations

import logging
import os
from typing import Optional

from ..config import Settings, load_settings
from .locking import hold
from .sidecar_store import DOC_PATH_KEY, exists, open_document

logger = logging.getLogger(__name__)

CACHE_FILE_KEY = "cache_file_path"


def migrate(
    doc_path: str,
    new_doc_path: Optional[str] = None,
    copy: bool = False,
    settings: Optional[Settings] = None,
) -> bool:
    """Move, copy or drop the settings of ``doc_path``.

    With ``new_doc_path`` the loaded settings are written in full for the new
    document, replacing whatever it had. Without it the document is treated
    as deleted and the cache file named in its settings is removed. Unless
    ``copy`` is set, every sidecar candidate of ``doc_path`` is purged.
    """

    settings = settings or load_settings()
    if not exists(doc_path, settings):
        return True

    with hold(doc_path, new_doc_path or "", settings=settings):
        old = open_document(doc_path, settings)
        if new_doc_path:
            new = open_document(new_doc_path, settings)
            payload = dict(old.data)
            payload[DOC_PATH_KEY] = new_doc_path
            if not new.write(payload):
                logger.error("Settings of %s could not be moved to %s", doc_path, new_doc_path)
                return False
            logger.debug("Settings of %s %s to %s", doc_path, "copied" if copy else "moved", new_doc_path)
        else:
            _remove_cache_file(old.get(CACHE_FILE_KEY))

        if not copy:
            old.purge()
    return True


def _remove_cache_file(cache_file_path: Optional[str]) -> None:
    if not cache_file_path:
        return
    try:
        os.remove(cache_file_path)
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("Cannot remove cache file %s: %s", cache_file_path, exc)
        return
    logger.debug("Removed cache file %s", cache_file_path)


__all__ = ["CACHE_FILE_KEY", "migrate"]
