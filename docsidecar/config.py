"""Configuration helpers for docsidecar."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

STORAGE_MODES = ("doc", "dir")


def _default_data_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".docsidecar")


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass
class Settings:
    """Storage settings threaded through every sidecar operation.

    ``metadata_folder`` selects where sidecars are written: ``"doc"`` beside the
    document with the centralized root as a fallback for read-only media, or
    ``"dir"`` under the centralized root only.
    """

    metadata_folder: str = "doc"
    data_dir: str = field(default_factory=_default_data_dir)
    docsettings_dir: str = ""
    history_dir: str = ""
    backup_min_age: float = 60.0
    evict_corrupt: bool = True

    def __post_init__(self) -> None:
        if self.metadata_folder not in STORAGE_MODES:
            raise ValueError(
                f"metadata_folder must be one of {STORAGE_MODES}, got {self.metadata_folder!r}"
            )
        if not self.docsettings_dir:
            self.docsettings_dir = os.path.join(self.data_dir, "docsettings")
        if not self.history_dir:
            self.history_dir = os.path.join(self.data_dir, "history")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load settings from environment variables once per process."""

    return Settings(
        metadata_folder=os.getenv("DOCSIDECAR_METADATA_FOLDER", "doc"),
        data_dir=os.getenv("DOCSIDECAR_DATA_DIR") or _default_data_dir(),
        docsettings_dir=os.getenv("DOCSIDECAR_DOCSETTINGS_DIR", ""),
        history_dir=os.getenv("DOCSIDECAR_HISTORY_DIR", ""),
        backup_min_age=float(os.getenv("DOCSIDECAR_BACKUP_MIN_AGE", "60")),
        evict_corrupt=_env_bool(os.getenv("DOCSIDECAR_EVICT_CORRUPT"), True),
    )


__all__ = ["STORAGE_MODES", "Settings", "load_settings"]
