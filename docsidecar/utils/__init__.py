"""Utilities for logging and filesystem access."""
from .logging_utils import setup_logging
from .fs_utils import fsync_directory, fsync_file, is_dir, is_file, make_path, remove_empty_dirs

__all__ = [
    "setup_logging",
    "fsync_directory",
    "fsync_file",
    "is_dir",
    "is_file",
    "make_path",
    "remove_empty_dirs",
]
