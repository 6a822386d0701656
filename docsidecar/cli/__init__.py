"""Command line interface."""
from .runner import app

__all__ = ["app"]
