"""Runtime helpers for Pipes."""

from .helpers import configure_logging

__all__ = ["configure_logging"]
