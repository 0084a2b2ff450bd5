"""Core services."""

from .service import MediaListService

__all__ = ["MediaListService"]
