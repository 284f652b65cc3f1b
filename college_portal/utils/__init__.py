"""Utility helpers for reusable functionality."""

from .clock import from_storage, portal_now, portal_now_naive, to_storage

__all__ = [
    "from_storage",
    "portal_now",
    "portal_now_naive",
    "to_storage",
]
