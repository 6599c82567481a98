"""Error taxonomy for folder-store operations.

``ConflictError`` and ``InvalidMoveError`` are recoverable by the view.
``StoreIOError`` wraps any other store failure and is also an ``OSError``.
"""

from __future__ import annotations


class FolderStoreError(Exception):
    """Base class for failures reported by a folder store."""


class ConflictError(FolderStoreError):
    """Target path already exists."""

    def __init__(self, path: str) -> None:
        super().__init__(f"path already exists: {path}")
        self.path = path


class InvalidMoveError(FolderStoreError):
    """Requested move would break the folder hierarchy."""

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class StoreIOError(FolderStoreError, OSError):
    """Underlying storage failed (unreadable file, permission, missing parent)."""


__all__ = [
    "FolderStoreError",
    "ConflictError",
    "InvalidMoveError",
    "StoreIOError",
]
