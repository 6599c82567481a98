"""Preview-card ordering strategies."""

from __future__ import annotations

import locale
from enum import Enum

from .store.types import FileNode


class SortOrder(str, Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    MODIFIED_NEW = "modified-new"
    MODIFIED_OLD = "modified-old"
    CREATED_NEW = "created-new"
    CREATED_OLD = "created-old"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value: object) -> SortOrder:
        """Return the order named by ``value``, defaulting to name ascending."""
        try:
            return cls(value)
        except ValueError:
            return cls.NAME_ASC

    def next(self) -> SortOrder:
        """Return the following order in menu sequence (wraps around)."""
        members = list(SortOrder)
        return members[(members.index(self) + 1) % len(members)]


_LABELS = {
    SortOrder.NAME_ASC: "Name (a to z)",
    SortOrder.NAME_DESC: "Name (z to a)",
    SortOrder.MODIFIED_NEW: "Date modified (newest first)",
    SortOrder.MODIFIED_OLD: "Date modified (oldest first)",
    SortOrder.CREATED_NEW: "Date created (newest first)",
    SortOrder.CREATED_OLD: "Date created (oldest first)",
}


def name_sort_key(name: str) -> tuple[str, str, str]:
    """Locale-aware key; distinct names never compare equal."""
    return (locale.strxfrm(name.casefold()), locale.strxfrm(name), name)


def sort_files(files: list[FileNode], order: SortOrder) -> list[FileNode]:
    """Return ``files`` ordered by ``order``; equal keys keep input order."""
    if order is SortOrder.NAME_ASC:
        return sorted(files, key=lambda f: name_sort_key(f.basename))
    if order is SortOrder.NAME_DESC:
        return sorted(files, key=lambda f: name_sort_key(f.basename), reverse=True)
    if order is SortOrder.MODIFIED_NEW:
        return sorted(files, key=lambda f: f.mtime, reverse=True)
    if order is SortOrder.MODIFIED_OLD:
        return sorted(files, key=lambda f: f.mtime)
    if order is SortOrder.CREATED_NEW:
        return sorted(files, key=lambda f: f.ctime, reverse=True)
    return sorted(files, key=lambda f: f.ctime)


__all__ = ["SortOrder", "name_sort_key", "sort_files"]
