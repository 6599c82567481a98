"""Folder icon styles for tree rows."""

from __future__ import annotations

import unicodedata
from collections.abc import Mapping
from enum import Enum

FOLDER_GLYPH = "📁"
FOLDER_WITH_SUBFOLDERS_GLYPH = "📂"


class FolderIconStyle(str, Enum):
    NONE = "none"
    CUSTOM = "custom"
    FOLDER = "folder"

    @classmethod
    def parse(cls, value: object) -> FolderIconStyle:
        try:
            return cls(value)
        except ValueError:
            return cls.CUSTOM

    def next(self) -> FolderIconStyle:
        members = list(FolderIconStyle)
        return members[(members.index(self) + 1) % len(members)]


def is_emoji_icon(value: str) -> bool:
    """Return whether ``value`` contains a pictographic symbol."""
    return any(unicodedata.category(ch) == "So" for ch in value)


def folder_icon(
    path: str,
    has_subfolders: bool,
    style: FolderIconStyle,
    custom_icons: Mapping[str, str] | None = None,
) -> str:
    """Return the icon text shown before a folder name ("" for none)."""
    if style is FolderIconStyle.NONE:
        return ""
    if style is FolderIconStyle.FOLDER:
        return FOLDER_GLYPH
    custom = (custom_icons or {}).get(path)
    if custom and is_emoji_icon(custom):
        return custom
    return FOLDER_WITH_SUBFOLDERS_GLYPH if has_subfolders else FOLDER_GLYPH


__all__ = [
    "FOLDER_GLYPH",
    "FOLDER_WITH_SUBFOLDERS_GLYPH",
    "FolderIconStyle",
    "is_emoji_icon",
    "folder_icon",
]
