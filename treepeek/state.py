"""Collapse/selection state owned by one open view.

Everything here is plain in-memory state: any path is accepted, nothing
touches the store, and every mutator is idempotent.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .icons import FolderIconStyle
from .sorting import SortOrder

PREVIEW_LINES_MIN = 1
PREVIEW_LINES_MAX = 10
DEFAULT_PREVIEW_LINES = 4
TREE_WIDTH_MIN = 12
DEFAULT_TREE_WIDTH = 32


def clamp_preview_lines(value: int) -> int:
    return max(PREVIEW_LINES_MIN, min(PREVIEW_LINES_MAX, int(value)))


@dataclass
class ViewState:
    """Selection plus layout/sort preferences for the two panes."""

    selected_folder_path: str | None = None
    active_file_path: str | None = None
    sort_order: SortOrder = SortOrder.NAME_ASC
    preview_lines: int = DEFAULT_PREVIEW_LINES
    tree_width: int = DEFAULT_TREE_WIDTH


@dataclass
class ViewSettings:
    """Display toggles edited from the settings surface."""

    remove_link_brackets: bool = True
    compact_mode: bool = False
    use_accent_color: bool = True
    folder_icon_style: FolderIconStyle = FolderIconStyle.CUSTOM
    folder_icons: dict[str, str] = field(default_factory=dict)


class CollapseSelectionStore:
    """Collapse set plus the selected folder and active file."""

    def __init__(self, collapsed: Iterable[str] = (), view: ViewState | None = None) -> None:
        # dict keys keep insertion order for the persisted sequence
        self._collapsed: dict[str, None] = dict.fromkeys(collapsed)
        self.view = view if view is not None else ViewState()

    def toggle_collapse(self, path: str) -> bool:
        """Flip ``path`` in the collapse set and return whether it is now collapsed."""
        if path in self._collapsed:
            del self._collapsed[path]
            return False
        self._collapsed[path] = None
        return True

    def is_collapsed(self, path: str) -> bool:
        return path in self._collapsed

    def collapsed_paths(self) -> list[str]:
        return list(self._collapsed)

    def select(self, folder_path: str | None) -> bool:
        """Set the selected folder; return ``True`` only when it changed."""
        if self.view.selected_folder_path == folder_path:
            return False
        self.view.selected_folder_path = folder_path
        return True

    def set_active_file(self, path: str | None) -> bool:
        """Set the active file; return ``True`` only when it changed."""
        if self.view.active_file_path == path:
            return False
        self.view.active_file_path = path
        return True

    @property
    def selected_folder_path(self) -> str | None:
        return self.view.selected_folder_path

    @property
    def active_file_path(self) -> str | None:
        return self.view.active_file_path


__all__ = [
    "PREVIEW_LINES_MIN",
    "PREVIEW_LINES_MAX",
    "DEFAULT_PREVIEW_LINES",
    "TREE_WIDTH_MIN",
    "DEFAULT_TREE_WIDTH",
    "clamp_preview_lines",
    "ViewState",
    "ViewSettings",
    "CollapseSelectionStore",
]
