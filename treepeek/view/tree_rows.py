"""Folder rows for the tree pane.

Only folders appear. The root row comes first and is always expanded; each
other folder's subtree is emitted unless its path is in the collapse set.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ..icons import FolderIconStyle, folder_icon
from ..sorting import name_sort_key
from ..state import CollapseSelectionStore
from ..store.types import FolderNode

INDENT_COLUMNS = 2
COMPACT_INDENT_COLUMNS = 1
EXPANDED_MARKER = "▾ "
COLLAPSED_MARKER = "▸ "


@dataclass(frozen=True)
class TreeRow:
    """One visible folder line in the tree pane."""

    path: str
    name: str
    depth: int
    has_subfolders: bool
    collapsed: bool
    selected: bool
    icon: str = ""
    is_root: bool = False

    @property
    def collapsible(self) -> bool:
        return self.has_subfolders and not self.is_root


def build_tree_rows(
    root: FolderNode,
    state: CollapseSelectionStore,
    icon_style: FolderIconStyle = FolderIconStyle.CUSTOM,
    custom_icons: Mapping[str, str] | None = None,
) -> list[TreeRow]:
    """Flatten ``root`` into the visible rows in display order."""
    selected = state.selected_folder_path
    rows = [
        TreeRow(
            path=root.path,
            name=root.name,
            depth=0,
            has_subfolders=root.has_subfolders(),
            collapsed=False,
            selected=selected == root.path,
            icon=folder_icon(root.path, root.has_subfolders(), icon_style, custom_icons),
            is_root=True,
        )
    ]

    def walk(folder: FolderNode, depth: int) -> None:
        for child in sorted(folder.folders(), key=lambda node: name_sort_key(node.name)):
            has_subfolders = child.has_subfolders()
            collapsed = state.is_collapsed(child.path)
            rows.append(
                TreeRow(
                    path=child.path,
                    name=child.name,
                    depth=depth,
                    has_subfolders=has_subfolders,
                    collapsed=collapsed,
                    selected=selected == child.path,
                    icon=folder_icon(child.path, has_subfolders, icon_style, custom_icons),
                )
            )
            if not collapsed:
                walk(child, depth + 1)

    walk(root, 1)
    return rows


def row_indent(depth: int, compact: bool = False) -> int:
    return depth * (COMPACT_INDENT_COLUMNS if compact else INDENT_COLUMNS)


def marker_column(row: TreeRow, compact: bool = False) -> int:
    """Zero-based column of the collapse caret (clicks there toggle)."""
    return row_indent(row.depth, compact)


def format_tree_row(row: TreeRow, compact: bool = False) -> str:
    """Plain text for ``row``: indent, caret, icon and name."""
    marker = "  "
    if row.collapsible:
        marker = COLLAPSED_MARKER if row.collapsed else EXPANDED_MARKER
    icon = f"{row.icon} " if row.icon else ""
    return f"{' ' * row_indent(row.depth, compact)}{marker}{icon}{row.name}"


__all__ = [
    "TreeRow",
    "build_tree_rows",
    "row_indent",
    "marker_column",
    "format_tree_row",
]
