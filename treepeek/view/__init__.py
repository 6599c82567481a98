"""Tree rows, preview cards and the controller that keeps them in sync."""

from .cards import CardLine, PreviewCard, layout_cards
from .controller import (
    EMPTY_FOLDER_MESSAGE,
    NO_SELECTION_MESSAGE,
    NOTICE_SECONDS,
    DragPayload,
    MenuItem,
    Notice,
    ViewController,
)
from .tree_rows import TreeRow, build_tree_rows, format_tree_row

__all__ = [
    "CardLine",
    "PreviewCard",
    "layout_cards",
    "EMPTY_FOLDER_MESSAGE",
    "NO_SELECTION_MESSAGE",
    "NOTICE_SECONDS",
    "DragPayload",
    "MenuItem",
    "Notice",
    "ViewController",
    "TreeRow",
    "build_tree_rows",
    "format_tree_row",
]
