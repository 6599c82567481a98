"""Folder-store contract, datatypes, and the local directory store.

This package contains non-UI storage primitives:
- folder/file node datatypes with parent back-references
- the ``FolderStore`` protocol consumed by the view
- a directory-backed store with poll-based change notifications
"""

from __future__ import annotations

from .types import (
    ROOT_PATH,
    ChangeEvent,
    ChangeKind,
    ChangeListener,
    FileNode,
    FolderNode,
    FolderStore,
    StoreNode,
    find_node,
    is_same_or_descendant_path,
    join_path,
    parent_path,
)
from .local import LocalFolderStore, read_text
from .watch import TreeScan, TreeWatcher, classify_change, scan_tree

__all__ = [
    "ROOT_PATH",
    "ChangeEvent",
    "ChangeKind",
    "ChangeListener",
    "FileNode",
    "FolderNode",
    "FolderStore",
    "StoreNode",
    "find_node",
    "is_same_or_descendant_path",
    "join_path",
    "parent_path",
    "LocalFolderStore",
    "read_text",
    "TreeScan",
    "TreeWatcher",
    "classify_change",
    "scan_tree",
]
