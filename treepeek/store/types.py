"""Folder-store datatypes and the contract the view consumes.

Nodes form a parent/child graph owned by the store. The view reads them and
only changes the underlying storage through ``FolderStore`` operations.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Union

ROOT_PATH = "/"


def join_path(folder_path: str, name: str) -> str:
    """Join a child ``name`` onto a store folder path."""
    if folder_path in ("", ROOT_PATH):
        return name
    return f"{folder_path}/{name}"


def parent_path(path: str) -> str:
    """Return the store path of the folder containing ``path``."""
    if path in ("", ROOT_PATH) or "/" not in path:
        return ROOT_PATH
    return path.rsplit("/", 1)[0]


def is_same_or_descendant_path(path: str, ancestor: str) -> bool:
    """Return whether ``path`` equals ``ancestor`` or lies beneath it."""
    if ancestor in ("", ROOT_PATH):
        return True
    return path == ancestor or path.startswith(ancestor + "/")


@dataclass(eq=False)
class FileNode:
    """One file in the store with the metadata used for sorting and previews."""

    path: str
    name: str
    mtime: float = 0.0
    ctime: float = 0.0
    size: int = 0
    parent: FolderNode | None = field(default=None, repr=False)

    @property
    def basename(self) -> str:
        stem, dot, _ext = self.name.rpartition(".")
        return stem if dot and stem else self.name

    @property
    def extension(self) -> str:
        stem, dot, ext = self.name.rpartition(".")
        return ext.lower() if dot and stem else ""


@dataclass(eq=False)
class FolderNode:
    """One folder with its direct children."""

    path: str
    name: str
    children: list[FolderNode | FileNode] = field(default_factory=list, repr=False)
    parent: FolderNode | None = field(default=None, repr=False)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def folders(self) -> list[FolderNode]:
        return [child for child in self.children if isinstance(child, FolderNode)]

    def files(self) -> list[FileNode]:
        return [child for child in self.children if isinstance(child, FileNode)]

    def has_subfolders(self) -> bool:
        return any(isinstance(child, FolderNode) for child in self.children)


StoreNode = Union[FolderNode, FileNode]


class ChangeKind(str, Enum):
    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class ChangeEvent:
    """Store change notification.

    Only ``kind`` is meaningful to the view; ``path`` and ``old_path`` are
    best-effort hints. Batched changes list every touched path in ``paths``.
    """

    kind: ChangeKind
    path: str = ""
    old_path: str | None = None
    paths: tuple[str, ...] = ()

    def touched(self) -> tuple[str, ...]:
        """Every path this event names, hints first."""
        named = [p for p in (self.path, self.old_path) if p]
        return tuple(dict.fromkeys([*named, *self.paths]))


ChangeListener = Callable[[ChangeEvent], None]


class FolderStore(Protocol):
    """Hierarchical file store consumed by the view controller."""

    async def list_root(self) -> FolderNode: ...

    async def get(self, path: str) -> StoreNode | None: ...

    async def read(self, file: FileNode) -> str: ...

    async def exists(self, path: str) -> bool: ...

    async def create(self, path: str, content: str) -> FileNode: ...

    async def create_folder(self, path: str) -> FolderNode: ...

    async def rename(self, node: StoreNode, new_path: str) -> None: ...

    async def trash(self, node: StoreNode) -> None: ...

    def resource_url(self, file: FileNode) -> str: ...

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]: ...


def find_node(root: FolderNode, path: str) -> StoreNode | None:
    """Walk ``root`` to the node at ``path`` or return ``None``."""
    if path in ("", ROOT_PATH):
        return root
    node: StoreNode = root
    for part in path.split("/"):
        if not isinstance(node, FolderNode):
            return None
        for child in node.children:
            if child.name == part:
                node = child
                break
        else:
            return None
    return node


__all__ = [
    "ROOT_PATH",
    "join_path",
    "parent_path",
    "is_same_or_descendant_path",
    "FileNode",
    "FolderNode",
    "StoreNode",
    "ChangeKind",
    "ChangeEvent",
    "ChangeListener",
    "FolderStore",
    "find_node",
]
