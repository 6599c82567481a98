"""Move legality checks for drag-and-drop reorganization.

Moves are validated before any store call; the store has no rollback. The
validator keeps no relationships of its own and asks ``parent_of`` for the
live parent chain on every check.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .errors import InvalidMoveError
from .store.types import FolderNode, StoreNode

SELF_MOVE = "self-move"
INTO_DESCENDANT = "into-descendant"
NO_OP = "no-op"

_MESSAGES = {
    SELF_MOVE: "Cannot move a folder into itself",
    INTO_DESCENDANT: "Cannot move a folder into one of its subfolders",
    NO_OP: "Folder is already in this location",
}


@dataclass(frozen=True)
class MoveVerdict:
    """Outcome of ``can_move``; ``reason`` is ``None`` when the move is legal."""

    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str:
        return _MESSAGES.get(self.reason or "", "")


MOVE_OK = MoveVerdict()


def _default_parent_of(node: StoreNode) -> FolderNode | None:
    return node.parent


def is_descendant_of(
    candidate: FolderNode,
    ancestor: FolderNode,
    parent_of: Callable[[StoreNode], FolderNode | None] = _default_parent_of,
) -> bool:
    """Walk ``candidate``'s parent chain looking for ``ancestor``.

    ``candidate`` itself counts. The walk stops at root.
    """
    current: FolderNode | None = candidate
    while current is not None:
        if current.path == ancestor.path:
            return True
        current = parent_of(current)
    return False


def can_move(
    item: StoreNode,
    destination: FolderNode,
    parent_of: Callable[[StoreNode], FolderNode | None] = _default_parent_of,
) -> MoveVerdict:
    """Decide whether ``item`` may move into ``destination``.

    Folders are checked for self-move, then move-into-descendant; every item
    is then checked for a move to its current parent.
    """
    if isinstance(item, FolderNode):
        if item.path == destination.path:
            return MoveVerdict(SELF_MOVE)
        if is_descendant_of(destination, item, parent_of):
            return MoveVerdict(INTO_DESCENDANT)
    current_parent = parent_of(item)
    if current_parent is not None and current_parent.path == destination.path:
        return MoveVerdict(NO_OP)
    return MOVE_OK


def ensure_can_move(
    item: StoreNode,
    destination: FolderNode,
    parent_of: Callable[[StoreNode], FolderNode | None] = _default_parent_of,
) -> None:
    """Raise ``InvalidMoveError`` when ``can_move`` rejects the move."""
    verdict = can_move(item, destination, parent_of)
    if not verdict.ok:
        raise InvalidMoveError(verdict.reason or "", verdict.message)


__all__ = [
    "SELF_MOVE",
    "INTO_DESCENDANT",
    "NO_OP",
    "MoveVerdict",
    "MOVE_OK",
    "is_descendant_of",
    "can_move",
    "ensure_can_move",
]
