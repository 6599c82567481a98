"""Directory-backed ``FolderStore`` implementation.

Maps store paths (``"A/B/note.md"``, root ``"/"``) onto a real directory.
Blocking filesystem work runs in worker threads so the event loop only
suspends at these I/O boundaries.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path

from ..errors import ConflictError, InvalidMoveError, StoreIOError
from .types import (
    ROOT_PATH,
    ChangeEvent,
    ChangeKind,
    ChangeListener,
    FileNode,
    FolderNode,
    StoreNode,
    find_node,
    is_same_or_descendant_path,
    join_path,
)
from .watch import DEFAULT_POLL_SECONDS, TreeWatcher, scan_tree

logger = logging.getLogger(__name__)

TRASH_DIR_NAME = ".trash"
_TEXT_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")


def read_text(path: Path) -> str:
    """Decode a file trying common encodings before replacement decoding."""
    data = path.read_bytes()
    for encoding in _TEXT_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def _created_time(st: os.stat_result) -> float:
    birth = getattr(st, "st_birthtime", None)
    return float(birth) if birth is not None else float(st.st_ctime)


class LocalFolderStore:
    """Folder store over ``root`` with poll-based external change detection."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()
        self._listeners: list[ChangeListener] = []
        self._watcher: TreeWatcher | None = None

    # -- path helpers -----------------------------------------------------

    def absolute(self, path: str) -> Path:
        """Return the filesystem path for store ``path``."""
        if path in ("", ROOT_PATH):
            return self.root
        parts = path.split("/")
        if any(part in ("", ".", "..") for part in parts):
            raise StoreIOError(f"invalid store path: {path!r}")
        return self.root.joinpath(*parts)

    def _build_tree(self) -> FolderNode:
        root = FolderNode(path=ROOT_PATH, name=self.root.name or str(self.root))
        pending: list[tuple[FolderNode, Path]] = [(root, self.root)]
        while pending:
            folder, directory = pending.pop()
            try:
                with os.scandir(directory) as iterator:
                    entries = list(iterator)
            except OSError as exc:
                if folder is root:
                    raise StoreIOError(f"cannot list {directory}: {exc}") from exc
                logger.warning("skipping unreadable folder %s: %s", directory, exc)
                continue
            for entry in entries:
                if entry.name.startswith("."):
                    continue
                child_path = join_path(folder.path, entry.name)
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    st = entry.stat(follow_symlinks=False)
                except OSError:
                    continue
                if is_dir:
                    child = FolderNode(path=child_path, name=entry.name, parent=folder)
                    folder.children.append(child)
                    pending.append((child, Path(entry.path)))
                else:
                    folder.children.append(
                        FileNode(
                            path=child_path,
                            name=entry.name,
                            mtime=float(st.st_mtime),
                            ctime=_created_time(st),
                            size=int(st.st_size),
                            parent=folder,
                        )
                    )
        return root

    # -- notifications ----------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` for change events and return an unsubscribe hook."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("change listener failed for %s", event)

    async def _notify(self, event: ChangeEvent) -> None:
        if self._watcher is not None:
            self._watcher.rebaseline(await asyncio.to_thread(scan_tree, self.root))
        self._emit(event)

    def start_watching(self, interval: float = DEFAULT_POLL_SECONDS) -> TreeWatcher:
        """Start polling the directory for external changes."""
        if self._watcher is None:
            self._watcher = TreeWatcher(lambda: scan_tree(self.root), self._emit, interval)
        self._watcher.start()
        return self._watcher

    def stop_watching(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()

    # -- queries ----------------------------------------------------------

    async def list_root(self) -> FolderNode:
        return await asyncio.to_thread(self._build_tree)

    async def get(self, path: str) -> StoreNode | None:
        root = await self.list_root()
        return find_node(root, path)

    async def read(self, file: FileNode) -> str:
        target = self.absolute(file.path)
        try:
            return await asyncio.to_thread(read_text, target)
        except OSError as exc:
            raise StoreIOError(f"cannot read {file.path}: {exc}") from exc

    async def exists(self, path: str) -> bool:
        target = self.absolute(path)
        return await asyncio.to_thread(os.path.lexists, target)

    def resource_url(self, file: FileNode) -> str:
        return self.absolute(file.path).as_uri()

    # -- mutations --------------------------------------------------------

    def _create_sync(self, path: str, content: str) -> FileNode:
        target = self.absolute(path)
        if not target.parent.is_dir():
            raise StoreIOError(f"parent folder missing for {path}")
        try:
            with target.open("x", encoding="utf-8") as handle:
                handle.write(content)
        except FileExistsError as exc:
            raise ConflictError(path) from exc
        except OSError as exc:
            raise StoreIOError(f"cannot create {path}: {exc}") from exc
        node = find_node(self._build_tree(), path)
        if not isinstance(node, FileNode):
            raise StoreIOError(f"created file vanished: {path}")
        return node

    async def create(self, path: str, content: str) -> FileNode:
        node = await asyncio.to_thread(self._create_sync, path, content)
        logger.info("created file %s", path)
        await self._notify(ChangeEvent(ChangeKind.CREATED, path=path))
        return node

    def _create_folder_sync(self, path: str) -> FolderNode:
        target = self.absolute(path)
        try:
            target.mkdir()
        except FileExistsError as exc:
            raise ConflictError(path) from exc
        except OSError as exc:
            raise StoreIOError(f"cannot create folder {path}: {exc}") from exc
        node = find_node(self._build_tree(), path)
        if not isinstance(node, FolderNode):
            raise StoreIOError(f"created folder vanished: {path}")
        return node

    async def create_folder(self, path: str) -> FolderNode:
        node = await asyncio.to_thread(self._create_folder_sync, path)
        logger.info("created folder %s", path)
        await self._notify(ChangeEvent(ChangeKind.CREATED, path=path))
        return node

    def _rename_sync(self, node: StoreNode, new_path: str) -> None:
        if isinstance(node, FolderNode):
            if node.is_root or node.path == ROOT_PATH:
                raise InvalidMoveError("root", "Cannot move the root folder")
            if is_same_or_descendant_path(new_path, node.path):
                raise InvalidMoveError("into-descendant", "Cannot move a folder into one of its subfolders")
        source = self.absolute(node.path)
        target = self.absolute(new_path)
        if not os.path.lexists(source):
            raise StoreIOError(f"source missing: {node.path}")
        if os.path.lexists(target):
            try:
                same_entry = os.path.samefile(source, target)
            except OSError:
                same_entry = False
            if not same_entry:
                raise ConflictError(new_path)
        if not target.parent.is_dir():
            raise StoreIOError(f"destination folder missing for {new_path}")
        try:
            os.rename(source, target)
        except OSError as exc:
            raise StoreIOError(f"cannot rename {node.path} to {new_path}: {exc}") from exc

    async def rename(self, node: StoreNode, new_path: str) -> None:
        await asyncio.to_thread(self._rename_sync, node, new_path)
        logger.info("renamed %s -> %s", node.path, new_path)
        await self._notify(ChangeEvent(ChangeKind.RENAMED, path=new_path, old_path=node.path))

    def _trash_sync(self, node: StoreNode) -> str:
        if isinstance(node, FolderNode) and node.path == ROOT_PATH:
            raise StoreIOError("cannot trash the root folder")
        source = self.absolute(node.path)
        trash_dir = self.root / TRASH_DIR_NAME
        try:
            trash_dir.mkdir(exist_ok=True)
            target = trash_dir / node.name
            counter = 1
            while os.path.lexists(target):
                target = trash_dir / f"{node.name} {counter}"
                counter += 1
            shutil.move(str(source), str(target))
        except OSError as exc:
            raise StoreIOError(f"cannot trash {node.path}: {exc}") from exc
        return str(target)

    async def trash(self, node: StoreNode) -> None:
        target = await asyncio.to_thread(self._trash_sync, node)
        logger.info("trashed %s -> %s", node.path, target)
        await self._notify(ChangeEvent(ChangeKind.DELETED, path=node.path))


__all__ = ["LocalFolderStore", "TRASH_DIR_NAME", "read_text"]
