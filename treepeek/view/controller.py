"""Tree/preview synchronization for one open folder view.

The controller owns the collapse/selection state, the visible tree rows and
the preview cards. Gestures and store change events mutate state and request
render passes through the ``RenderScheduler``; the passes read the store and
replace ``rows``/``cards`` wholesale when they finish.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..config import ViewConfig, save_view_config
from ..errors import ConflictError, InvalidMoveError
from ..hierarchy import NO_OP, can_move
from ..icons import FolderIconStyle
from ..naming import (
    NEW_FILE_EXTENSION,
    NEW_FILE_STEM,
    NEW_FOLDER_STEM,
    next_available_path,
)
from ..preview.kinds import IMAGE_KIND, classify
from ..preview.text import extract_preview
from ..scheduler import RenderScheduler
from ..sorting import SortOrder, sort_files
from ..state import TREE_WIDTH_MIN, ViewState, clamp_preview_lines
from ..store.types import (
    ROOT_PATH,
    ChangeEvent,
    ChangeKind,
    FileNode,
    FolderNode,
    FolderStore,
    StoreNode,
    find_node,
    is_same_or_descendant_path,
    join_path,
    parent_path,
)
from .cards import PreviewCard
from .tree_rows import TreeRow, build_tree_rows

logger = logging.getLogger(__name__)

NOTICE_SECONDS = 3.0
NO_SELECTION_MESSAGE = "Select a folder to preview its files"
EMPTY_FOLDER_MESSAGE = "This folder contains no files"
DUPLICATE_SUFFIX = "copy"
CREATE_ATTEMPTS = 2

ACTION_NEW_FILE = "new-file"
ACTION_NEW_FOLDER = "new-folder"
ACTION_RENAME = "rename"
ACTION_DUPLICATE = "duplicate"
ACTION_DELETE = "delete"


@dataclass(frozen=True)
class Notice:
    """Transient status-line message visible until ``until`` (monotonic)."""

    text: str
    until: float


@dataclass(frozen=True)
class DragPayload:
    path: str
    is_folder: bool


@dataclass(frozen=True)
class MenuItem:
    label: str
    action: str
    confirm: bool = False


def _remap(path: str | None, old: str, new: str) -> str | None:
    if path is None or not is_same_or_descendant_path(path, old):
        return path
    return new + path[len(old):]


class ViewController:
    """State and gestures of the dual-pane view."""

    def __init__(
        self,
        store: FolderStore,
        config: ViewConfig | None = None,
        *,
        on_change: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        persist: bool = True,
    ) -> None:
        config = config if config is not None else ViewConfig()
        self.store = store
        self.state = config.build_state()
        self.settings = config.settings
        self.scheduler = RenderScheduler(self.render_tree, self.render_preview)
        self.rows: list[TreeRow] = []
        self.cards: list[PreviewCard] = []
        self.preview_message = NO_SELECTION_MESSAGE
        self.previews_collapsed = False
        self.notice: Notice | None = None
        self.drag: DragPayload | None = None
        self._on_change = on_change
        self._clock = clock
        self._persist_enabled = persist
        self._preview_generation = 0
        self._unsubscribe: Callable[[], None] | None = None

    # -- lifecycle --------------------------------------------------------

    async def open(self, *, delayed_rerender: bool = True) -> None:
        """Subscribe to the store and paint both panes once."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.on_store_change)
        await self.scheduler.request_tree_render()
        await self.scheduler.request_preview_render()
        if delayed_rerender:
            self.scheduler.schedule_delayed_tree_render()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.scheduler.close()

    # -- helpers ----------------------------------------------------------

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _persist(self) -> None:
        if self._persist_enabled:
            save_view_config(ViewConfig.from_state(self.state, self.settings))

    def _remap_paths(self, old: str, new: str) -> None:
        self.state.select(_remap(self.state.selected_folder_path, old, new))
        self.state.set_active_file(_remap(self.state.active_file_path, old, new))

    def notify(self, text: str) -> None:
        logger.info("notice: %s", text)
        self.notice = Notice(text, self._clock() + NOTICE_SECONDS)
        self._changed()

    def current_notice(self) -> str | None:
        if self.notice is None:
            return None
        if self._clock() >= self.notice.until:
            self.notice = None
            return None
        return self.notice.text

    @property
    def view(self) -> ViewState:
        return self.state.view

    # -- render passes ----------------------------------------------------

    async def render_tree(self) -> None:
        """Rebuild the folder rows from the current store root."""
        root = await self.store.list_root()
        self.rows = build_tree_rows(
            root,
            self.state,
            self.settings.folder_icon_style,
            self.settings.folder_icons,
        )
        self._changed()

    async def render_preview(self) -> None:
        """Rebuild the card list for the selected folder.

        A pass started after this one wins; stale passes stop without
        publishing their cards.
        """
        self._preview_generation += 1
        generation = self._preview_generation
        folder_path = self.state.selected_folder_path
        if folder_path is None:
            self.cards = []
            self.preview_message = NO_SELECTION_MESSAGE
            self._changed()
            return

        root = await self.store.list_root()
        if generation != self._preview_generation:
            return
        folder = find_node(root, folder_path)
        if not isinstance(folder, FolderNode):
            logger.info("selected folder %s is gone", folder_path)
            self.state.select(None)
            self.cards = []
            self.preview_message = NO_SELECTION_MESSAGE
            self.scheduler.schedule_tree_render()
            self._changed()
            return

        cards: list[PreviewCard] = []
        unreadable: list[str] = []
        for file in sort_files(folder.files(), self.view.sort_order):
            kind = classify(file)
            if kind is IMAGE_KIND:
                cards.append(PreviewCard.from_file(file, kind, resource_url=self.store.resource_url(file)))
                continue
            if kind.kind == "placeholder":
                cards.append(PreviewCard.from_file(file, kind))
                continue
            try:
                raw = await self.store.read(file)
            except OSError as exc:
                logger.warning("cannot read %s for preview: %s", file.path, exc)
                unreadable.append(file.name)
                raw = ""
            if generation != self._preview_generation:
                return
            snippet = extract_preview(raw, self.settings.remove_link_brackets)
            cards.append(PreviewCard.from_file(file, kind, snippet=snippet))

        self.cards = cards
        self.preview_message = "" if cards else EMPTY_FOLDER_MESSAGE
        if unreadable:
            self.notify(f"Could not read {unreadable[0]}")
        self._changed()

    # -- tree gestures ----------------------------------------------------

    def click_folder(self, path: str) -> bool:
        """Select ``path``; both panes re-render only when selection changed."""
        if not self.state.select(path):
            return False
        self.scheduler.schedule_tree_render()
        self.scheduler.schedule_preview_render()
        return True

    def toggle_folder(self, path: str) -> bool:
        if path == ROOT_PATH:
            return False
        self.state.toggle_collapse(path)
        self._persist()
        self.scheduler.schedule_tree_render()
        return True

    def move_selection(self, delta: int) -> bool:
        """Select the row ``delta`` steps from the current selection."""
        if not self.rows:
            return False
        paths = [row.path for row in self.rows]
        selected = self.state.selected_folder_path
        if selected in paths:
            index = paths.index(selected) + delta
        else:
            index = 0 if delta >= 0 else len(paths) - 1
        index = max(0, min(len(paths) - 1, index))
        return self.click_folder(paths[index])

    def row_for_path(self, path: str | None) -> TreeRow | None:
        for row in self.rows:
            if row.path == path:
                return row
        return None

    # -- drag and drop ----------------------------------------------------

    def begin_drag(self, path: str, is_folder: bool) -> None:
        self.drag = DragPayload(path, is_folder)
        self._changed()

    def end_drag(self) -> None:
        if self.drag is not None:
            self.drag = None
            self._changed()

    async def drop(self, destination_path: str) -> bool:
        """Move the dragged item into ``destination_path``."""
        payload = self.drag
        self.drag = None
        if payload is None:
            return False
        return await self.move(payload.path, destination_path)

    async def move(self, source_path: str, destination_path: str) -> bool:
        """Validate and perform one move; rendering follows the store event."""
        item = await self.store.get(source_path)
        destination = await self.store.get(destination_path)
        if item is None or not isinstance(destination, FolderNode):
            self.notify("Item no longer exists")
            return False

        verdict = can_move(item, destination)
        if not verdict.ok:
            if isinstance(item, FolderNode) or verdict.reason != NO_OP:
                self.notify(verdict.message)
            return False

        new_path = join_path(destination.path, item.name)
        kind = "folder" if isinstance(item, FolderNode) else "file"
        try:
            await self.store.rename(item, new_path)
        except ConflictError:
            self.notify(f"An item named {item.name} already exists there")
            return False
        except InvalidMoveError as exc:
            self.notify(str(exc))
            return False
        except OSError:
            logger.exception("failed to move %s to %s", item.path, new_path)
            self.notify(f"Failed to move {kind}")
            return False
        self._remap_paths(item.path, new_path)
        return True

    # -- context menu -----------------------------------------------------

    def context_menu_items(self, path: str, is_file: bool) -> list[MenuItem]:
        new_items = [MenuItem("New file", ACTION_NEW_FILE), MenuItem("New folder", ACTION_NEW_FOLDER)]
        if is_file:
            return [
                *new_items,
                MenuItem("Rename", ACTION_RENAME),
                MenuItem("Duplicate", ACTION_DUPLICATE),
                MenuItem("Delete", ACTION_DELETE),
            ]
        if path == ROOT_PATH:
            return new_items
        return [
            *new_items,
            MenuItem("Rename", ACTION_RENAME),
            MenuItem("Delete", ACTION_DELETE, confirm=True),
        ]

    async def _create_unique(
        self,
        folder_path: str,
        stem: str,
        extension: str,
        make: Callable[[str], Awaitable[StoreNode]],
        what: str,
    ) -> StoreNode | None:
        for _attempt in range(CREATE_ATTEMPTS):
            path = await next_available_path(self.store.exists, folder_path, stem, extension)
            try:
                return await make(path)
            except ConflictError:
                logger.info("%s appeared while creating; probing again", path)
                continue
            except OSError:
                logger.exception("failed to create %s %s", what, path)
                self.notify(f"Failed to create {what}")
                return None
        self.notify(f"Could not find a free name for the new {what}")
        return None

    async def create_file(self, folder_path: str) -> FileNode | None:
        """Create an empty ``Untitled`` note in ``folder_path`` and open it."""
        node = await self._create_unique(
            folder_path,
            NEW_FILE_STEM,
            NEW_FILE_EXTENSION,
            lambda path: self.store.create(path, ""),
            "file",
        )
        if isinstance(node, FileNode):
            self.open_file(node.path)
            return node
        return None

    async def create_folder(self, folder_path: str) -> FolderNode | None:
        node = await self._create_unique(folder_path, NEW_FOLDER_STEM, "", self.store.create_folder, "folder")
        return node if isinstance(node, FolderNode) else None

    async def duplicate_file(self, path: str) -> FileNode | None:
        """Copy a file next to itself as ``<name> copy``, then open the copy."""
        file = await self.store.get(path)
        if not isinstance(file, FileNode):
            self.notify("Item no longer exists")
            return None
        try:
            content = await self.store.read(file)
        except OSError:
            logger.exception("failed to read %s for duplication", path)
            self.notify(f"Failed to duplicate {file.name}")
            return None
        extension = file.name[len(file.basename) + 1:] if file.basename != file.name else ""
        node = await self._create_unique(
            parent_path(file.path),
            f"{file.basename} {DUPLICATE_SUFFIX}",
            extension,
            lambda target: self.store.create(target, content),
            "file",
        )
        if not isinstance(node, FileNode):
            return None
        self.open_file(node.path)
        self.scheduler.schedule_preview_render()
        return node

    async def rename(self, path: str, new_name: str) -> bool:
        """Rename the item at ``path`` within its folder."""
        new_name = new_name.strip()
        node = await self.store.get(path)
        if node is None:
            self.notify("Item no longer exists")
            return False
        if isinstance(node, FolderNode) and node.is_root:
            return False
        if not new_name or new_name == node.name:
            return False
        if "/" in new_name:
            self.notify('Names cannot contain "/"')
            return False
        new_path = join_path(parent_path(node.path), new_name)
        try:
            await self.store.rename(node, new_path)
        except ConflictError:
            self.notify(f"An item named {new_name} already exists there")
            return False
        except InvalidMoveError as exc:
            self.notify(str(exc))
            return False
        except OSError:
            logger.exception("failed to rename %s to %s", path, new_name)
            self.notify(f"Failed to rename {node.name}")
            return False
        self._remap_paths(node.path, new_path)
        return True

    async def delete(self, path: str) -> bool:
        """Move the item at ``path`` to the store trash."""
        node = await self.store.get(path)
        if node is None or (isinstance(node, FolderNode) and node.is_root):
            return False
        try:
            await self.store.trash(node)
        except OSError:
            logger.exception("failed to delete %s", path)
            self.notify(f"Failed to delete {node.name}")
            return False

        active = self.state.active_file_path
        if active is not None and is_same_or_descendant_path(active, node.path):
            self.state.set_active_file(None)
        if isinstance(node, FolderNode):
            selected = self.state.selected_folder_path
            if selected is not None and is_same_or_descendant_path(selected, node.path):
                self.state.select(None)
                self.scheduler.schedule_preview_render()
        else:
            self.scheduler.schedule_preview_render()
        self._changed()
        return True

    # -- active file ------------------------------------------------------

    def open_file(self, path: str) -> None:
        """Mark ``path`` active and select its folder."""
        self.state.set_active_file(path)
        if self.state.select(parent_path(path)):
            self.scheduler.schedule_tree_render()
            self.scheduler.schedule_preview_render()
        else:
            self._changed()

    def on_file_open(self, path: str | None) -> None:
        """Host notification that ``path`` became the open file."""
        if path is None:
            if self.state.set_active_file(None):
                self._changed()
            return
        self.open_file(path)

    # -- store events -----------------------------------------------------

    def on_store_change(self, event: ChangeEvent) -> None:
        self.scheduler.schedule_tree_render()
        self.scheduler.request_tree_render_after_quiet()
        if event.kind is ChangeKind.RENAMED:
            self.scheduler.schedule_preview_render()
            return
        selected = self.state.selected_folder_path
        if selected is None:
            return
        touched = event.touched()
        if not touched or any(p == selected or parent_path(p) == selected for p in touched):
            self.scheduler.schedule_preview_render()

    # -- settings ---------------------------------------------------------

    def set_sort_order(self, order: SortOrder) -> None:
        self.view.sort_order = order
        self._persist()
        self.scheduler.schedule_preview_render()

    def set_preview_line_count(self, count: int) -> None:
        self.view.preview_lines = clamp_preview_lines(count)
        self._persist()
        self.scheduler.schedule_preview_render()

    def set_remove_link_brackets(self, enabled: bool) -> None:
        self.settings.remove_link_brackets = bool(enabled)
        self._persist()
        self.scheduler.schedule_preview_render()

    def set_folder_icon_style(self, style: FolderIconStyle) -> None:
        self.settings.folder_icon_style = style
        self._persist()
        self.scheduler.schedule_tree_render()

    def set_compact_mode(self, enabled: bool) -> None:
        self.settings.compact_mode = bool(enabled)
        self._persist()
        self._changed()

    def set_use_accent_color(self, enabled: bool) -> None:
        self.settings.use_accent_color = bool(enabled)
        self._persist()
        self._changed()

    def set_tree_width(self, width: int) -> None:
        self.view.tree_width = max(TREE_WIDTH_MIN, int(width))
        self._persist()
        self._changed()

    def toggle_previews_collapsed(self) -> None:
        self.previews_collapsed = not self.previews_collapsed
        self._changed()


__all__ = [
    "NOTICE_SECONDS",
    "NO_SELECTION_MESSAGE",
    "EMPTY_FOLDER_MESSAGE",
    "ACTION_NEW_FILE",
    "ACTION_NEW_FOLDER",
    "ACTION_RENAME",
    "ACTION_DUPLICATE",
    "ACTION_DELETE",
    "Notice",
    "DragPayload",
    "MenuItem",
    "ViewController",
]
