"""Interactive asyncio session for the dual-pane view.

Stdin is registered with ``loop.add_reader``; decoded key tokens go through
an ``asyncio.Queue`` so that key handling, store events and render passes all
interleave on the one event loop. The screen is repainted whenever the
controller reports a change.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
import shutil
import signal
import time

from ..config import ViewConfig
from ..state import PREVIEW_LINES_MAX, PREVIEW_LINES_MIN
from ..store.local import LocalFolderStore
from ..store.types import ROOT_PATH, parent_path
from ..store.watch import DEFAULT_POLL_SECONDS
from ..ui_theme import UITheme
from ..view.controller import (
    ACTION_DELETE,
    ACTION_DUPLICATE,
    ACTION_NEW_FILE,
    ACTION_NEW_FOLDER,
    ACTION_RENAME,
    MenuItem,
    ViewController,
)
from ..view.tree_rows import TreeRow, marker_column
from .editor import launch_editor
from .frame import (
    FOCUS_PREVIEW,
    FOCUS_TREE,
    HEADER_ROWS,
    ConfirmState,
    Frame,
    MenuState,
    PromptState,
    ScreenState,
    build_frame,
)
from .input import has_pending_input, parse_mouse_event, read_key
from .keys import KeyComboRegistry
from .terminal import TerminalController

logger = logging.getLogger(__name__)

DOUBLE_CLICK_SECONDS = 0.35
IDLE_TICK_SECONDS = 0.25
TREE_WIDTH_STEP = 2
REPAINT = ""


class TreePeekApp:
    """Wire terminal input, the view controller and screen painting."""

    def __init__(
        self,
        store: LocalFolderStore,
        config: ViewConfig,
        theme: UITheme,
        terminal: TerminalController | None = None,
        *,
        watch_interval: float = DEFAULT_POLL_SECONDS,
    ) -> None:
        self.store = store
        self.theme = theme
        self.terminal = terminal
        self.watch_interval = watch_interval
        self.controller = ViewController(store, config, on_change=self.request_repaint)
        self.screen = ScreenState()
        self.frame: Frame | None = None
        self.running = False
        self._queue: asyncio.Queue[str] | None = None
        self._dirty = True
        self._press: tuple[str, bool] | None = None
        self._last_card_click: tuple[int, float] | None = None
        self.keys = self._build_key_registry()

    # -- plumbing ---------------------------------------------------------

    def request_repaint(self) -> None:
        self._dirty = True
        if self._queue is not None:
            self._queue.put_nowait(REPAINT)

    def _on_input_ready(self) -> None:
        fd = self.terminal.stdin_fd
        key = read_key(fd, timeout_ms=0)
        while key:
            if self._queue is not None:
                self._queue.put_nowait(key)
            key = read_key(fd, timeout_ms=0) if has_pending_input() else ""

    def compose(self, columns: int, rows: int) -> Frame:
        self.frame = build_frame(self.controller, self.screen, self.theme, columns, rows)
        return self.frame

    def _paint(self) -> None:
        size = shutil.get_terminal_size((80, 24))
        frame = self.compose(size.columns, size.lines)
        out = ["\033[H"]
        for index, line in enumerate(frame.lines):
            out.append(f"\033[{index + 1};1H{line}\033[0m")
        self.terminal.write("".join(out))
        self._dirty = False

    async def run(self) -> None:
        """Run until the user quits; restores the terminal on exit."""
        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        fd = self.terminal.stdin_fd
        with self.terminal.raw_mode():
            loop.add_reader(fd, self._on_input_ready)
            with contextlib.suppress(NotImplementedError, AttributeError):
                loop.add_signal_handler(signal.SIGWINCH, self.request_repaint)
            try:
                await self.controller.open()
                self.store.start_watching(self.watch_interval)
                self.running = True
                while self.running:
                    if self._dirty or self.controller.notice is not None:
                        self._paint()
                    try:
                        key = await asyncio.wait_for(self._queue.get(), timeout=IDLE_TICK_SECONDS)
                    except asyncio.TimeoutError:
                        continue
                    if key != REPAINT:
                        await self.handle_key(key)
            finally:
                loop.remove_reader(fd)
                with contextlib.suppress(NotImplementedError, AttributeError):
                    loop.remove_signal_handler(signal.SIGWINCH)
                self.store.stop_watching()
                self.controller.close()

    # -- targets ----------------------------------------------------------

    def current_target(self) -> tuple[str, bool]:
        """Return ``(path, is_file)`` for the focused card or selected folder."""
        cards = self.controller.cards
        if self.screen.focus == FOCUS_PREVIEW and cards:
            index = max(0, min(self.screen.card_index, len(cards) - 1))
            return cards[index].path, True
        return self.controller.state.selected_folder_path or ROOT_PATH, False

    def current_folder(self) -> str:
        path, is_file = self.current_target()
        return parent_path(path) if is_file else path

    def _anchor_for(self, path: str, is_file: bool) -> tuple[int, int]:
        frame = self.frame
        if frame is None:
            return HEADER_ROWS, 0
        if is_file:
            for screen_row, index in sorted(frame.card_hits.items()):
                if self.controller.cards[index].path == path:
                    return screen_row + 1, frame.preview_col + 2
            return HEADER_ROWS, frame.preview_col
        for screen_row, row in frame.tree_hits.items():
            if row.path == path:
                return screen_row + 1, 2
        return HEADER_ROWS, 0

    # -- key handling -----------------------------------------------------

    def _build_key_registry(self) -> KeyComboRegistry:
        keys = KeyComboRegistry()
        c = self.controller

        keys.bind("q", "CTRL_C")(self.quit)
        keys.bind("UP", "k")(lambda: self.move(-1))
        keys.bind("DOWN", "j")(lambda: self.move(1))
        keys.bind("LEFT", "h")(self.collapse_or_parent)
        keys.bind("RIGHT", "l")(self.expand)
        keys.bind("ENTER")(self.activate)
        keys.bind(" ")(self.toggle_selected)
        keys.bind("TAB", "SHIFT_TAB")(self.switch_focus)
        keys.bind("s")(lambda: c.set_sort_order(c.view.sort_order.next()))
        keys.bind("+", "=")(lambda: c.set_preview_line_count(min(PREVIEW_LINES_MAX, c.view.preview_lines + 1)))
        keys.bind("-")(lambda: c.set_preview_line_count(max(PREVIEW_LINES_MIN, c.view.preview_lines - 1)))
        keys.bind("<")(lambda: c.set_tree_width(c.view.tree_width - TREE_WIDTH_STEP))
        keys.bind(">")(lambda: c.set_tree_width(c.view.tree_width + TREE_WIDTH_STEP))
        keys.bind("b")(lambda: c.set_remove_link_brackets(not c.settings.remove_link_brackets))
        keys.bind("c")(lambda: c.set_compact_mode(not c.settings.compact_mode))
        keys.bind("i")(lambda: c.set_folder_icon_style(c.settings.folder_icon_style.next()))
        keys.bind("a")(lambda: c.set_use_accent_color(not c.settings.use_accent_color))
        keys.bind("z")(c.toggle_previews_collapsed)
        keys.bind("n")(lambda: c.create_file(self.current_folder()))
        keys.bind("N")(lambda: c.create_folder(self.current_folder()))
        keys.bind("r")(lambda: self.prompt_rename(self.current_target()[0]))
        keys.bind("d")(lambda: self.request_delete(*self.current_target()))
        keys.bind("y")(self.duplicate_focused)
        keys.bind("m")(self.pick_up)
        keys.bind("p")(self.drop_picked)
        keys.bind("x")(lambda: self.open_menu(*self.current_target()))
        keys.bind("?")(self.toggle_help)
        keys.bind("ESC")(c.end_drag)
        return keys

    async def handle_key(self, key: str) -> None:
        """Route one key token through overlays, then the key registry."""
        if key.startswith("MOUSE"):
            await self.handle_mouse(key)
        elif self.screen.prompt is not None:
            await self._handle_prompt_key(key)
        elif self.screen.confirm is not None:
            await self._handle_confirm_key(key)
        elif self.screen.menu is not None:
            await self._handle_menu_key(key)
        elif self.screen.show_help and key != "q":
            self.screen.show_help = False
        else:
            result = self.keys.dispatch(key)
            if inspect.isawaitable(result):
                await result
        self.request_repaint()

    def quit(self) -> None:
        self.running = False

    def toggle_help(self) -> None:
        self.screen.show_help = not self.screen.show_help

    def switch_focus(self) -> None:
        if self.screen.focus == FOCUS_TREE and self.controller.cards:
            self.screen.focus = FOCUS_PREVIEW
        else:
            self.screen.focus = FOCUS_TREE

    def move(self, delta: int) -> None:
        if self.screen.focus == FOCUS_PREVIEW:
            count = len(self.controller.cards)
            if count:
                self.screen.card_index = max(0, min(count - 1, self.screen.card_index + delta))
            return
        if self.controller.move_selection(delta):
            self.screen.card_index = 0
            self.screen.preview_start = 0

    def collapse_or_parent(self) -> None:
        if self.screen.focus == FOCUS_PREVIEW:
            self.screen.focus = FOCUS_TREE
            return
        row = self.controller.row_for_path(self.controller.state.selected_folder_path)
        if row is None or row.is_root:
            return
        if row.collapsible and not row.collapsed:
            self.controller.toggle_folder(row.path)
        else:
            self.controller.click_folder(parent_path(row.path))

    def expand(self) -> None:
        if self.screen.focus == FOCUS_PREVIEW:
            return
        row = self.controller.row_for_path(self.controller.state.selected_folder_path)
        if row is not None and row.collapsible and row.collapsed:
            self.controller.toggle_folder(row.path)

    def toggle_selected(self) -> None:
        row = self.controller.row_for_path(self.controller.state.selected_folder_path)
        if row is not None and row.collapsible:
            self.controller.toggle_folder(row.path)

    def activate(self) -> None:
        if self.screen.focus == FOCUS_PREVIEW:
            self.open_card(self.screen.card_index)
        elif self.controller.cards:
            self.screen.focus = FOCUS_PREVIEW

    def open_card(self, index: int) -> None:
        """Open a card's file in ``$EDITOR`` and mark it active."""
        cards = self.controller.cards
        if not 0 <= index < len(cards):
            return
        card = cards[index]
        logger.info("opening %s in editor", card.path)
        error = launch_editor(
            self.store.absolute(card.path),
            self.terminal.disable_tui_mode,
            self.terminal.enable_tui_mode,
        )
        if error:
            self.controller.notify(error)
            return
        self.controller.on_file_open(card.path)

    async def duplicate_focused(self) -> None:
        path, is_file = self.current_target()
        if is_file:
            await self.controller.duplicate_file(path)

    def pick_up(self) -> None:
        path, is_file = self.current_target()
        if path == ROOT_PATH:
            self.controller.notify("Cannot move the root folder")
            return
        self.controller.begin_drag(path, not is_file)

    async def drop_picked(self) -> None:
        if self.controller.drag is None:
            self.controller.notify("Nothing to move: press m to pick up an item")
            return
        await self.controller.drop(self.controller.state.selected_folder_path or ROOT_PATH)

    # -- prompts, confirmations and menus --------------------------------

    def prompt_rename(self, path: str) -> None:
        if path == ROOT_PATH:
            return

        async def submit(text: str) -> None:
            await self.controller.rename(path, text)

        self.screen.prompt = PromptState("Rename", path.rsplit("/", 1)[-1], submit)

    async def request_delete(self, path: str, is_file: bool, confirm: bool | None = None) -> None:
        """Delete ``path``; folders ask first unless ``confirm`` says otherwise."""
        if path == ROOT_PATH:
            return
        if confirm is None:
            confirm = not is_file
        if not confirm:
            await self.controller.delete(path)
            return

        async def run() -> None:
            await self.controller.delete(path)

        name = path.rsplit("/", 1)[-1]
        self.screen.confirm = ConfirmState(f'Delete folder "{name}" and everything in it?', run)

    def open_menu(self, path: str, is_file: bool, row: int | None = None, col: int | None = None) -> None:
        if row is None or col is None:
            row, col = self._anchor_for(path, is_file)
        items = self.controller.context_menu_items(path, is_file)
        self.screen.menu = MenuState(items, path, is_file, row, col)

    async def run_menu_item(self, menu: MenuState, item: MenuItem) -> None:
        self.screen.menu = None
        path = menu.target_path
        folder = parent_path(path) if menu.target_is_file else path
        if item.action == ACTION_NEW_FILE:
            await self.controller.create_file(folder)
        elif item.action == ACTION_NEW_FOLDER:
            await self.controller.create_folder(folder)
        elif item.action == ACTION_RENAME:
            self.prompt_rename(path)
        elif item.action == ACTION_DUPLICATE:
            await self.controller.duplicate_file(path)
        elif item.action == ACTION_DELETE:
            await self.request_delete(path, menu.target_is_file, confirm=item.confirm)

    async def _handle_prompt_key(self, key: str) -> None:
        prompt = self.screen.prompt
        if key == "ESC":
            self.screen.prompt = None
        elif key == "ENTER":
            self.screen.prompt = None
            await prompt.on_submit(prompt.buffer)
        elif key == "BACKSPACE":
            prompt.buffer = prompt.buffer[:-1]
        elif key == "CTRL_U":
            prompt.buffer = ""
        elif len(key) == 1 and key.isprintable():
            prompt.buffer += key

    async def _handle_confirm_key(self, key: str) -> None:
        confirm = self.screen.confirm
        self.screen.confirm = None
        if key in {"y", "Y"}:
            await confirm.on_confirm()

    async def _handle_menu_key(self, key: str) -> None:
        menu = self.screen.menu
        if key in {"UP", "k"}:
            menu.index = (menu.index - 1) % len(menu.items)
        elif key in {"DOWN", "j"}:
            menu.index = (menu.index + 1) % len(menu.items)
        elif key == "ENTER":
            await self.run_menu_item(menu, menu.items[menu.index])
        elif key in {"ESC", "q", "x"}:
            self.screen.menu = None

    # -- mouse ------------------------------------------------------------

    async def handle_mouse(self, key: str) -> None:
        event = parse_mouse_event(key)
        frame = self.frame
        if event is None or frame is None:
            return
        row, col = event.row - 1, event.col - 1
        tree_row = frame.tree_hits.get(row) if col < frame.tree_width else None
        card_index = frame.card_hits.get(row) if col >= frame.preview_col else None

        if event.action == "LEFT_DOWN":
            await self._mouse_press(row, col, tree_row, card_index)
        elif event.action == "LEFT_DRAG":
            if self._press is not None and self.controller.drag is None:
                self.controller.begin_drag(*self._press)
            if self.controller.drag is not None:
                self.screen.drop_target = tree_row.path if tree_row is not None else None
        elif event.action == "LEFT_UP":
            self._press = None
            self.screen.drop_target = None
            drag = self.controller.drag
            if drag is None:
                return
            if tree_row is not None and tree_row.path != drag.path:
                await self.controller.drop(tree_row.path)
            else:
                self.controller.end_drag()
        elif event.action == "RIGHT_DOWN":
            if tree_row is not None:
                self.open_menu(tree_row.path, False, row, col)
            elif card_index is not None:
                self.screen.focus = FOCUS_PREVIEW
                self.screen.card_index = card_index
                self.open_menu(self.controller.cards[card_index].path, True, row, col)
        elif event.action in {"WHEEL_UP", "WHEEL_DOWN"}:
            delta = -1 if event.action == "WHEEL_UP" else 1
            if col < frame.tree_width:
                self.controller.move_selection(delta)
            elif self.controller.cards:
                self.screen.focus = FOCUS_PREVIEW
                self.move(delta)

    async def _mouse_press(
        self, row: int, col: int, tree_row: TreeRow | None, card_index: int | None
    ) -> None:
        frame = self.frame
        menu = self.screen.menu
        if menu is not None:
            left, right = frame.menu_cols
            index = frame.menu_hits.get(row)
            self.screen.menu = None
            if index is not None and left <= col < right:
                await self.run_menu_item(menu, menu.items[index])
            return
        if self.screen.prompt is not None or self.screen.confirm is not None:
            return

        self._press = None
        if tree_row is not None:
            self.screen.focus = FOCUS_TREE
            caret = marker_column(tree_row, self.controller.settings.compact_mode)
            if tree_row.collapsible and caret <= col < caret + 2:
                self.controller.toggle_folder(tree_row.path)
            elif self.controller.click_folder(tree_row.path):
                self.screen.card_index = 0
                self.screen.preview_start = 0
            if not tree_row.is_root:
                self._press = (tree_row.path, True)
        elif card_index is not None:
            self.screen.focus = FOCUS_PREVIEW
            self.screen.card_index = card_index
            self._press = (self.controller.cards[card_index].path, False)
            now = time.monotonic()
            last = self._last_card_click
            self._last_card_click = (card_index, now)
            if last is not None and last[0] == card_index and now - last[1] <= DOUBLE_CLICK_SECONDS:
                self._last_card_click = None
                self._press = None
                self.open_card(card_index)


__all__ = ["DOUBLE_CLICK_SECONDS", "TreePeekApp"]
