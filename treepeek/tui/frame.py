"""Screen composition for the dual-pane view.

``build_frame`` turns controller state plus session-only screen state into
terminal lines: a header row, the tree and preview panes side by side, and a
status row. The returned ``Frame`` also records which screen rows map to
which tree row, card and menu entry, for mouse hit testing.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..ansi import clip_ansi_line, display_width, fit_ansi_line
from ..state import TREE_WIDTH_MIN
from ..store.types import ROOT_PATH
from ..ui_theme import UITheme
from ..view.cards import ROLE_META, ROLE_SNIPPET, ROLE_TITLE, CardLine, layout_cards
from ..view.controller import MenuItem, ViewController
from ..view.tree_rows import COLLAPSED_MARKER, EXPANDED_MARKER, TreeRow, row_indent

FOCUS_TREE = "tree"
FOCUS_PREVIEW = "preview"
MAX_TREE_FRACTION = 0.8
HEADER_ROWS = 1
STATUS_ROWS = 1
DIVIDER = "│"

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Tree",
        (
            ("Up/Down", "select folder"),
            ("Left/Right", "collapse / expand"),
            ("Space", "toggle folder"),
            ("Tab", "switch to previews"),
            ("< / >", "narrow / widen tree"),
        ),
    ),
    (
        "Previews",
        (
            ("Up/Down", "focus card"),
            ("Enter", "open in $EDITOR"),
            ("s", "cycle sort order"),
            ("+ / -", "more / fewer preview lines"),
            ("z", "filenames only"),
        ),
    ),
    (
        "Files and folders",
        (
            ("n / N", "new file / new folder"),
            ("r", "rename"),
            ("d", "delete"),
            ("y", "duplicate file"),
            ("m then p", "pick up, then drop into selected folder"),
            ("x", "context menu (or right click)"),
        ),
    ),
    (
        "Display",
        (
            ("b", "toggle link brackets"),
            ("c", "compact mode"),
            ("i", "folder icon style"),
            ("a", "accent color"),
            ("?", "help   q quit"),
        ),
    ),
)


@dataclass
class MenuState:
    """Open context menu anchored at a 0-based screen cell."""

    items: list[MenuItem]
    target_path: str
    target_is_file: bool
    row: int
    col: int
    index: int = 0


@dataclass
class PromptState:
    """Single-line text input shown in the status row."""

    label: str
    buffer: str
    on_submit: Callable[[str], Awaitable[object]]


@dataclass
class ConfirmState:
    question: str
    on_confirm: Callable[[], Awaitable[object]]


@dataclass
class ScreenState:
    """Session-only terminal state: focus, scroll offsets and overlays."""

    focus: str = FOCUS_TREE
    card_index: int = 0
    tree_start: int = 0
    preview_start: int = 0
    show_help: bool = False
    menu: MenuState | None = None
    prompt: PromptState | None = None
    confirm: ConfirmState | None = None
    drop_target: str | None = None


@dataclass
class Frame:
    lines: list[str]
    tree_width: int
    preview_col: int
    tree_hits: dict[int, TreeRow] = field(default_factory=dict)
    card_hits: dict[int, int] = field(default_factory=dict)
    menu_hits: dict[int, int] = field(default_factory=dict)
    menu_cols: tuple[int, int] = (0, 0)

    def text(self) -> str:
        return "\n".join(self.lines)


def effective_tree_width(requested: int, columns: int) -> int:
    """Clamp the persisted width to ``[TREE_WIDTH_MIN, 80% of columns]``."""
    upper = max(1, int(columns * MAX_TREE_FRACTION))
    return max(1, min(max(TREE_WIDTH_MIN, requested), upper))


def _follow(start: int, index: int, visible: int, total: int) -> int:
    if index < start:
        start = index
    elif index >= start + visible:
        start = index - visible + 1
    return max(0, min(start, max(0, total - visible)))


def _style(color: str, text: str, theme: UITheme) -> str:
    if not color or not text:
        return text
    return f"{color}{text}{theme.reset}"


def _reverse(text: str, theme: UITheme) -> str:
    if not theme.reverse:
        return text
    return theme.reverse + text.replace(theme.reset, theme.reset + theme.reverse) + theme.reset


def folder_label(controller: ViewController, path: str) -> str:
    if path == ROOT_PATH:
        return controller.rows[0].name if controller.rows else ROOT_PATH
    return path.rsplit("/", 1)[-1]


def render_tree_line(row: TreeRow, controller: ViewController, screen: ScreenState, theme: UITheme) -> str:
    compact = controller.settings.compact_mode
    marker = "  "
    if row.collapsible:
        marker = COLLAPSED_MARKER if row.collapsed else EXPANDED_MARKER
    icon = f"{row.icon} " if row.icon else ""
    name_color = theme.tree_root if row.is_root else theme.tree_dir
    if controller.drag is not None and screen.drop_target == row.path:
        name_color = theme.tree_drop_target
    return (
        " " * row_indent(row.depth, compact)
        + _style(theme.tree_marker, marker, theme)
        + icon
        + _style(name_color, row.name, theme)
    )


def _card_gutter(line: CardLine, controller: ViewController, screen: ScreenState, theme: UITheme) -> tuple[str, bool]:
    if line.card_index is None or line.card_index >= len(controller.cards):
        return "  ", False
    card = controller.cards[line.card_index]
    active = card.path == controller.state.active_file_path
    focused = screen.focus == FOCUS_PREVIEW and screen.card_index == line.card_index
    if focused and line.role == ROLE_TITLE:
        return _style(theme.card_focus_marker, "› ", theme), active
    if active:
        accent = theme.card_active_accent if controller.settings.use_accent_color else theme.card_active_neutral
        return _style(accent, "▌ ", theme), active
    return "  ", active


def render_card_line(line: CardLine, controller: ViewController, screen: ScreenState, theme: UITheme) -> str:
    gutter, active = _card_gutter(line, controller, screen, theme)
    if line.role == ROLE_TITLE:
        color = theme.card_title
        if active:
            color = theme.card_active_accent if controller.settings.use_accent_color else theme.card_active_neutral
    elif line.role == ROLE_SNIPPET:
        color = theme.card_snippet
    elif line.role == ROLE_META:
        color = theme.card_meta
    else:
        color = ""
    return gutter + _style(color, line.text, theme)


def help_lines(theme: UITheme) -> list[str]:
    out: list[str] = []
    for title, entries in HELP_SECTIONS:
        if out:
            out.append("")
        out.append(_style(theme.header, title, theme))
        for keys, description in entries:
            out.append(f"  {_style(theme.card_focus_marker, keys.ljust(10), theme)} {description}")
    return out


def status_line(controller: ViewController, screen: ScreenState, theme: UITheme) -> str:
    if screen.prompt is not None:
        return f"{screen.prompt.label}: {screen.prompt.buffer}▏"
    if screen.confirm is not None:
        return _style(theme.notice, f"{screen.confirm.question} (y/n)", theme)
    notice = controller.current_notice()
    if notice:
        return _style(theme.notice, notice, theme)
    if controller.drag is not None:
        name = controller.drag.path.rsplit("/", 1)[-1]
        return _style(theme.notice, f"Moving {name}: select a folder and press p (Esc cancels)", theme)
    return _style(theme.header_dim, "? help  x menu  Tab switch pane  q quit", theme)


def _menu_segments(menu: MenuState, theme: UITheme) -> list[str]:
    inner = max(display_width(item.label) for item in menu.items) + 2
    segments = [_style(theme.menu_border, "╭" + "─" * inner + "╮", theme)]
    for index, item in enumerate(menu.items):
        label = f" {item.label}".ljust(inner)
        if index == menu.index:
            label = _style(theme.menu_selected, label, theme) if theme.menu_selected else f">{label[1:]}"
        segments.append(_style(theme.menu_border, "│", theme) + label + _style(theme.menu_border, "│", theme))
    segments.append(_style(theme.menu_border, "╰" + "─" * inner + "╯", theme))
    return segments


def build_frame(
    controller: ViewController,
    screen: ScreenState,
    theme: UITheme,
    columns: int,
    rows: int,
) -> Frame:
    """Compose one full screen of ``rows`` lines, each ``columns`` wide."""
    columns = max(TREE_WIDTH_MIN + 4, columns)
    rows = max(HEADER_ROWS + STATUS_ROWS + 1, rows)
    tree_width = effective_tree_width(controller.view.tree_width, columns)
    preview_col = tree_width + 2
    preview_width = max(1, columns - preview_col)
    content_rows = rows - HEADER_ROWS - STATUS_ROWS
    frame = Frame(lines=[], tree_width=tree_width, preview_col=preview_col)

    # Tree pane.
    tree_rows = controller.rows
    selected_index = next(
        (i for i, row in enumerate(tree_rows) if row.path == controller.state.selected_folder_path),
        0,
    )
    screen.tree_start = _follow(screen.tree_start, selected_index, content_rows, len(tree_rows))
    tree_lines: list[str] = []
    for offset in range(content_rows):
        index = screen.tree_start + offset
        if index >= len(tree_rows):
            tree_lines.append(" " * tree_width)
            continue
        row = tree_rows[index]
        frame.tree_hits[HEADER_ROWS + offset] = row
        text = fit_ansi_line(render_tree_line(row, controller, screen, theme), tree_width, theme.reset)
        tree_lines.append(_reverse(text, theme) if row.selected else text)

    # Preview pane.
    preview_lines: list[str] = []
    if screen.show_help:
        preview_lines = help_lines(theme)[:content_rows]
    elif controller.cards:
        card_lines = layout_cards(
            controller.cards,
            max(1, preview_width - 2),
            controller.view.preview_lines,
            collapsed=controller.previews_collapsed,
            compact=controller.settings.compact_mode,
        )
        screen.card_index = max(0, min(screen.card_index, len(controller.cards) - 1))
        focus_rows = [i for i, line in enumerate(card_lines) if line.card_index == screen.card_index]
        if focus_rows:
            screen.preview_start = _follow(screen.preview_start, focus_rows[-1], content_rows, len(card_lines))
            screen.preview_start = min(screen.preview_start, focus_rows[0])
        for offset, line in enumerate(card_lines[screen.preview_start : screen.preview_start + content_rows]):
            if line.card_index is not None:
                frame.card_hits[HEADER_ROWS + offset] = line.card_index
            preview_lines.append(render_card_line(line, controller, screen, theme))
    elif controller.preview_message:
        preview_lines = ["", "  " + _style(theme.header_dim, controller.preview_message, theme)]

    # Header.
    selected = controller.state.selected_folder_path
    if selected is None:
        preview_header = _style(theme.header_dim, "No folder selected", theme)
    else:
        count = len(controller.cards)
        preview_header = (
            _style(theme.header, folder_label(controller, selected), theme)
            + _style(
                theme.header_dim,
                f" · {controller.view.sort_order.label} · {count} file{'' if count == 1 else 's'}",
                theme,
            )
        )
    tree_header = _style(theme.header, "Folders", theme)
    divider = _style(theme.divider, DIVIDER, theme)
    frame.lines.append(
        fit_ansi_line(tree_header, tree_width, theme.reset)
        + divider
        + " "
        + fit_ansi_line(preview_header, preview_width, theme.reset)
    )

    for offset in range(content_rows):
        right = preview_lines[offset] if offset < len(preview_lines) else ""
        frame.lines.append(tree_lines[offset] + divider + " " + fit_ansi_line(right, preview_width, theme.reset))

    frame.lines.append(fit_ansi_line(status_line(controller, screen, theme), columns, theme.reset))

    if screen.menu is not None and screen.menu.items:
        _overlay_menu(frame, screen.menu, theme, columns, rows)
    return frame


def _overlay_menu(frame: Frame, menu: MenuState, theme: UITheme, columns: int, rows: int) -> None:
    segments = _menu_segments(menu, theme)
    box_width = display_width(segments[0])
    top = max(HEADER_ROWS, min(menu.row, rows - STATUS_ROWS - len(segments)))
    left = max(0, min(menu.col, columns - box_width))
    frame.menu_cols = (left, left + box_width)
    for offset, segment in enumerate(segments):
        screen_row = top + offset
        if screen_row >= len(frame.lines):
            break
        base = clip_ansi_line(frame.lines[screen_row], left)
        if theme.reset and "\x1b" in base:
            base += theme.reset
        base += " " * (left - display_width(base))
        frame.lines[screen_row] = fit_ansi_line(base + segment, columns, theme.reset)
        if 0 < offset < len(segments) - 1:
            frame.menu_hits[screen_row] = offset - 1


def render_static_frame(controller: ViewController, theme: UITheme, columns: int, rows: int) -> str:
    """Plain composition used by ``--render``; ends with a reset when styled."""
    frame = build_frame(controller, ScreenState(), theme, columns, rows)
    out = frame.text()
    if theme.reset and "\x1b" in out:
        out += theme.reset
    return out + "\n"


__all__ = [
    "FOCUS_TREE",
    "FOCUS_PREVIEW",
    "MenuState",
    "PromptState",
    "ConfirmState",
    "ScreenState",
    "Frame",
    "effective_tree_width",
    "folder_label",
    "help_lines",
    "status_line",
    "build_frame",
    "render_static_frame",
]
