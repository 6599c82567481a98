"""Command-line front door for treepeek.

Parses CLI options, configures logging, and either prints one composed frame
(``--render``) or launches the interactive dual-pane browser.
"""

from __future__ import annotations

import argparse
import asyncio
import locale
import shutil
import sys
from pathlib import Path

from .config import load_view_config
from .logging_setup import configure_logging
from .store.local import LocalFolderStore
from .store.types import ROOT_PATH
from .tui.frame import render_static_frame
from .ui_theme import UITheme, available_theme_names, resolve_theme
from .view.controller import ViewController


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def normalize_store_path(value: str | None) -> str | None:
    """Turn user input like ``"/A/B/"`` into the store path ``"A/B"``."""
    if value is None:
        return None
    stripped = value.strip().strip("/")
    return stripped or ROOT_PATH


def render_folder_view(root: Path, select: str | None, theme: UITheme, max_cols: int, rows: int) -> str:
    """Render one frame of the browser for ``root`` with ``select`` previewed."""
    store = LocalFolderStore(root)
    controller = ViewController(store, load_view_config(), persist=False)

    async def settle() -> None:
        await controller.open(delayed_rerender=False)
        if select is not None:
            controller.click_folder(select)
            await controller.scheduler.drain()
        controller.close()

    asyncio.run(settle())
    return render_static_frame(controller, theme, max_cols, rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treepeek",
        description="Browse a folder tree with live previews of each folder's files.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Folder to browse. Defaults to current directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--render", action="store_true", help="Print one frame and exit.")
    parser.add_argument("--select", metavar="FOLDER", help="Folder (relative to PATH) selected in --render output.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render output (default: terminal width).",
    )
    parser.add_argument(
        "--rows",
        type=_positive_int,
        default=None,
        help="Row count for --render output (default: terminal height).",
    )
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ...).")
    parser.add_argument("--log-file", type=Path, default=None, help="Log file path.")
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch treepeek on a folder.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        pass

    root = Path(args.path) if args.path is not None else (default_path or Path.cwd())
    if not root.is_dir():
        raise SystemExit(f"Not a folder: {root}")
    theme = resolve_theme(args.theme, no_color=args.no_color)
    configure_logging(args.log_level, args.log_file)

    if args.render:
        term = shutil.get_terminal_size((80, 24))
        max_cols = args.max_cols if args.max_cols is not None else term.columns
        rows = args.rows if args.rows is not None else term.lines
        sys.stdout.write(render_folder_view(root, normalize_store_path(args.select), theme, max_cols, rows))
        return

    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise SystemExit("treepeek needs an interactive terminal; use --render for scripted output.")

    from .tui.app import TreePeekApp
    from .tui.terminal import TerminalController

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    app = TreePeekApp(LocalFolderStore(root), load_view_config(), theme, terminal)
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
