"""Tests for composing the dual-pane screen."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from treepeek.ansi import display_width
from treepeek.config import ViewConfig
from treepeek.store.local import LocalFolderStore
from treepeek.tui.frame import (
    FOCUS_PREVIEW,
    MenuState,
    ScreenState,
    build_frame,
    effective_tree_width,
    render_static_frame,
)
from treepeek.ui_theme import DEFAULT_THEME, PLAIN_THEME
from treepeek.view.controller import ViewController

COLUMNS = 70
ROWS = 14


class FrameTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        root = Path(tmp.name) / "vault"
        (root / "A" / "B").mkdir(parents=True)
        (root / "C").mkdir()
        (root / "A" / "note.md").write_text("# Note\nhello world\n", encoding="utf-8")
        (root / "A" / "other.md").write_text("second file", encoding="utf-8")
        self.controller = ViewController(LocalFolderStore(root), ViewConfig(), persist=False)
        self.addCleanup(self.controller.close)
        await self.controller.open(delayed_rerender=False)

    async def select(self, path: str) -> None:
        self.controller.click_folder(path)
        await self.controller.scheduler.drain()

    def build(self, screen: ScreenState | None = None, theme=PLAIN_THEME):
        return build_frame(self.controller, screen or ScreenState(), theme, COLUMNS, ROWS)

    async def test_every_line_fills_the_screen_width(self) -> None:
        await self.select("A")
        for theme in (PLAIN_THEME, DEFAULT_THEME):
            frame = self.build(theme=theme)
            self.assertEqual(len(frame.lines), ROWS)
            self.assertEqual({display_width(line) for line in frame.lines}, {COLUMNS})

    async def test_header_without_selection(self) -> None:
        frame = self.build()
        self.assertTrue(frame.lines[0].startswith("Folders"))
        self.assertIn("No folder selected", frame.lines[0])
        self.assertIn("Select a folder to preview its files", frame.text())

    async def test_header_and_cards_for_selected_folder(self) -> None:
        await self.select("A")
        frame = self.build()
        self.assertIn("A · Name (a to z) · 2 files", frame.lines[0])
        self.assertIn("hello world", frame.text())
        self.assertEqual(frame.card_hits[1], 0)
        self.assertIn(1, frame.card_hits.values())

    async def test_tree_hits_follow_rows(self) -> None:
        frame = self.build()
        self.assertEqual([frame.tree_hits[i].path for i in sorted(frame.tree_hits)], ["/", "A", "A/B", "C"])
        self.assertEqual(min(frame.tree_hits), 1)
        self.assertIn("▾", frame.lines[2])
        self.assertIn("vault", frame.lines[1])

    async def test_empty_folder_message(self) -> None:
        await self.select("C")
        self.assertIn("This folder contains no files", self.build().text())

    async def test_focused_card_gutter(self) -> None:
        await self.select("A")
        frame = self.build(ScreenState(focus=FOCUS_PREVIEW, card_index=1))
        focused = [line for line in frame.lines if "› other" in line]
        self.assertEqual(len(focused), 1)

    async def test_active_card_gutter(self) -> None:
        await self.select("A")
        self.controller.open_file("A/note.md")
        self.assertIn("▌ note", self.build().text())

    async def test_help_replaces_previews(self) -> None:
        await self.select("A")
        text = self.build(ScreenState(show_help=True)).text()
        self.assertIn("Previews", text)
        self.assertNotIn("hello world", text)

    async def test_status_line_shows_notice_then_hints(self) -> None:
        self.assertIn("? help", self.build().lines[-1])
        self.controller.notify("Cannot move a folder into itself")
        self.assertTrue(self.build().lines[-1].startswith("Cannot move a folder into itself"))

    async def test_status_line_shows_drag_hint(self) -> None:
        self.controller.begin_drag("A/B", True)
        self.assertTrue(self.build().lines[-1].startswith("Moving B"))

    async def test_menu_overlay_records_hits(self) -> None:
        items = self.controller.context_menu_items("A", False)
        screen = ScreenState(menu=MenuState(items, "A", False, row=3, col=4))
        frame = self.build(screen)
        self.assertEqual(sorted(frame.menu_hits.values()), [0, 1, 2, 3])
        self.assertEqual(frame.menu_cols[0], 4)
        first_row = min(frame.menu_hits)
        self.assertIn(">New file", frame.lines[first_row])
        self.assertEqual({display_width(line) for line in frame.lines}, {COLUMNS})

    async def test_collapsed_previews_show_titles_only(self) -> None:
        await self.select("A")
        self.controller.toggle_previews_collapsed()
        text = self.build().text()
        self.assertIn("note", text)
        self.assertNotIn("hello world", text)

    async def test_static_render_has_no_escapes_in_plain_theme(self) -> None:
        await self.select("A")
        out = render_static_frame(self.controller, PLAIN_THEME, COLUMNS, ROWS)
        self.assertTrue(out.endswith("\n"))
        self.assertNotIn("\x1b", out)
        self.assertEqual(len(out.splitlines()), ROWS)

    def test_tree_width_clamp(self) -> None:
        self.assertEqual(effective_tree_width(32, 30), 24)
        self.assertEqual(effective_tree_width(5, 100), 12)
        self.assertEqual(effective_tree_width(40, 100), 40)
