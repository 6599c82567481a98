"""Tests for the in-memory collapse/selection store."""

from __future__ import annotations

import unittest

from treepeek.state import CollapseSelectionStore, clamp_preview_lines


class CollapseSelectionStoreTests(unittest.TestCase):
    def test_toggle_twice_restores_membership(self) -> None:
        store = CollapseSelectionStore()
        self.assertTrue(store.toggle_collapse("A"))
        self.assertTrue(store.is_collapsed("A"))
        self.assertFalse(store.toggle_collapse("A"))
        self.assertFalse(store.is_collapsed("A"))

    def test_collapsed_paths_keep_insertion_order(self) -> None:
        store = CollapseSelectionStore(["B", "A"])
        store.toggle_collapse("C")
        self.assertEqual(store.collapsed_paths(), ["B", "A", "C"])

    def test_nonexistent_paths_are_accepted(self) -> None:
        store = CollapseSelectionStore()
        store.toggle_collapse("does/not/exist")
        self.assertTrue(store.select("nowhere"))
        self.assertEqual(store.selected_folder_path, "nowhere")

    def test_select_reports_change_only_once(self) -> None:
        store = CollapseSelectionStore()
        self.assertTrue(store.select("A"))
        self.assertFalse(store.select("A"))
        self.assertTrue(store.select(None))

    def test_active_file_reports_change(self) -> None:
        store = CollapseSelectionStore()
        self.assertTrue(store.set_active_file("A/x.md"))
        self.assertFalse(store.set_active_file("A/x.md"))
        self.assertEqual(store.active_file_path, "A/x.md")

    def test_preview_lines_are_clamped(self) -> None:
        self.assertEqual(clamp_preview_lines(0), 1)
        self.assertEqual(clamp_preview_lines(4), 4)
        self.assertEqual(clamp_preview_lines(99), 10)
