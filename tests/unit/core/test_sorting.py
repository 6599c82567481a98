"""Tests for preview-card ordering."""

from __future__ import annotations

import unittest

from treepeek.sorting import SortOrder, sort_files
from treepeek.store.types import FileNode


def _file(name: str, mtime: float = 0.0, ctime: float = 0.0) -> FileNode:
    return FileNode(path=name, name=name, mtime=mtime, ctime=ctime)


class SortFilesTests(unittest.TestCase):
    def test_name_orders_are_exact_reverses(self) -> None:
        files = [_file("beta.md"), _file("Alpha.md"), _file("alpha.md"), _file("gamma.txt")]
        asc = [f.name for f in sort_files(files, SortOrder.NAME_ASC)]
        desc = [f.name for f in sort_files(files, SortOrder.NAME_DESC)]
        self.assertEqual(asc, list(reversed(desc)))
        self.assertEqual(asc[-2:], ["beta.md", "gamma.txt"])

    def test_name_order_ignores_case_first(self) -> None:
        files = [_file("b.md"), _file("A.md"), _file("c.md")]
        self.assertEqual([f.name for f in sort_files(files, SortOrder.NAME_ASC)], ["A.md", "b.md", "c.md"])

    def test_time_orders(self) -> None:
        files = [_file("a", mtime=2, ctime=30), _file("b", mtime=3, ctime=10), _file("c", mtime=1, ctime=20)]
        self.assertEqual([f.name for f in sort_files(files, SortOrder.MODIFIED_NEW)], ["b", "a", "c"])
        self.assertEqual([f.name for f in sort_files(files, SortOrder.MODIFIED_OLD)], ["c", "a", "b"])
        self.assertEqual([f.name for f in sort_files(files, SortOrder.CREATED_NEW)], ["a", "c", "b"])
        self.assertEqual([f.name for f in sort_files(files, SortOrder.CREATED_OLD)], ["b", "c", "a"])

    def test_equal_timestamps_keep_input_order(self) -> None:
        files = [_file("z", mtime=5), _file("y", mtime=5), _file("x", mtime=5)]
        self.assertEqual([f.name for f in sort_files(files, SortOrder.MODIFIED_NEW)], ["z", "y", "x"])
        self.assertEqual([f.name for f in sort_files(files, SortOrder.MODIFIED_OLD)], ["z", "y", "x"])

    def test_sort_returns_new_list(self) -> None:
        files = [_file("b"), _file("a")]
        result = sort_files(files, SortOrder.NAME_ASC)
        self.assertIsNot(result, files)
        self.assertEqual([f.name for f in files], ["b", "a"])

    def test_parse_falls_back_and_next_wraps(self) -> None:
        self.assertIs(SortOrder.parse("modified-new"), SortOrder.MODIFIED_NEW)
        self.assertIs(SortOrder.parse("bogus"), SortOrder.NAME_ASC)
        self.assertIs(SortOrder.parse(None), SortOrder.NAME_ASC)
        self.assertIs(SortOrder.CREATED_OLD.next(), SortOrder.NAME_ASC)
        self.assertEqual(SortOrder.NAME_ASC.label, "Name (a to z)")
