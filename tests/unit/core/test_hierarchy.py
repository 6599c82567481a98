"""Tests for drag-and-drop move validation."""

from __future__ import annotations

import unittest

from treepeek.errors import InvalidMoveError
from treepeek.hierarchy import INTO_DESCENDANT, NO_OP, SELF_MOVE, can_move, ensure_can_move
from treepeek.store.types import FileNode, FolderNode


def _tree() -> dict[str, FolderNode | FileNode]:
    root = FolderNode(path="/", name="vault")
    a = FolderNode(path="A", name="A", parent=root)
    b = FolderNode(path="A/B", name="B", parent=a)
    c = FolderNode(path="A/B/C", name="C", parent=b)
    d = FolderNode(path="D", name="D", parent=root)
    note = FileNode(path="A/note.md", name="note.md", parent=a)
    root.children = [a, d]
    a.children = [b, note]
    b.children = [c]
    return {"/": root, "A": a, "A/B": b, "A/B/C": c, "D": d, "note": note}


class CanMoveTests(unittest.TestCase):
    def test_folder_onto_itself_is_self_move(self) -> None:
        nodes = _tree()
        verdict = can_move(nodes["A"], nodes["A"])
        self.assertFalse(verdict.ok)
        self.assertEqual(verdict.reason, SELF_MOVE)
        self.assertEqual(verdict.message, "Cannot move a folder into itself")

    def test_folder_into_any_descendant_is_rejected(self) -> None:
        nodes = _tree()
        for path in ("A/B", "A/B/C"):
            with self.subTest(path=path):
                self.assertEqual(can_move(nodes["A"], nodes[path]).reason, INTO_DESCENDANT)

    def test_move_to_current_parent_is_no_op(self) -> None:
        nodes = _tree()
        self.assertEqual(can_move(nodes["A/B"], nodes["A"]).reason, NO_OP)
        self.assertEqual(can_move(nodes["note"], nodes["A"]).reason, NO_OP)
        self.assertEqual(can_move(nodes["A"], nodes["/"]).reason, NO_OP)

    def test_legal_moves(self) -> None:
        nodes = _tree()
        self.assertTrue(can_move(nodes["A"], nodes["D"]).ok)
        self.assertTrue(can_move(nodes["A/B/C"], nodes["/"]).ok)
        self.assertTrue(can_move(nodes["note"], nodes["A/B/C"]).ok)

    def test_files_only_get_no_op_check(self) -> None:
        nodes = _tree()
        clash = FileNode(path="A", name="A", parent=nodes["/"])
        self.assertTrue(can_move(clash, nodes["A"]).ok)

    def test_parent_of_is_queried_instead_of_node_links(self) -> None:
        nodes = _tree()
        # Pretend D now lives under A even though node links say otherwise.
        parents = {"D": nodes["A"], "A": nodes["/"], "A/B": nodes["A"], "A/B/C": nodes["A/B"]}
        verdict = can_move(nodes["A"], nodes["D"], parent_of=lambda node: parents.get(node.path))
        self.assertEqual(verdict.reason, INTO_DESCENDANT)

    def test_ensure_can_move_raises_with_reason(self) -> None:
        nodes = _tree()
        with self.assertRaises(InvalidMoveError) as ctx:
            ensure_can_move(nodes["A"], nodes["A/B"])
        self.assertEqual(ctx.exception.reason, INTO_DESCENDANT)
        ensure_can_move(nodes["A"], nodes["D"])
