"""Tests for the directory-backed folder store."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from treepeek.errors import ConflictError, InvalidMoveError, StoreIOError
from treepeek.store.local import TRASH_DIR_NAME, LocalFolderStore, read_text
from treepeek.store.types import ChangeKind, FileNode, FolderNode, find_node


class LocalFolderStoreTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "A" / "B").mkdir(parents=True)
        (self.root / "C").mkdir()
        (self.root / "A" / "note.md").write_text("hello", encoding="utf-8")
        (self.root / ".hidden").mkdir()
        self.store = LocalFolderStore(self.root)
        self.events = []
        self.unsubscribe = self.store.subscribe(self.events.append)

    async def asyncTearDown(self) -> None:
        self.store.stop_watching()
        self._tmp.cleanup()

    async def test_list_root_builds_parent_linked_tree(self) -> None:
        root = await self.store.list_root()
        self.assertEqual(root.path, "/")
        self.assertIsNone(root.parent)
        self.assertEqual(sorted(child.name for child in root.children), ["A", "C"])
        b = find_node(root, "A/B")
        self.assertIsInstance(b, FolderNode)
        self.assertEqual(b.parent.path, "A")
        note = find_node(root, "A/note.md")
        self.assertIsInstance(note, FileNode)
        self.assertEqual(note.basename, "note")
        self.assertEqual(note.extension, "md")
        self.assertEqual(note.size, 5)

    async def test_dragging_folder_with_subfolder_into_sibling(self) -> None:
        a = await self.store.get("A")
        await self.store.rename(a, "C/A")
        root = await self.store.list_root()
        self.assertIsNone(find_node(root, "A"))
        self.assertIsInstance(find_node(root, "C/A/B"), FolderNode)
        self.assertEqual(self.events[-1].kind, ChangeKind.RENAMED)
        self.assertEqual(self.events[-1].old_path, "A")

    async def test_rename_onto_existing_entry_conflicts(self) -> None:
        (self.root / "C" / "note.md").write_text("other", encoding="utf-8")
        note = await self.store.get("A/note.md")
        with self.assertRaises(ConflictError) as ctx:
            await self.store.rename(note, "C/note.md")
        self.assertEqual(ctx.exception.path, "C/note.md")
        self.assertEqual((self.root / "A" / "note.md").read_text(encoding="utf-8"), "hello")

    async def test_rename_into_own_subtree_is_invalid(self) -> None:
        a = await self.store.get("A")
        with self.assertRaises(InvalidMoveError):
            await self.store.rename(a, "A/B/A")

    async def test_rename_into_missing_folder_is_io_error(self) -> None:
        note = await self.store.get("A/note.md")
        with self.assertRaises(StoreIOError):
            await self.store.rename(note, "missing/note.md")
        self.assertEqual(self.events, [])

    async def test_create_and_create_folder(self) -> None:
        created = await self.store.create("C/new.md", "body")
        self.assertEqual(created.path, "C/new.md")
        self.assertEqual(await self.store.read(created), "body")
        folder = await self.store.create_folder("C/Sub")
        self.assertEqual(folder.path, "C/Sub")
        with self.assertRaises(ConflictError):
            await self.store.create("C/new.md", "again")
        with self.assertRaises(ConflictError):
            await self.store.create_folder("C/Sub")
        self.assertEqual([event.kind for event in self.events], [ChangeKind.CREATED, ChangeKind.CREATED])

    async def test_trash_moves_into_hidden_trash_folder(self) -> None:
        note = await self.store.get("A/note.md")
        await self.store.trash(note)
        self.assertFalse(await self.store.exists("A/note.md"))
        self.assertTrue((self.root / TRASH_DIR_NAME / "note.md").is_file())
        (self.root / "C" / "note.md").write_text("second", encoding="utf-8")
        await self.store.trash(await self.store.get("C/note.md"))
        self.assertTrue((self.root / TRASH_DIR_NAME / "note.md 1").is_file())
        root = await self.store.list_root()
        self.assertIsNone(find_node(root, TRASH_DIR_NAME))
        self.assertEqual(self.events[-1].kind, ChangeKind.DELETED)

    async def test_read_missing_file_is_io_error(self) -> None:
        ghost = FileNode(path="A/ghost.md", name="ghost.md")
        with self.assertRaises(StoreIOError):
            await self.store.read(ghost)

    async def test_paths_cannot_escape_root(self) -> None:
        with self.assertRaises(StoreIOError):
            self.store.absolute("../outside")

    async def test_resource_url_is_file_uri(self) -> None:
        note = await self.store.get("A/note.md")
        self.assertTrue(self.store.resource_url(note).startswith("file://"))

    async def test_unsubscribe_stops_events(self) -> None:
        self.unsubscribe()
        await self.store.create_folder("D")
        self.assertEqual(self.events, [])

    async def test_own_mutations_are_not_reported_twice_by_watcher(self) -> None:
        watcher = self.store.start_watching(interval=60)
        watcher.stop()
        await watcher.poll_once()
        await self.store.create_folder("D")
        self.assertIsNone(await watcher.poll_once())
        self.assertEqual(len(self.events), 1)


class ReadTextTests(unittest.TestCase):
    def test_latin1_fallback(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            path.write_bytes("café".encode("latin-1"))
            self.assertEqual(read_text(path), "café")
