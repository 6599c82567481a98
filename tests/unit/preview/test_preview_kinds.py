"""Tests for the file-extension preview table."""

from __future__ import annotations

import unittest

from treepeek.preview.kinds import IMAGE_KIND, TEXT_KIND, classify
from treepeek.store.types import FileNode


def _file(name: str) -> FileNode:
    return FileNode(path=name, name=name)


class ClassifyTests(unittest.TestCase):
    def test_images_are_detected_case_insensitively(self) -> None:
        self.assertIs(classify(_file("photo.PNG")), IMAGE_KIND)
        self.assertIs(classify(_file("icon.svg")), IMAGE_KIND)

    def test_placeholder_types_have_labels(self) -> None:
        self.assertEqual(classify(_file("board.canvas")).label, "Canvas")
        self.assertEqual(classify(_file("paper.pdf")).label, "PDF document")
        self.assertEqual(classify(_file("song.flac")).label, "Audio file")
        self.assertEqual(classify(_file("clip.mkv")).label, "Video file")
        self.assertEqual(classify(_file("paper.pdf")).kind, "placeholder")

    def test_excalidraw_markdown_counts_as_drawing(self) -> None:
        self.assertEqual(classify(_file("sketch.excalidraw.md")).label, "Excalidraw")
        self.assertEqual(classify(_file("sketch.excalidraw")).label, "Excalidraw")

    def test_everything_else_is_text(self) -> None:
        self.assertIs(classify(_file("note.md")), TEXT_KIND)
        self.assertIs(classify(_file("README")), TEXT_KIND)
        self.assertIs(classify(_file(".png")), TEXT_KIND)
