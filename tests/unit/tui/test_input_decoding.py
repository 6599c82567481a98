"""Tests for raw key and SGR mouse decoding."""

from __future__ import annotations

import os
import unittest

from treepeek.tui import input as input_mod
from treepeek.tui.input import MouseEvent, parse_mouse_event


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read(self, data: bytes, count: int = 1) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_control_keys(self) -> None:
        self.assertEqual(self._read(b"\r\t\x7f\x15\x03", 5), ["ENTER", "TAB", "BACKSPACE", "CTRL_U", "CTRL_C"])

    def test_arrows_and_shift_tab(self) -> None:
        self.assertEqual(self._read(b"\x1b[A\x1b[D\x1b[Z", 3), ["UP", "LEFT", "SHIFT_TAB"])

    def test_lone_escape(self) -> None:
        self.assertEqual(self._read(b"\x1b"), ["ESC"])

    def test_escape_keeps_following_key(self) -> None:
        self.assertEqual(self._read(b"\x1bq", 2), ["ESC", "q"])

    def test_multibyte_character(self) -> None:
        self.assertEqual(self._read("é".encode("utf-8")), ["é"])

    def test_nothing_pending_times_out(self) -> None:
        self.assertEqual(self._read(b""), [""])

    def test_sgr_mouse_buttons(self) -> None:
        keys = self._read(b"\x1b[<0;5;3M\x1b[<0;5;3m\x1b[<2;9;4M", 3)
        self.assertEqual(keys, ["MOUSE_LEFT_DOWN:5:3", "MOUSE_LEFT_UP:5:3", "MOUSE_RIGHT_DOWN:9:4"])

    def test_sgr_mouse_drag_and_wheel(self) -> None:
        keys = self._read(b"\x1b[<32;7;4M\x1b[<64;1;2M\x1b[<65;1;2M", 3)
        self.assertEqual(keys, ["MOUSE_LEFT_DRAG:7:4", "MOUSE_WHEEL_UP:1:2", "MOUSE_WHEEL_DOWN:1:2"])


class ParseMouseEventTests(unittest.TestCase):
    def test_parses_action_and_cell(self) -> None:
        self.assertEqual(parse_mouse_event("MOUSE_LEFT_DOWN:12:3"), MouseEvent("LEFT_DOWN", 12, 3))

    def test_rejects_other_tokens(self) -> None:
        self.assertIsNone(parse_mouse_event("UP"))
        self.assertIsNone(parse_mouse_event("MOUSE"))
        self.assertIsNone(parse_mouse_event("MOUSE_LEFT_DOWN:x:3"))
