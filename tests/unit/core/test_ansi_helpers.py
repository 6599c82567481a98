"""Tests for ANSI-aware clipping and padding."""

from __future__ import annotations

import unittest

from treepeek.ansi import clip_ansi_line, display_width, fit_ansi_line, truncate_plain


class AnsiHelperTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[31mabc\033[0m"), 3)
        self.assertEqual(display_width("日本"), 4)

    def test_clip_keeps_escape_sequences(self) -> None:
        self.assertEqual(clip_ansi_line("\033[31mabcdef\033[0m", 3), "\033[31mabc")

    def test_clip_does_not_split_wide_chars(self) -> None:
        self.assertEqual(clip_ansi_line("a日本", 2), "a")

    def test_fit_pads_to_exact_width(self) -> None:
        self.assertEqual(fit_ansi_line("ab", 4), "ab  ")
        fitted = fit_ansi_line("\033[1mabcdef", 3)
        self.assertEqual(display_width(fitted), 3)
        self.assertTrue(fitted.endswith("\033[0m"))

    def test_truncate_plain_marks_cut(self) -> None:
        self.assertEqual(truncate_plain("abcdef", 4), "abc…")
        self.assertEqual(truncate_plain("abc", 4), "abc")
