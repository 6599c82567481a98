"""CLI argument handling, ``--render`` output and logging setup tests."""

from __future__ import annotations

import io
import logging
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treepeek import cli
from treepeek.logging_setup import configure_logging, parse_log_level


def _reset_app_logger() -> None:
    logger = logging.getLogger("treepeek")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.addCleanup(_reset_app_logger)
        self.base = Path(tmp.name)
        self.root = self.base / "vault"
        (self.root / "A").mkdir(parents=True)
        (self.root / "A" / "note.md").write_text("# Title\nhello there\n", encoding="utf-8")
        self.log_file = self.base / "logs" / "treepeek.log"
        patcher = mock.patch("treepeek.config.CONFIG_PATH", self.base / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, argv: list[str], **kwargs) -> str:
        out = io.StringIO()
        with mock.patch.object(sys, "stdout", out):
            cli.main([*argv, "--log-file", str(self.log_file)], **kwargs)
        return out.getvalue()


class RenderModeTests(CliTestCase):
    def test_render_prints_one_frame_with_selected_folder(self) -> None:
        output = self.run_main(
            [str(self.root), "--render", "--no-color", "--select", "/A/", "--max-cols", "80", "--rows", "10"]
        )
        lines = output.splitlines()
        self.assertEqual(len(lines), 10)
        self.assertTrue(lines[0].startswith("Folders"))
        self.assertIn("A · Name (a to z) · 1 file", lines[0])
        self.assertIn("Title hello there", output)
        self.assertNotIn("\x1b", output)

    def test_render_defaults_to_given_default_path(self) -> None:
        output = self.run_main(["--render", "--no-color", "--max-cols", "80", "--rows", "8"], default_path=self.root)
        self.assertIn("vault", output)
        self.assertIn("No folder selected", output)

    def test_render_does_not_write_config(self) -> None:
        self.run_main([str(self.root), "--render", "--select", "A", "--max-cols", "80", "--rows", "8"])
        self.assertFalse((self.base / "config.json").exists())

    def test_render_writes_session_log(self) -> None:
        self.run_main([str(self.root), "--render", "--no-color", "--rows", "8", "--log-level", "debug"])
        self.assertIn("session started", self.log_file.read_text(encoding="utf-8"))
        self.assertEqual(logging.getLogger("treepeek").level, logging.DEBUG)


class ArgumentTests(CliTestCase):
    def test_missing_folder_is_rejected(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self.run_main([str(self.root / "nope"), "--render"])
        self.assertIn("Not a folder", str(ctx.exception))

    def test_non_positive_rows_are_rejected(self) -> None:
        with mock.patch.object(sys, "stderr", io.StringIO()), self.assertRaises(SystemExit):
            self.run_main([str(self.root), "--render", "--rows", "0"])

    def test_interactive_mode_requires_a_terminal(self) -> None:
        with mock.patch.object(sys, "stdin", io.StringIO()), self.assertRaises(SystemExit) as ctx:
            self.run_main([str(self.root)])
        self.assertIn("interactive terminal", str(ctx.exception))

    def test_interactive_mode_runs_the_app(self) -> None:
        tty = mock.Mock()
        tty.isatty.return_value = True
        tty.fileno.return_value = 0
        with (
            mock.patch.object(sys, "stdin", tty),
            mock.patch.object(sys, "stdout", tty),
            mock.patch("treepeek.tui.terminal.TerminalController") as terminal_cls,
            mock.patch("treepeek.tui.app.TreePeekApp") as app_cls,
        ):
            app_cls.return_value.run = mock.AsyncMock()
            cli.main([str(self.root), "--theme", "ocean", "--log-file", str(self.log_file)])

        terminal_cls.assert_called_once_with(0, 0)
        app_cls.return_value.run.assert_awaited_once()
        store, _config, theme, terminal = app_cls.call_args.args
        self.assertEqual(store.root, self.root.resolve())
        self.assertEqual(theme.name, "ocean")
        self.assertIs(terminal, terminal_cls.return_value)

    def test_normalize_store_path(self) -> None:
        self.assertEqual(cli.normalize_store_path("/A/B/"), "A/B")
        self.assertEqual(cli.normalize_store_path("/"), "/")
        self.assertEqual(cli.normalize_store_path(""), "/")
        self.assertIsNone(cli.normalize_store_path(None))


class LoggingSetupTests(CliTestCase):
    def test_parse_log_level(self) -> None:
        self.assertEqual(parse_log_level("debug"), logging.DEBUG)
        self.assertEqual(parse_log_level("warning"), logging.WARNING)
        self.assertEqual(parse_log_level("bogus"), logging.INFO)
        self.assertEqual(parse_log_level(None), logging.INFO)

    def test_reconfiguring_replaces_file_handler(self) -> None:
        configure_logging(None, self.log_file)
        second = self.base / "other.log"
        self.assertEqual(configure_logging(None, second), second)
        handlers = logging.getLogger("treepeek").handlers
        self.assertEqual(len(handlers), 1)
        self.assertEqual(Path(handlers[0].baseFilename), second)

    def test_unusable_log_path_returns_none(self) -> None:
        blocker = self.base / "blocker"
        blocker.write_text("x", encoding="utf-8")
        self.assertIsNone(configure_logging(None, blocker / "sub" / "treepeek.log"))
