"""
Unit tests for CLI module.
"""

import argparse
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from cli import build_parser, main, positive_float
from errors import NotConfigured, PackagingError
from models import CommandResult


class TestCLI(unittest.TestCase):
    """Test CLI argument parsing and entry point."""

    def test_build_parser_accepts_every_command(self):
        """Test parser has one subcommand per command name."""
        parser = build_parser()
        for command in (
            "init",
            "configure",
            "create",
            "update",
            "update-config",
            "update-code",
            "delete",
            "invoke",
            "invoke-local",
            "logs",
            "help",
        ):
            with self.subTest(command=command):
                args = parser.parse_args([command])
                self.assertEqual(args.command, command)

    def test_parser_global_options(self):
        """Test parser handles global options before the command."""
        args = build_parser().parse_args(
            [
                "--workspace",
                "/tmp/project",
                "--verbose",
                "--log-file",
                "run.log",
                "--poll-interval",
                "5",
                "logs",
            ]
        )

        self.assertEqual(args.workspace, "/tmp/project")
        self.assertTrue(args.verbose)
        self.assertEqual(args.log_file, "run.log")
        self.assertEqual(args.poll_interval, 5.0)
        self.assertEqual(args.command, "logs")

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertIsNone(args.command)
        self.assertFalse(args.verbose)
        self.assertEqual(args.poll_interval, 2.0)

    def test_parser_rejects_unknown_command(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(["deploy"])

    def test_parser_rejects_non_positive_poll_interval(self):
        """Test zero, negative and non-numeric intervals are refused."""
        for value in ("0", "-1", "nan", "soon"):
            with self.subTest(value=value):
                with patch("sys.stderr"):
                    with self.assertRaises(SystemExit):
                        build_parser().parse_args(["--poll-interval", value, "logs"])

    def test_positive_float(self):
        self.assertEqual(positive_float("0.5"), 0.5)
        with self.assertRaises(argparse.ArgumentTypeError):
            positive_float("0")

    @patch("cli.CommandDispatcher")
    @patch("cli.setup_logging")
    def test_main_runs_command(self, mock_setup_logging, mock_dispatcher_class):
        """Test main dispatches the command and returns 0 on success."""
        mock_dispatcher = MagicMock()
        mock_dispatcher.run.return_value = CommandResult(command="create")
        mock_dispatcher_class.return_value = mock_dispatcher

        with tempfile.TemporaryDirectory() as tmp:
            result = main(["--workspace", tmp, "create"])
            kwargs = mock_dispatcher_class.call_args.kwargs
            self.assertEqual(kwargs["workspace"], Path(tmp).resolve())

        self.assertEqual(result, 0)
        mock_dispatcher.run.assert_called_once_with("create")
        mock_setup_logging.assert_called_once_with(verbose=False, log_file=None)

    @patch("cli.CommandDispatcher")
    @patch("cli.setup_logging")
    def test_main_defaults_to_help(self, mock_setup_logging, mock_dispatcher_class):
        mock_dispatcher = MagicMock()
        mock_dispatcher.run.return_value = CommandResult(command="help")
        mock_dispatcher_class.return_value = mock_dispatcher

        self.assertEqual(main([]), 0)
        mock_dispatcher.run.assert_called_once_with("help")

    @patch("cli.CommandDispatcher")
    @patch("cli.setup_logging")
    def test_main_returns_failure_exit_code(
        self, mock_setup_logging, mock_dispatcher_class
    ):
        """Test main returns 1 when a remote step failed."""
        mock_dispatcher = MagicMock()
        mock_dispatcher.run.return_value = CommandResult(
            command="update", failed_steps=["update-config"]
        )
        mock_dispatcher_class.return_value = mock_dispatcher

        self.assertEqual(main(["update"]), 1)

    @patch("cli.CommandDispatcher")
    @patch("cli.setup_logging")
    def test_main_not_configured(self, mock_setup_logging, mock_dispatcher_class):
        """Test the unconfigured precondition ends with status 1."""
        mock_dispatcher = MagicMock()
        mock_dispatcher.run.side_effect = NotConfigured("lambda_config.json not found!")
        mock_dispatcher_class.return_value = mock_dispatcher

        with self.assertLogs("cli", level="ERROR") as logs:
            result = main(["create"])

        self.assertEqual(result, 1)
        self.assertIn("not found", logs.output[0])

    @patch("cli.CommandDispatcher")
    @patch("cli.setup_logging")
    def test_main_os_error(self, mock_setup_logging, mock_dispatcher_class):
        mock_dispatcher = MagicMock()
        mock_dispatcher.run.side_effect = PackagingError("Nothing to package")
        mock_dispatcher_class.return_value = mock_dispatcher

        self.assertEqual(main(["create"]), 1)

    @patch("cli.CommandDispatcher")
    @patch("cli.setup_logging")
    def test_main_logs_interrupted(self, mock_setup_logging, mock_dispatcher_class):
        """Test Ctrl-C ends the logs command cleanly."""
        mock_dispatcher = MagicMock()
        mock_dispatcher.run.side_effect = KeyboardInterrupt()
        mock_dispatcher_class.return_value = mock_dispatcher

        self.assertEqual(main(["--poll-interval", "1", "logs"]), 0)
        self.assertEqual(mock_dispatcher_class.call_args.kwargs["poll_interval"], 1.0)

    @patch("cli.setup_logging")
    def test_main_help_end_to_end(self, mock_setup_logging):
        """Test help runs without configuration."""
        with tempfile.TemporaryDirectory() as tmp:
            with patch("dispatcher.click.echo") as mock_echo:
                result = main(["--workspace", tmp, "help"])

        self.assertEqual(result, 0)
        self.assertTrue(mock_echo.called)

    @patch("cli.setup_logging")
    def test_main_unconfigured_end_to_end(self, mock_setup_logging):
        """Test a remote command in an empty workspace exits with 1."""
        with tempfile.TemporaryDirectory() as tmp:
            with patch("dispatcher.LambdaClient") as mock_client:
                result = main(["--workspace", tmp, "delete"])

        self.assertEqual(result, 1)
        mock_client.assert_not_called()


if __name__ == "__main__":
    unittest.main()
