"""Console entry point for the lambda-scaffold CLI."""

from __future__ import annotations

import argparse
import logging
from typing import List

import click

from config import RunConfig
from dispatcher import COMMANDS, CommandDispatcher
from errors import LambdaScaffoldError
from log_utils import setup_logging

logger = logging.getLogger(__name__)


def positive_float(value: str) -> float:
    """argparse type accepting only numbers greater than zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="lambda-scaffold",
        description="Scaffold an AWS Lambda project and manage its deployment.",
    )
    parser.add_argument(
        "--workspace",
        metavar="DIR",
        help="Project directory (default: current directory)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", metavar="FILE", help="Also write logs to FILE")
    parser.add_argument(
        "--poll-interval",
        type=positive_float,
        default=2.0,
        metavar="SECONDS",
        help="Seconds between log polls for the logs command (default: 2)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name, description in COMMANDS.items():
        subparsers.add_parser(name, help=description, description=description)
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    config = RunConfig.from_args(args)
    setup_logging(verbose=config.verbose, log_file=config.log_file)

    command = args.command or "help"
    dispatcher = CommandDispatcher(
        workspace=config.workspace, poll_interval=config.poll_interval
    )

    try:
        result = dispatcher.run(command)
    except click.Abort:
        logger.error("Aborted")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0 if command == "logs" else 130
    except (LambdaScaffoldError, OSError) as e:
        logger.error(str(e))
        return 1

    return 0 if result.ok else 1
