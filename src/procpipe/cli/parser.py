"""Argument parser construction for the procpipe CLI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

LOG_LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="procpipe",
        description="procpipe - run shell-style process pipelines",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVEL_CHOICES,
        help="Override the configured log level",
    )
    log_target = parser.add_mutually_exclusive_group()
    log_target.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to PATH instead of stderr",
    )
    log_target.add_argument(
        "--debug-log",
        dest="log_file",
        action="store_const",
        const="",
        help="Write logs to debug.log in the XDG state directory",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run a pipeline such as 'ls, -a => wc, -l'",
    )
    run_parser.add_argument(
        "pipeline",
        help="Pipeline description: stages separated by '=>', arguments by ','",
    )
    run_parser.add_argument(
        "--mode",
        choices=["status", "output"],
        default="status",
        help="status inherits stdout; output captures and then prints it "
        "(default: status)",
    )
    run_parser.add_argument(
        "--reap",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Wait for the non-terminal stages and report their statuses "
        "(default: reap_background setting)",
    )

    # Describe command
    describe_parser = subparsers.add_parser(
        "describe",
        help="Show the stages of a pipeline without running it",
    )
    describe_parser.add_argument(
        "pipeline",
        help="Pipeline description: stages separated by '=>', arguments by ','",
    )
    describe_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit stages as JSON instead of a table",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = build_parser()
    return parser.parse_args(list(argv) if argv is not None else None)
