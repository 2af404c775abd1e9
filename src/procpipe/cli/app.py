"""CLI orchestration and command routing."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence

from procpipe.cli.commands import cmd_describe, cmd_run
from procpipe.cli.parser import build_parser, parse_args

logger = logging.getLogger(__name__)


def dispatch(args: argparse.Namespace) -> int:
    """Route parsed args to the correct command handler."""
    command_handlers: dict[str, Callable[[argparse.Namespace], int]] = {
        "run": cmd_run,
        "describe": cmd_describe,
    }

    handler = command_handlers.get(args.command) if args.command else None
    if handler is None:
        build_parser().print_help()
        return 2

    return handler(args)


def run(
    argv: Sequence[str] | None = None,
    *,
    configure_logging: Callable[[str | None, str | None], None] | None = None,
) -> int:
    """Parse args, apply shared CLI setup, and execute command."""
    args = parse_args(argv)

    if configure_logging is not None:
        configure_logging(args.log_level, args.log_file)

    logger.debug("Dispatching command: %s", args.command)
    return dispatch(args)
