"""Describe the stages of a pipeline without running it."""

from __future__ import annotations

import argparse
import json
import sys

from rich.console import Console
from rich.table import Table

from procpipe.errors import ParseError
from procpipe.parser import parse_pipeline
from procpipe.stage import Stage


def cmd_describe(args: argparse.Namespace) -> int:
    """Print the parsed stages as a table or JSON."""
    try:
        stages = parse_pipeline(args.pipeline)
    except ParseError as e:
        print(f"Error: Invalid pipeline: {e}", file=sys.stderr)
        return 1

    if args.json:
        payload = [
            {"program": stage.program, "args": list(stage.args)} for stage in stages
        ]
        print(json.dumps(payload, indent=2))
        return 0

    Console().print(render_stages(stages))
    return 0


def render_stages(stages: list[Stage]) -> Table:
    """Build a rich table with one row per stage."""
    table = Table(title=" | ".join(stage.display() for stage in stages))
    table.add_column("#", justify="right")
    table.add_column("Program", style="bold")
    table.add_column("Arguments")
    for index, stage in enumerate(stages):
        table.add_row(str(index), stage.program, " ".join(stage.args) or "-")
    return table
