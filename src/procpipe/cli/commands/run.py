"""Run a textual pipeline from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from procpipe.config.settings import settings
from procpipe.errors import ParseError, PipelineError, SpawnError
from procpipe.runtime.pipeline import Pipeline
from procpipe.runtime.results import ExitStatus

logger = logging.getLogger(__name__)

# Shell convention for "command not found / not executable".
SPAWN_FAILURE_EXIT_CODE = 127


def cmd_run(args: argparse.Namespace) -> int:
    """Execute a pipeline and exit with its terminal stage's status."""
    try:
        pipeline = Pipeline.parse(args.pipeline)
    except ParseError as e:
        print(f"Error: Invalid pipeline: {e}", file=sys.stderr)
        return 1

    reap = args.reap if args.reap is not None else settings.reap_background
    logger.info("Running %s (mode=%s, reap=%s)", pipeline.display(), args.mode, reap)

    try:
        if args.mode == "output":
            result = pipeline.output()
            _write_raw(sys.stdout, result.stdout)
            _write_raw(sys.stderr, result.stderr)
            status = result.status
        else:
            status = pipeline.status()
    except SpawnError as e:
        print(f"Error: {e}", file=sys.stderr)
        return SPAWN_FAILURE_EXIT_CODE
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if reap:
        _report_background(pipeline, pipeline.reap())

    return status.effective_exit_code


def _report_background(pipeline: Pipeline, statuses: list[ExitStatus]) -> None:
    for index, status in enumerate(statuses):
        stage = pipeline.stages[index]
        print(f"stage {index} ({stage.display()}): {status}", file=sys.stderr)


def _write_raw(stream: TextIO, data: bytes) -> None:
    stream.flush()
    stream.buffer.write(data)
    stream.buffer.flush()
