"""Pipeline description parser.

Grammar::

    pipeline := stage ("=>" stage)*
    stage    := expr ("," expr)*

The first expression of a stage is the program, the rest are its
positional arguments. Two front ends share this grammar:

- ``split_stages`` takes a flat sequence of values where the ``PIPE``
  sentinel stands for ``=>``. Values are opaque and only stringified.
- ``parse_pipeline`` takes text such as ``"ls, -a => wc, -l"``. There is
  no quoting: expressions are split on ``,`` and stripped.

Both return the stages in source order and never touch the OS.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import NoReturn

from procpipe.errors import ParseError
from procpipe.stage import Stage, to_argument

logger = logging.getLogger(__name__)

SEPARATOR = "=>"
ARG_DELIMITER = ","


class _PipeToken:
    """Sentinel separating stages in a structural description."""

    _instance: _PipeToken | None = None

    def __new__(cls) -> _PipeToken:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "PIPE"


PIPE = _PipeToken()


def _raise_missing_stage(index: int, total: int) -> NoReturn:
    if index == total - 1 and index > 0:
        raise ParseError(
            f"separator {SEPARATOR!r} is not followed by a stage",
            stage_index=index,
        )
    raise ParseError("stage has no program", stage_index=index)


def split_stages(parts: Iterable[object]) -> list[Stage]:
    """Split a flat value sequence on ``PIPE`` into stages."""
    groups: list[list[object]] = [[]]
    seen_any = False
    for part in parts:
        seen_any = True
        if part is PIPE:
            groups.append([])
        else:
            groups[-1].append(part)

    if not seen_any:
        raise ParseError("empty pipeline description")

    stages: list[Stage] = []
    for index, group in enumerate(groups):
        if not group:
            _raise_missing_stage(index, len(groups))
        program, *args = group
        if not to_argument(program):
            raise ParseError("stage program is empty", stage_index=index)
        stages.append(Stage.of(program, *args))

    logger.debug("Parsed %d stage(s) from structural description", len(stages))
    return stages


def parse_pipeline(text: str) -> list[Stage]:
    """Parse a textual pipeline description into stages."""
    if not text.strip():
        raise ParseError("empty pipeline description")

    chunks = text.split(SEPARATOR)
    stages: list[Stage] = []
    for index, chunk in enumerate(chunks):
        if not chunk.strip():
            _raise_missing_stage(index, len(chunks))
        expressions = [expr.strip() for expr in chunk.split(ARG_DELIMITER)]
        for position, expr in enumerate(expressions):
            if not expr:
                what = "program" if position == 0 else f"argument {position}"
                raise ParseError(f"empty {what} expression", stage_index=index)
        stages.append(Stage(expressions[0], tuple(expressions[1:])))

    logger.debug("Parsed %d stage(s) from %r", len(stages), text)
    return stages
