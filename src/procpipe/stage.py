"""Stage descriptor: one program and its positional arguments."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass

from procpipe.errors import ConfigurationError


def to_argument(value: object) -> str:
    """Convert an opaque value into a process argument string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return os.fsdecode(value)
    if isinstance(value, os.PathLike):
        return os.fsdecode(os.fspath(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class Stage:
    """One process in a pipeline."""

    program: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        program = to_argument(self.program)
        if not program:
            raise ConfigurationError("stage program must be a non-empty string")
        # A bare string would otherwise be split into single characters.
        if isinstance(self.args, (str, bytes)):
            kind = type(self.args).__name__
            raise ConfigurationError(
                f"stage args must be a sequence of values, not {kind}"
            )
        object.__setattr__(self, "program", program)
        object.__setattr__(self, "args", tuple(to_argument(arg) for arg in self.args))

    @classmethod
    def of(cls, program: object, *args: object) -> Stage:
        """Build a stage from arbitrary values (paths, numbers, bytes...)."""
        return cls(
            program=to_argument(program),
            args=tuple(to_argument(arg) for arg in args),
        )

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def display(self) -> str:
        """Shell-style rendering for logs and error messages."""
        return shlex.join(self.argv)
