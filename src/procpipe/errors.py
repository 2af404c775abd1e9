"""Exceptions raised while parsing and executing pipelines."""

from __future__ import annotations

from enum import Enum


class PipelinePhase(str, Enum):
    """Phase of pipeline handling in which an error occurred."""

    PARSE = "parse"
    CONFIGURE = "configure"
    SPAWN = "spawn"
    WAIT = "wait"
    CAPTURE = "capture"


class PipelineError(Exception):
    """Base exception for pipeline errors.

    Carries the phase that failed and, when known, the 0-based index of
    the stage involved.
    """

    phase: PipelinePhase = PipelinePhase.CONFIGURE

    def __init__(self, message: str, *, stage_index: int | None = None) -> None:
        self.stage_index = stage_index
        self.message = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        if self.stage_index is None:
            return f"[{self.phase.value}] {message}"
        return f"[{self.phase.value}] stage {self.stage_index}: {message}"


class ParseError(PipelineError):
    """Raised when a pipeline description is malformed."""

    phase = PipelinePhase.PARSE


class ConfigurationError(PipelineError):
    """Raised when a pipeline cannot be executed as configured."""

    phase = PipelinePhase.CONFIGURE


class SpawnError(PipelineError):
    """Raised when the OS refuses to create a stage's process."""

    phase = PipelinePhase.SPAWN

    def __init__(self, program: str, stage_index: int, cause: OSError) -> None:
        self.program = program
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(
            f"failed to spawn {program!r}: {reason}", stage_index=stage_index
        )


class PipelineIOError(PipelineError):
    """Raised when reading from or waiting on a stage's streams fails."""

    def __init__(
        self,
        stream: str,
        stage_index: int,
        cause: OSError,
        *,
        phase: PipelinePhase = PipelinePhase.CAPTURE,
    ) -> None:
        self.stream = stream
        self.cause = cause
        self.phase = phase
        super().__init__(f"I/O error on {stream}: {cause}", stage_index=stage_index)


class PipelineFailedError(PipelineError):
    """Raised by ``PipelineOutput.check()`` when the terminal stage failed."""

    phase = PipelinePhase.WAIT

    def __init__(self, command: str, returncode: int, stderr: bytes = b"") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{command!r} exited with status {returncode}")
