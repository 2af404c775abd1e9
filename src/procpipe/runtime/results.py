"""Result and event types produced by pipeline execution."""

from __future__ import annotations

import signal as _signal
from dataclasses import dataclass

from procpipe.errors import PipelineFailedError


@dataclass(frozen=True, slots=True)
class ExitStatus:
    """Termination status of one process.

    ``returncode`` follows ``subprocess.Popen.returncode``: negative
    values mean the process was killed by that signal number.
    """

    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def code(self) -> int | None:
        if self.returncode < 0:
            return None
        return self.returncode

    @property
    def signal(self) -> int | None:
        if self.returncode < 0:
            return -self.returncode
        return None

    @property
    def effective_exit_code(self) -> int:
        """Exit code as a shell would report it (128 + N for signal N)."""
        if self.signal is not None:
            return 128 + self.signal
        return self.returncode

    def __str__(self) -> str:
        if self.signal is not None:
            try:
                name = _signal.Signals(self.signal).name
            except ValueError:
                name = str(self.signal)
            return f"signal: {name}"
        return f"exit status: {self.returncode}"


@dataclass(frozen=True, slots=True)
class PipelineOutput:
    """Captured streams and status of the terminal stage."""

    command: str
    stdout: bytes
    stderr: bytes
    status: ExitStatus

    @property
    def returncode(self) -> int:
        return self.status.returncode

    @property
    def success(self) -> bool:
        return self.status.success

    def check(self) -> PipelineOutput:
        """Return self, or raise ``PipelineFailedError`` on a non-zero status."""
        if not self.success:
            raise PipelineFailedError(self.command, self.returncode, self.stderr)
        return self


@dataclass(frozen=True, slots=True)
class PipelineEvent:
    """Lifecycle event emitted while running a pipeline."""

    event_type: str
    stage_index: int
    command: str
    pid: int | None = None
    returncode: int | None = None
    detail: str = ""
