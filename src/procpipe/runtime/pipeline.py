"""Pipeline runner: spawns stages and wires their standard streams.

Every stage except the last is spawned with its stdout piped into the
next stage's stdin. Only the terminal stage is acted upon (spawned,
waited, or captured). Earlier stages are never waited on implicitly:
they finish on their own when their pipe reaches EOF or breaks. Callers
that want their exit statuses call ``Pipeline.reap()`` explicitly.

A spawn failure aborts the run. Stages that were already started are
left running rather than killed; they see a broken pipe once the parent
drops its copy of their output.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterator, Sequence
from typing import IO, Any, TypeVar

from procpipe.errors import (
    ConfigurationError,
    PipelineIOError,
    PipelinePhase,
    SpawnError,
)
from procpipe.parser import parse_pipeline, split_stages
from procpipe.runtime.results import ExitStatus, PipelineEvent, PipelineOutput
from procpipe.stage import Stage

logger = logging.getLogger(__name__)

StreamTarget = int | IO[Any] | None
EventCallback = Callable[[PipelineEvent], None]

T = TypeVar("T")
TerminalAction = Callable[[int, Stage, subprocess.Popen[bytes]], T]


class Pipeline:
    """An ordered chain of stages connected like ``a | b | c``.

    A pipeline is single-use: each execution call starts fresh OS
    processes and a second call raises ``ConfigurationError``.
    """

    def __init__(
        self,
        stages: Stage | Sequence[Stage] = (),
        *,
        on_event: EventCallback | None = None,
    ) -> None:
        if isinstance(stages, Stage):
            stages = (stages,)
        self._stages: tuple[Stage, ...] = tuple(stages)
        self._on_event = on_event
        self._executed = False
        self._background: list[subprocess.Popen[bytes]] = []

    @classmethod
    def parse(cls, text: str, *, on_event: EventCallback | None = None) -> Pipeline:
        """Build a pipeline from text such as ``"ls, -a => wc, -l"``."""
        return cls(parse_pipeline(text), on_event=on_event)

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    @property
    def executed(self) -> bool:
        return self._executed

    @property
    def background(self) -> tuple[subprocess.Popen[bytes], ...]:
        """Processes spawned for the non-terminal stages of the last run."""
        return tuple(self._background)

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self._stages)

    def __repr__(self) -> str:
        return f"Pipeline({self.display()!r})"

    def display(self) -> str:
        return " | ".join(stage.display() for stage in self._stages)

    def pipe(self, program: object, *args: object) -> Pipeline:
        """Return a new pipeline with one more stage appended."""
        return Pipeline(
            (*self._stages, Stage.of(program, *args)),
            on_event=self._on_event,
        )

    # --- Execution ---

    def spawn(
        self,
        *,
        stdin: StreamTarget = None,
        stdout: StreamTarget = None,
        stderr: StreamTarget = None,
    ) -> subprocess.Popen[bytes]:
        """Spawn all stages and return the terminal stage's process."""

        def _terminal(
            index: int, stage: Stage, process: subprocess.Popen[bytes]
        ) -> subprocess.Popen[bytes]:
            return process

        return self._run(_terminal, stdin=stdin, stdout=stdout, stderr=stderr)

    def status(
        self,
        *,
        stdin: StreamTarget = None,
        stdout: StreamTarget = None,
        stderr: StreamTarget = None,
    ) -> ExitStatus:
        """Spawn all stages and wait for the terminal stage to exit."""
        if stdin == subprocess.PIPE:
            raise ConfigurationError(
                "status() cannot pipe stdin; use output(input=...) instead"
            )
        return self._run(self._wait, stdin=stdin, stdout=stdout, stderr=stderr)

    def output(
        self,
        *,
        stdin: StreamTarget = None,
        input: bytes | None = None,
    ) -> PipelineOutput:
        """Spawn all stages and capture the terminal stage's output.

        ``input`` is written to the first stage's stdin and is only
        accepted for a single-stage pipeline, since earlier stages of a
        longer pipeline are not reachable from the returned result.
        """
        if input is not None:
            if stdin is not None:
                raise ConfigurationError("pass either stdin or input, not both")
            if len(self._stages) > 1:
                raise ConfigurationError(
                    "input can only be fed to a single-stage pipeline"
                )
            stdin = subprocess.PIPE

        def _terminal(
            index: int, stage: Stage, process: subprocess.Popen[bytes]
        ) -> PipelineOutput:
            return self._capture(index, stage, process, input)

        return self._run(
            _terminal, stdin=stdin, stdout=subprocess.PIPE, stderr=subprocess.PIPE
        )

    def reap(self, timeout: float | None = None) -> list[ExitStatus]:
        """Wait for the non-terminal stages and return their statuses.

        Raises ``subprocess.TimeoutExpired`` if a stage outlives ``timeout``.
        """
        statuses: list[ExitStatus] = []
        for index, process in enumerate(self._background):
            returncode = process.wait(timeout=timeout)
            stage = self._stages[index]
            logger.debug("Reaped stage %d (pid %d): %s", index, process.pid, returncode)
            _emit_event(
                self._on_event,
                PipelineEvent(
                    event_type="reap",
                    stage_index=index,
                    command=stage.display(),
                    pid=process.pid,
                    returncode=returncode,
                ),
            )
            statuses.append(ExitStatus(returncode))
        return statuses

    # --- Internals ---

    def _run(
        self,
        terminal: TerminalAction[T],
        *,
        stdin: StreamTarget,
        stdout: StreamTarget,
        stderr: StreamTarget,
    ) -> T:
        if not self._stages:
            raise ConfigurationError("pipeline has no stages")
        if self._executed:
            raise ConfigurationError("pipeline already executed")
        if stdin == subprocess.PIPE and len(self._stages) > 1:
            raise ConfigurationError(
                "stdin of the first stage cannot be piped in a multi-stage pipeline"
            )
        self._executed = True

        last = len(self._stages) - 1
        source: StreamTarget = stdin
        upstream: IO[bytes] | None = None
        try:
            for index, stage in enumerate(self._stages[:last]):
                process = self._spawn(
                    index, stage, stdin=source, stdout=subprocess.PIPE, stderr=None
                )
                self._background.append(process)
                # The child holds its own copy now; dropping ours lets the
                # upstream writer see SIGPIPE once this reader exits.
                if upstream is not None:
                    upstream.close()
                upstream = process.stdout
                source = upstream
            terminal_process = self._spawn(
                last, self._stages[last], stdin=source, stdout=stdout, stderr=stderr
            )
        finally:
            if upstream is not None:
                upstream.close()

        return terminal(last, self._stages[last], terminal_process)

    def _spawn(
        self,
        index: int,
        stage: Stage,
        *,
        stdin: StreamTarget,
        stdout: StreamTarget,
        stderr: StreamTarget,
    ) -> subprocess.Popen[bytes]:
        command = stage.display()
        try:
            process = subprocess.Popen(
                stage.argv, stdin=stdin, stdout=stdout, stderr=stderr
            )
        except OSError as exc:
            self._report_spawn_failure(index, command, exc)
            raise SpawnError(stage.program, index, exc) from exc
        except ValueError as exc:
            # Popen rejects arguments such as ones with embedded null bytes.
            self._report_spawn_failure(index, command, exc)
            raise ConfigurationError(str(exc), stage_index=index) from exc

        logger.debug("Spawned stage %d (pid %d): %s", index, process.pid, command)
        _emit_event(
            self._on_event,
            PipelineEvent(
                event_type="spawn",
                stage_index=index,
                command=command,
                pid=process.pid,
            ),
        )
        return process

    def _report_spawn_failure(
        self, index: int, command: str, exc: Exception
    ) -> None:
        logger.warning("Failed to spawn stage %d (%s): %s", index, command, exc)
        _emit_event(
            self._on_event,
            PipelineEvent(
                event_type="spawn_failed",
                stage_index=index,
                command=command,
                detail=str(exc),
            ),
        )

    def _wait(
        self, index: int, stage: Stage, process: subprocess.Popen[bytes]
    ) -> ExitStatus:
        self._emit_wait(index, stage, process)
        try:
            returncode = process.wait()
        except OSError as exc:
            raise PipelineIOError(
                "process", index, exc, phase=PipelinePhase.WAIT
            ) from exc
        self._emit_complete(index, stage, process, returncode)
        return ExitStatus(returncode)

    def _capture(
        self,
        index: int,
        stage: Stage,
        process: subprocess.Popen[bytes],
        input: bytes | None,
    ) -> PipelineOutput:
        self._emit_wait(index, stage, process)
        try:
            stdout, stderr = process.communicate(input)
        except OSError as exc:
            raise PipelineIOError("stdout/stderr", index, exc) from exc
        self._emit_complete(index, stage, process, process.returncode)
        return PipelineOutput(
            command=self.display(),
            stdout=stdout or b"",
            stderr=stderr or b"",
            status=ExitStatus(process.returncode),
        )

    def _emit_wait(
        self, index: int, stage: Stage, process: subprocess.Popen[bytes]
    ) -> None:
        _emit_event(
            self._on_event,
            PipelineEvent(
                event_type="wait",
                stage_index=index,
                command=stage.display(),
                pid=process.pid,
            ),
        )

    def _emit_complete(
        self,
        index: int,
        stage: Stage,
        process: subprocess.Popen[bytes],
        returncode: int,
    ) -> None:
        logger.info(
            "Pipeline %r finished with return code %d", self.display(), returncode
        )
        _emit_event(
            self._on_event,
            PipelineEvent(
                event_type="complete",
                stage_index=index,
                command=stage.display(),
                pid=process.pid,
                returncode=returncode,
            ),
        )


def cmd(*parts: object, on_event: EventCallback | None = None) -> Pipeline:
    """Build a pipeline from values separated by ``PIPE``.

    ``cmd("ls", "-a")`` is a single process; ``cmd("ls", PIPE, "wc", "-l")``
    pipes ``ls`` into ``wc -l``.
    """
    return Pipeline(split_stages(parts), on_event=on_event)


def _emit_event(on_event: EventCallback | None, event: PipelineEvent) -> None:
    if on_event is None:
        return
    on_event(event)
