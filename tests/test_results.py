"""Tests for execution result types."""

from __future__ import annotations

import pytest

from procpipe.errors import PipelineFailedError
from procpipe.runtime.results import ExitStatus, PipelineOutput


def test_exit_status_normal_exit() -> None:
    status = ExitStatus(0)
    assert status.success
    assert status.code == 0
    assert status.signal is None
    assert str(status) == "exit status: 0"


def test_exit_status_killed_by_signal() -> None:
    status = ExitStatus(-9)
    assert not status.success
    assert status.code is None
    assert status.signal == 9
    assert status.effective_exit_code == 137
    assert str(status) == "signal: SIGKILL"


def test_pipeline_output_check_passes_through_success() -> None:
    output = PipelineOutput(
        command="true", stdout=b"ok", stderr=b"", status=ExitStatus(0)
    )
    assert output.check() is output


def test_pipeline_output_check_raises_on_failure() -> None:
    output = PipelineOutput(
        command="ls | grep x", stdout=b"", stderr=b"nope", status=ExitStatus(1)
    )

    with pytest.raises(PipelineFailedError) as excinfo:
        output.check()

    assert excinfo.value.returncode == 1
    assert excinfo.value.stderr == b"nope"
    assert "ls | grep x" in str(excinfo.value)
