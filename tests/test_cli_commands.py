"""Behavior tests for `procpipe run` and `procpipe describe`."""

from __future__ import annotations

import argparse
import json
from sys import executable

import pytest

from procpipe.cli.app import dispatch, run
from procpipe.cli.commands import cmd_describe, cmd_run
from procpipe.config.settings import settings


def _run_args(
    pipeline: str, mode: str = "output", reap: bool | None = False
) -> argparse.Namespace:
    return argparse.Namespace(pipeline=pipeline, mode=mode, reap=reap)


def test_cmd_run_output_prints_terminal_stdout(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = cmd_run(
        _run_args(
            f"{executable}, -c, print('hi') => "
            f"{executable}, -c, import sys; sys.stdout.write(sys.stdin.read().upper())"
        )
    )

    assert code == 0
    assert capsys.readouterr().out == "HI\n"


def test_cmd_run_returns_terminal_exit_code() -> None:
    code = cmd_run(_run_args(f"{executable}, -c, import sys; sys.exit(4)", "status"))
    assert code == 4


def test_cmd_run_reports_missing_program(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = cmd_run(_run_args("procpipe-test-no-such-program, --flag"))

    assert code == 127
    assert "failed to spawn" in capsys.readouterr().err


def test_cmd_run_reports_parse_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = cmd_run(_run_args("ls =>"))

    assert code == 1
    assert "Invalid pipeline" in capsys.readouterr().err


def test_cmd_run_reaps_background_stages(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = cmd_run(
        _run_args(
            f"{executable}, -c, import sys; sys.exit(2) => "
            f"{executable}, -c, import sys; sys.stdin.read()",
            reap=True,
        )
    )

    assert code == 0
    assert "stage 0" in capsys.readouterr().err


def test_cmd_run_uses_reap_setting_when_flag_absent(
    capsys: pytest.CaptureFixture[str],
) -> None:
    settings.reap_background = True

    cmd_run(
        _run_args(
            f"{executable}, -c, pass => {executable}, -c, import sys; sys.stdin.read()",
            reap=None,
        )
    )

    assert "exit status: 0" in capsys.readouterr().err


def test_cmd_describe_json(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = cmd_describe(argparse.Namespace(pipeline="ls, -a => wc, -l", json=True))

    assert code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"program": "ls", "args": ["-a"]},
        {"program": "wc", "args": ["-l"]},
    ]


def test_cmd_describe_table(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = cmd_describe(argparse.Namespace(pipeline="grep, foo => sort", json=False))

    out = capsys.readouterr().out
    assert code == 0
    assert "grep" in out
    assert "sort" in out


def test_dispatch_without_command_prints_help(
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert dispatch(argparse.Namespace(command=None)) == 2
    assert "usage" in capsys.readouterr().out


def test_run_passes_log_level_to_logging_setup() -> None:
    calls: list[tuple[str | None, str | None]] = []

    def _configure(level: str | None, log_file: str | None) -> None:
        calls.append((level, log_file))

    code = run(
        ["--log-level", "info", "--debug-log", "describe", "ls", "--json"],
        configure_logging=_configure,
    )

    assert code == 0
    assert calls == [("INFO", "")]


def test_run_rejects_unknown_command() -> None:
    with pytest.raises(SystemExit):
        run(["frobnicate"])


def test_cmd_run_output_preserves_binary_bytes(
    capsysbinary: pytest.CaptureFixture[bytes],
) -> None:
    code = cmd_run(
        _run_args(
            f"{executable}, -c, pass => "
            rf"{executable}, -c, import sys; sys.stdout.buffer.write(b'\xff\x80')"
        )
    )

    assert code == 0
    assert capsysbinary.readouterr().out == b"\xff\x80"


def test_cmd_run_no_reap_overrides_setting(
    capsys: pytest.CaptureFixture[str],
) -> None:
    settings.reap_background = True

    cmd_run(
        _run_args(
            f"{executable}, -c, pass => {executable}, -c, import sys; sys.stdin.read()",
            reap=False,
        )
    )

    assert "stage 0" not in capsys.readouterr().err
