from __future__ import annotations

import pytest

from procpipe.cli.parser import parse_args


def test_parse_args_without_command() -> None:
    args = parse_args([])
    assert args.command is None
    assert args.log_level is None


def test_parse_args_run_defaults() -> None:
    args = parse_args(["run", "ls, -a => wc, -l"])
    assert args.command == "run"
    assert args.pipeline == "ls, -a => wc, -l"
    assert args.mode == "status"
    assert args.reap is None


def test_parse_args_run_output_with_reap() -> None:
    args = parse_args(
        ["--log-level", "debug", "run", "ls", "--mode", "output", "--reap"]
    )
    assert args.log_level == "DEBUG"
    assert args.mode == "output"
    assert args.reap is True


def test_parse_args_describe_json() -> None:
    args = parse_args(["describe", "ls => wc", "--json"])
    assert args.command == "describe"
    assert args.json is True


def test_parse_args_run_rejects_invalid_mode() -> None:
    with pytest.raises(SystemExit):
        _ = parse_args(["run", "ls", "--mode", "spawn"])


def test_parse_args_run_no_reap() -> None:
    args = parse_args(["run", "ls", "--no-reap"])
    assert args.reap is False


def test_parse_args_log_targets() -> None:
    assert parse_args(["run", "ls"]).log_file is None
    assert parse_args(["--log-file", "/tmp/p.log", "run", "ls"]).log_file == (
        "/tmp/p.log"
    )
    assert parse_args(["--debug-log", "run", "ls"]).log_file == ""


def test_parse_args_log_targets_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--debug-log", "--log-file", "x.log", "run", "ls"])
