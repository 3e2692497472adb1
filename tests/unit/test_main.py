"""Unit tests for the process entrypoint and its exit-code contract."""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from shiftwatch.config import ConfigLoadError
from shiftwatch.domain import DanglingSleep
from shiftwatch.main import ExitCode, cli_entrypoint
from shiftwatch.sources import FetchError


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def _raise(exc: BaseException) -> object:
    def _run_cli(argv: object = None) -> int:
        raise exc

    return _run_cli


@pytest.mark.unit
def test_exit_code_values_are_stable() -> None:
    assert [int(code) for code in ExitCode] == [0, 1, 2, 3, 4]


@pytest.mark.unit
def test_cli_entrypoint_runs_solve(
    tmp_path: Path, canonical_log: str, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "input.txt"
    path.write_text(canonical_log, encoding="utf-8")

    assert cli_entrypoint(["solve", str(path), "--part", "2"]) == ExitCode.SUCCESS
    assert capsys.readouterr().out == "4455\n"


@pytest.mark.unit
def test_non_utf8_input_is_an_input_read_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "input.txt"
    path.write_bytes(
        b"[1518-11-01 00:00] Guard #10 begins shift\n[1518-11-01 00:05] falls \xff asleep\n"
    )

    assert cli_entrypoint(["solve", str(path)]) == ExitCode.CONFIG_ERROR

    err = capsys.readouterr().err
    assert "not valid UTF-8" in err
    assert "Traceback" not in err


@pytest.mark.unit
def test_argparse_exit_is_normalized(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["solve", "--part", "9"]) == ExitCode.CONFIG_ERROR
    assert "invalid choice" in capsys.readouterr().err
    assert cli_entrypoint(["--version"]) == ExitCode.SUCCESS


@pytest.mark.unit
@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (DanglingSleep("guard #10 is still asleep at end of input"), ExitCode.INPUT_ERROR),
        (ConfigLoadError("config file not found: x.toml"), ExitCode.CONFIG_ERROR),
        (FetchError("unable to fetch"), ExitCode.FETCH_ERROR),
        (requests.ConnectionError("refused"), ExitCode.FETCH_ERROR),
        (PermissionError("denied"), ExitCode.CONFIG_ERROR),
        (KeyError("boom"), ExitCode.INTERNAL_ERROR),
    ],
)
def test_uncaught_exceptions_route_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    exc: BaseException,
    expected: ExitCode,
) -> None:
    monkeypatch.setattr("shiftwatch.ui.cli.run_cli", _raise(exc))

    assert cli_entrypoint([]) == expected

    err = capsys.readouterr().err
    if expected is ExitCode.INTERNAL_ERROR:
        assert "Traceback" in err
    else:
        assert str(exc) in err


@pytest.mark.unit
def test_exception_chain_is_walked_to_the_cause(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    try:
        try:
            raise FetchError("unable to fetch")
        except FetchError as inner:
            raise RuntimeError("wrapped") from inner
    except RuntimeError as outer:
        wrapped = outer

    monkeypatch.setattr("shiftwatch.ui.cli.run_cli", _raise(wrapped))

    assert cli_entrypoint([]) == ExitCode.FETCH_ERROR
    assert "wrapped" in capsys.readouterr().err
