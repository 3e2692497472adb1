"""Process entrypoint for ``shiftwatch``: runs the CLI and fixes the exit code."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ExitCode(IntEnum):
    """Exit status reported to the shell."""

    SUCCESS = 0
    INPUT_ERROR = 1
    CONFIG_ERROR = 2
    FETCH_ERROR = 3
    INTERNAL_ERROR = 4


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Run the CLI for ``python -m shiftwatch`` and the console script."""

    try:
        from shiftwatch.ui.cli import run_cli

        return _as_exit_code(run_cli(argv))
    except SystemExit as exc:
        return _as_exit_code(exc.code)
    except BaseException as exc:  # noqa: BLE001 - last stop before the shell.
        code = classify_failure(exc)
        _report_failure(exc, code)
        return int(code)


def classify_failure(exc: BaseException) -> ExitCode:
    """Map an escaped exception, or anything in its cause chain, to an exit code."""

    for item in _causes(exc):
        for error_types, code in _failure_table():
            if isinstance(item, error_types):
                return code
    return ExitCode.INTERNAL_ERROR


def _failure_table() -> tuple[tuple[tuple[type[BaseException], ...], ExitCode], ...]:
    import requests

    from shiftwatch.config import ConfigLoadError, ConfigValidationError
    from shiftwatch.domain.errors import ShiftLogError
    from shiftwatch.sources import FetchError, InputReadError

    return (
        ((ShiftLogError,), ExitCode.INPUT_ERROR),
        ((ConfigLoadError, ConfigValidationError, InputReadError), ExitCode.CONFIG_ERROR),
        ((FetchError, requests.RequestException), ExitCode.FETCH_ERROR),
        ((FileNotFoundError, NotADirectoryError, PermissionError), ExitCode.CONFIG_ERROR),
    )


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def _as_exit_code(raw: object) -> int:
    if raw is None:
        return int(ExitCode.SUCCESS)
    if isinstance(raw, int) and raw in set(ExitCode):
        return raw
    if isinstance(raw, str) and raw.strip():
        print(raw.strip(), file=sys.stderr)
    return int(ExitCode.INTERNAL_ERROR)


def _report_failure(exc: BaseException, code: ExitCode) -> None:
    if code is ExitCode.INTERNAL_ERROR:
        traceback.print_exception(exc, file=sys.stderr)
    else:
        print(str(exc).strip() or type(exc).__name__, file=sys.stderr)


__all__ = ["ExitCode", "cli_entrypoint", "classify_failure"]
