"""Command-line interface router for shiftwatch."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Final

import yaml

from shiftwatch import __version__
from shiftwatch.analysis import SleepSummary, peak_minute
from shiftwatch.config import (
    ConfigLoadError,
    ConfigValidationError,
    effective_config,
    load_config,
)
from shiftwatch.constants import REPORT_SCHEMA_VERSION
from shiftwatch.domain import ShiftLogError
from shiftwatch.observability import correlation_scope, setup_logging, shutdown_logging
from shiftwatch.solver import PARTS, analyze, encode_answer, solve
from shiftwatch.sources import (
    STDIN_MARKER,
    FetchError,
    InputReadError,
    PuzzleInputSource,
    read_input,
)
from shiftwatch.ui.render import CLIRenderer, create_renderer

REPORT_FORMATS: Final[tuple[str, ...]] = ("text", "json", "yaml")
_REPORT_HEADERS: Final[tuple[str, ...]] = (
    "GUARD",
    "INTERVALS",
    "TOTAL MIN",
    "PEAK MINUTE",
    "PEAK COUNT",
)
_PIPELINE_ERRORS: Final[tuple[type[Exception], ...]] = (ShiftLogError, InputReadError, FetchError)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """A failure the CLI reports as ``error: <message>`` before exiting with ``exit_code``."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Parser for ``shiftwatch {solve,report,config}`` and their shared options."""

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to shiftwatch.toml (default: ./shiftwatch.toml when present).",
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress at INFO level on stderr and show extra detail.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    parser = argparse.ArgumentParser(
        prog="shiftwatch",
        description=(
            "Reconstruct guard sleep patterns from an unordered shift log and "
            "answer the two sleepiest-guard questions."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  shiftwatch solve input.txt --part 1\n"
            "  cat input.txt | shiftwatch solve - --part 2 --json\n"
            "  shiftwatch report input.txt --format yaml\n"
            "  shiftwatch config --json\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    solve_parser = subparsers.add_parser(
        "solve",
        parents=[common],
        help="Print the encoded answer for one part.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  shiftwatch solve input.txt\n"
            "  shiftwatch solve - --part 2 < input.txt\n"
            "  ADV_SESS=... shiftwatch solve --part 1\n"
        ),
    )
    _add_input_argument(solve_parser)
    solve_parser.add_argument(
        "--part",
        type=int,
        choices=sorted(PARTS),
        default=1,
        help="1: sleepiest guard's favourite minute; 2: most frequent guard-minute.",
    )
    solve_parser.add_argument("--json", action="store_true", help="Emit JSON output.")
    solve_parser.set_defaults(handler=_cmd_solve)

    report_parser = subparsers.add_parser(
        "report",
        parents=[common],
        help="Summarize every guard's sleep and both answers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  shiftwatch report input.txt\n"
            "  shiftwatch report input.txt --format json\n"
        ),
    )
    _add_input_argument(report_parser)
    report_parser.add_argument(
        "--format",
        dest="output_format",
        choices=REPORT_FORMATS,
        default="text",
        help="Output format (default: text).",
    )
    report_parser.set_defaults(handler=_cmd_report)

    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Print the effective configuration with secrets redacted.",
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output.")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input_path",
        nargs="?",
        default=None,
        metavar="INPUT",
        help=(
            f"Shift log file, or '{STDIN_MARKER}' for stdin. "
            "When omitted the input is downloaded using the [input] config section."
        ),
    )


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Run one subcommand and return its exit code; usage errors print help and return 2."""

    parser = build_parser()
    args = parser.parse_args(argv)
    command = getattr(args, "handler", None)
    if command is None:
        parser.print_help(sys.stderr)
        return 2
    try:
        return int(command(args))
    except CLIError as failure:
        print(f"error: {failure.message}", file=sys.stderr)
        return failure.exit_code


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_solve(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    part: int = args.part

    try:
        with _logging_session(args, config, command="solve", part=str(part)):
            answer = solve(_read_shift_log(args, config), part)
    except _PIPELINE_ERRORS as exc:
        raise _pipeline_cli_error(exc) from exc

    if args.json:
        _emit_json({"command": "solve", "part": part, "answer": int(answer)})
    else:
        print(answer)
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)

    try:
        with _logging_session(args, config, command="report"):
            summary = analyze(_read_shift_log(args, config))
    except _PIPELINE_ERRORS as exc:
        raise _pipeline_cli_error(exc) from exc

    match args.output_format:
        case "json":
            _emit_json(build_report(summary))
        case "yaml":
            _emit_yaml(build_report(summary))
        case _:
            _render_report(_renderer_for(args), summary)
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    shown = effective_config(_load_effective_config(args))

    if args.json:
        _emit_json({"command": "config", "config": shown})
        return 0

    renderer = _renderer_for(args)
    renderer.kv("Config file", args.config_path or "(default)")
    renderer.text(json.dumps(shown, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def build_report(summary: SleepSummary) -> dict[str, object]:
    """Structured report: per-guard sleep totals and both encoded answers."""

    part_one = summary.sleepiest_guard
    part_two = summary.guard_minute
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "guards": _guard_entries(summary),
        "answers": {
            "part1": {**part_one.to_dict(), "answer": encode_answer(*part_one.pair)},
            "part2": {**part_two.to_dict(), "answer": encode_answer(*part_two.pair)},
        },
    }


def _guard_entries(summary: SleepSummary) -> list[dict[str, Any]]:
    ledger = summary.ledger
    guards: list[dict[str, Any]] = []
    for guard_id, intervals in ledger.items():
        histogram = ledger.minute_histogram(guard_id)
        total = ledger.total_minutes(guard_id)
        peak = peak_minute(histogram) if total else None
        guards.append(
            {
                "guard_id": guard_id,
                "intervals": [interval.to_dict() for interval in intervals],
                "total_minutes": total,
                "peak_minute": peak,
                "peak_count": histogram[peak] if peak is not None else 0,
            }
        )
    return guards


def _render_report(renderer: CLIRenderer, summary: SleepSummary) -> None:
    rows = [
        (
            f"#{guard['guard_id']}",
            str(len(guard["intervals"])),
            str(guard["total_minutes"]),
            "-" if guard["peak_minute"] is None else f"{guard['peak_minute']:02d}",
            str(guard["peak_count"]),
        )
        for guard in _guard_entries(summary)
    ]
    renderer.heading("Guard sleep report")
    renderer.table(_REPORT_HEADERS, rows)

    part_one = summary.sleepiest_guard
    part_two = summary.guard_minute
    renderer.section("Answers")
    renderer.kv(
        "Part 1",
        f"{encode_answer(*part_one.pair)} (guard #{part_one.guard_id}, "
        f"minute {part_one.minute:02d}, {part_one.total_minutes} minutes asleep)",
    )
    renderer.kv(
        "Part 2",
        f"{encode_answer(*part_two.pair)} (guard #{part_two.guard_id}, "
        f"minute {part_two.minute:02d}, asleep {part_two.count} times)",
    )
    for guard_id, intervals in summary.ledger.items():
        spans = ", ".join(f"[{i.start_minute:02d},{i.end_minute:02d})" for i in intervals)
        renderer.detail(f"#{guard_id}: {spans or '(never asleep)'}")




# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """One compact JSON object with sorted keys on stdout."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _emit_yaml(payload: Mapping[str, object]) -> None:
    text = yaml.safe_dump(dict(payload), sort_keys=False, default_flow_style=False, width=120)
    sys.stdout.write(text)


def _renderer_for(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(no_color=args.no_color, verbose=args.verbose)


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    try:
        return load_config(args.config_path)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _read_shift_log(args: argparse.Namespace, config: Mapping[str, object]) -> str:
    if args.input_path is not None:
        return read_input(args.input_path)
    return PuzzleInputSource.from_config(config).fetch()


def _pipeline_cli_error(exc: Exception) -> CLIError:
    if isinstance(exc, FetchError):
        return CLIError(str(exc), exit_code=3)
    if isinstance(exc, InputReadError):
        return CLIError(str(exc), exit_code=2)
    return CLIError(str(exc), exit_code=1)


@contextmanager
def _logging_session(
    args: argparse.Namespace,
    config: Mapping[str, Any],
    *,
    command: str,
    part: str | None = None,
) -> Iterator[None]:
    section = config.get("observability", {})
    level = None
    if args.verbose and section.get("log_level") != "DEBUG":
        level = "INFO"
    setup_logging(section, run_id=f"run-{uuid.uuid4().hex[:12]}", level=level)
    try:
        with correlation_scope(command=command, part=part, source=args.input_path or "http"):
            yield
    finally:
        shutdown_logging()


__all__ = ["CLIError", "build_parser", "build_report", "run_cli"]
