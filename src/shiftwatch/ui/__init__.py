"""UI package exports for the CLI and plain-text rendering."""

from shiftwatch.ui.cli import CLIError, build_parser, build_report, run_cli
from shiftwatch.ui.render import CLIRenderer, create_renderer

__all__ = [
    "CLIError",
    "CLIRenderer",
    "build_parser",
    "build_report",
    "create_renderer",
    "run_cli",
]
