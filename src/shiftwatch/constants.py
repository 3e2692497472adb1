"""Stable constants shared across shiftwatch layers."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1
REPORT_SCHEMA_VERSION: Final[int] = 1

# Minute buckets of the midnight hour used for sleep histograms.
MINUTES_PER_HOUR: Final[int] = 60

# Bracketed record timestamp, e.g. ``[1518-11-01 00:05]``.
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M"

# Puzzle input source defaults.
DEFAULT_BASE_URL: Final[str] = "https://adventofcode.com"
DEFAULT_PUZZLE_YEAR: Final[int] = 2018
DEFAULT_PUZZLE_DAY: Final[int] = 4
DEFAULT_SESSION_ENV: Final[str] = "ADV_SESS"

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_BASE_URL",
    "DEFAULT_PUZZLE_DAY",
    "DEFAULT_PUZZLE_YEAR",
    "DEFAULT_SESSION_ENV",
    "MINUTES_PER_HOUR",
    "REPORT_SCHEMA_VERSION",
    "TIMESTAMP_FORMAT",
]
