"""Shift event classification and sleep aggregation."""

from shiftwatch.analysis.aggregator import (
    SleepSummary,
    build_ledger,
    most_frequent_guard_minute,
    peak_minute,
    sleepiest_guard,
    summarize,
)
from shiftwatch.analysis.classifier import (
    Classification,
    classify_record,
    classify_records,
    parse_event,
)

__all__ = [
    "Classification",
    "SleepSummary",
    "build_ledger",
    "classify_record",
    "classify_records",
    "most_frequent_guard_minute",
    "parse_event",
    "peak_minute",
    "sleepiest_guard",
    "summarize",
]
