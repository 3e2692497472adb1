"""
shiftwatch: ingestion layer

File: src/shiftwatch/ingestion/__init__.py

Purpose
- Turn a raw shift-log text block into parsed records in chronological order.

Functional requirements
- Empty and whitespace-only lines are discarded before parsing.
- Malformed lines abort with the offending line and its line number.

Non-functional requirements
- Pure functions; same input yields the same records.
"""

from shiftwatch.ingestion.parser import parse_record, parse_records, split_input_lines
from shiftwatch.ingestion.sorter import is_chronological, sort_records

__all__ = [
    "is_chronological",
    "parse_record",
    "parse_records",
    "sort_records",
    "split_input_lines",
]
