"""Record parser: raw ``[YYYY-MM-DD HH:MM] text`` lines into ``Record`` values."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Final

from shiftwatch.constants import TIMESTAMP_FORMAT
from shiftwatch.domain.errors import MalformedLine, MalformedTimestamp
from shiftwatch.domain.models import Record

logger = logging.getLogger(__name__)

_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^\[(?P<stamp>[^\]]*)\]\s+(?P<text>\S.*)$")
_STAMP_SHAPE_RE: Final[re.Pattern[str]] = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}$")


def split_input_lines(text: str) -> list[str]:
    """Split an input block into stripped lines, dropping the empty ones."""

    return [line for _, line in _numbered_lines(text)]


def parse_record(line: str, *, line_number: int | None = None) -> Record:
    """Parse one raw log line.

    Raises ``MalformedLine`` when the line is not ``[...] text`` and
    ``MalformedTimestamp`` when the bracketed part is not a real date/time.
    """

    stripped = line.strip()
    match = _LINE_RE.match(stripped)
    if match is None:
        raise MalformedLine(
            "expected '[YYYY-MM-DD HH:MM] description'",
            line=line,
            line_number=line_number,
        )

    stamp = match.group("stamp").strip()
    if not _STAMP_SHAPE_RE.match(stamp):
        raise MalformedTimestamp(
            f"timestamp {stamp!r} is not in YYYY-MM-DD HH:MM form",
            line=line,
            line_number=line_number,
        )
    try:
        timestamp = datetime.strptime(stamp, TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise MalformedTimestamp(
            f"timestamp {stamp!r} is not a valid date/time ({exc})",
            line=line,
            line_number=line_number,
        ) from exc

    return Record(timestamp=timestamp, text=match.group("text").strip(), line_number=line_number)


def parse_records(text: str) -> list[Record]:
    """Parse every non-empty line of an input block, in input order."""

    records = [
        parse_record(line, line_number=line_number) for line_number, line in _numbered_lines(text)
    ]
    logger.debug("parsed %d records", len(records))
    return records


def _numbered_lines(text: str) -> list[tuple[int, str]]:
    numbered: list[tuple[int, str]] = []
    for index, raw in enumerate(text.split("\n"), start=1):
        stripped = raw.strip()
        if stripped:
            numbered.append((index, stripped))
    return numbered


__all__ = ["parse_record", "parse_records", "split_input_lines"]
