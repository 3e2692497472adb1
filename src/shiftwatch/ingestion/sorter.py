"""Chronological ordering of parsed records."""

from __future__ import annotations

import logging
from itertools import pairwise
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shiftwatch.domain.models import Record

logger = logging.getLogger(__name__)


def sort_records(records: Iterable[Record]) -> list[Record]:
    """Return records ordered by timestamp ascending.

    The sort is stable, so records sharing a timestamp keep their input order.
    """

    ordered = sorted(records, key=lambda record: record.timestamp)
    if logger.isEnabledFor(logging.DEBUG) and ordered:
        logger.debug(
            "sorted %d records from %s to %s",
            len(ordered),
            ordered[0].timestamp.isoformat(timespec="minutes"),
            ordered[-1].timestamp.isoformat(timespec="minutes"),
        )
    return ordered


def is_chronological(records: Sequence[Record]) -> bool:
    """Whether ``records`` is already in non-decreasing timestamp order."""

    return all(left.timestamp <= right.timestamp for left, right in pairwise(records))


__all__ = ["is_chronological", "sort_records"]
