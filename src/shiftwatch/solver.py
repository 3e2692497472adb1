"""End-to-end pipeline: raw shift log text to encoded puzzle answers.

Parser, sorter, classifier and aggregator run strictly in that order over one
finite batch. The ``guard_id * minute`` encoding of the published answers is
applied here, outside the aggregator.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Final

from shiftwatch.analysis.aggregator import (
    SleepSummary,
    build_ledger,
    most_frequent_guard_minute,
    sleepiest_guard,
    summarize,
)
from shiftwatch.analysis.classifier import classify_records
from shiftwatch.domain.models import GuardedEvent, SleepLedger
from shiftwatch.ingestion.parser import parse_records
from shiftwatch.ingestion.sorter import sort_records

logger = logging.getLogger(__name__)


def guarded_events(text: str) -> tuple[GuardedEvent, ...]:
    """Parse, order and classify a shift log."""

    return classify_records(sort_records(parse_records(text))).events


def reconstruct_ledger(text: str) -> SleepLedger:
    """Pair the sleep intervals of a shift log into a per-guard ledger."""

    return build_ledger(guarded_events(text))


def analyze(text: str) -> SleepSummary:
    """Run the full pipeline and answer both queries."""

    return summarize(guarded_events(text))


def encode_answer(guard_id: str, minute: int) -> int:
    """Puzzle output encoding: guard id multiplied by minute."""

    try:
        numeric_id = int(guard_id)
    except ValueError as exc:
        raise ValueError(f"guard id {guard_id!r} is not numeric") from exc
    return numeric_id * minute


def solve_part_one(text: str) -> str:
    answer = sleepiest_guard(reconstruct_ledger(text))
    logger.info(
        "part one: guard #%s slept %d minutes, most often at minute %d",
        answer.guard_id,
        answer.total_minutes,
        answer.minute,
    )
    return str(encode_answer(*answer.pair))


def solve_part_two(text: str) -> str:
    answer = most_frequent_guard_minute(reconstruct_ledger(text))
    logger.info(
        "part two: guard #%s asleep %d times at minute %d",
        answer.guard_id,
        answer.count,
        answer.minute,
    )
    return str(encode_answer(*answer.pair))


PARTS: Final[dict[int, Callable[[str], str]]] = {
    1: solve_part_one,
    2: solve_part_two,
}


def solve(text: str, part: int) -> str:
    """Dispatch to the solver for ``part`` (1 or 2)."""

    solver = PARTS.get(part)
    if solver is None:
        raise ValueError(f"unsupported part {part!r}; expected one of {sorted(PARTS)}")
    return solver(text)


__all__ = [
    "PARTS",
    "analyze",
    "encode_answer",
    "guarded_events",
    "reconstruct_ledger",
    "solve",
    "solve_part_one",
    "solve_part_two",
]
