"""Sleep interval aggregation and the two ranking queries over a sleep ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from shiftwatch.domain.errors import (
    DanglingSleep,
    InvalidSleepInterval,
    NoSleepRecorded,
    UnmatchedWakeUp,
)
from shiftwatch.domain.models import (
    FallAsleep,
    GuardMinute,
    ShiftStart,
    SleepiestGuard,
    SleepInterval,
    SleepLedger,
    WakeUp,
    guard_sort_key,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shiftwatch.domain.models import GuardedEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SleepSummary:
    """Ledger plus both query answers for one batch of events."""

    ledger: SleepLedger
    sleepiest_guard: SleepiestGuard
    guard_minute: GuardMinute


def build_ledger(events: Iterable[GuardedEvent]) -> SleepLedger:
    """Pair each fall-asleep with the guard's next wake-up into half-open intervals.

    Every guard that begins a shift gets a ledger entry, even with no sleep.
    Raises ``DanglingSleep`` when an interval is still open at a new shift of
    the same guard, at a second fall-asleep, or at end of input.
    """

    intervals: dict[str, list[SleepInterval]] = {}
    asleep_since: dict[str, GuardedEvent] = {}

    for guarded in events:
        guard_id = guarded.guard_id
        event = guarded.event
        match event:
            case ShiftStart():
                opened = asleep_since.get(guard_id)
                if opened is not None:
                    raise DanglingSleep(
                        f"guard #{guard_id} begins a new shift while still asleep "
                        f"since {_describe(opened)}",
                        line=_source_line(guarded),
                        line_number=_source_line_number(guarded),
                    )
                intervals.setdefault(guard_id, [])
            case FallAsleep():
                opened = asleep_since.get(guard_id)
                if opened is not None:
                    raise DanglingSleep(
                        f"guard #{guard_id} falls asleep again while asleep since {_describe(opened)}",
                        line=_source_line(guarded),
                        line_number=_source_line_number(guarded),
                    )
                asleep_since[guard_id] = guarded
                intervals.setdefault(guard_id, [])
            case WakeUp():
                opened = asleep_since.pop(guard_id, None)
                if opened is None:
                    raise UnmatchedWakeUp(
                        f"guard #{guard_id} wakes up without having fallen asleep",
                        line=_source_line(guarded),
                        line_number=_source_line_number(guarded),
                    )
                start = opened.timestamp.minute
                end = event.timestamp.minute
                if end <= start:
                    raise InvalidSleepInterval(
                        f"guard #{guard_id} wakes at minute {end}, not after falling asleep "
                        f"at minute {start}",
                        line=_source_line(guarded),
                        line_number=_source_line_number(guarded),
                    )
                intervals.setdefault(guard_id, []).append(
                    SleepInterval(guard_id=guard_id, start_minute=start, end_minute=end)
                )
            case _:
                assert_never(event)

    if asleep_since:
        opened = min(asleep_since.values(), key=lambda item: item.timestamp)
        raise DanglingSleep(
            f"guard #{opened.guard_id} is still asleep at end of input",
            line=_source_line(opened),
            line_number=_source_line_number(opened),
        )

    ledger = SleepLedger(intervals)
    logger.debug(
        "built sleep ledger for %d guards with %d intervals",
        len(ledger),
        sum(len(items) for _, items in ledger.items()),
    )
    return ledger


def sleepiest_guard(ledger: SleepLedger) -> SleepiestGuard:
    """Guard with the most total sleep and the minute they are most often asleep.

    Ties on total sleep go to the lowest guard id; ties on minute count go to
    the earliest minute.
    """

    _require_sleep(ledger)
    guard_id = min(
        ledger.guard_ids,
        key=lambda candidate: (-ledger.total_minutes(candidate), guard_sort_key(candidate)),
    )
    histogram = ledger.minute_histogram(guard_id)
    minute = peak_minute(histogram)
    return SleepiestGuard(
        guard_id=guard_id,
        minute=minute,
        total_minutes=ledger.total_minutes(guard_id),
        minute_count=histogram[minute],
    )


def most_frequent_guard_minute(ledger: SleepLedger) -> GuardMinute:
    """Guard/minute pair asleep the most times, across every guard.

    Ties go to the lowest guard id, then the earliest minute.
    """

    _require_sleep(ledger)
    best: GuardMinute | None = None
    for guard_id in sorted(ledger.guard_ids, key=guard_sort_key):
        histogram = ledger.minute_histogram(guard_id)
        minute = peak_minute(histogram)
        if best is None or histogram[minute] > best.count:
            best = GuardMinute(guard_id=guard_id, minute=minute, count=histogram[minute])
    if best is None:
        raise NoSleepRecorded("sleep ledger has no guards")
    return best


def peak_minute(histogram: Sequence[int]) -> int:
    """Index of the highest bucket; the earliest one wins a tie."""

    if not histogram:
        raise ValueError("histogram must not be empty")
    return min(range(len(histogram)), key=lambda minute: (-histogram[minute], minute))


def summarize(events: Iterable[GuardedEvent]) -> SleepSummary:
    """Build the ledger and answer both queries."""

    ledger = build_ledger(events)
    summary = SleepSummary(
        ledger=ledger,
        sleepiest_guard=sleepiest_guard(ledger),
        guard_minute=most_frequent_guard_minute(ledger),
    )
    logger.info(
        "sleepiest guard #%s at minute %d; most frequent guard #%s at minute %d",
        summary.sleepiest_guard.guard_id,
        summary.sleepiest_guard.minute,
        summary.guard_minute.guard_id,
        summary.guard_minute.minute,
    )
    return summary


def _require_sleep(ledger: SleepLedger) -> None:
    if ledger.is_empty:
        raise NoSleepRecorded("no guard was recorded asleep")


def _describe(guarded: GuardedEvent) -> str:
    return guarded.timestamp.isoformat(sep=" ", timespec="minutes")


def _source_line(guarded: GuardedEvent) -> str | None:
    return None if guarded.source is None else guarded.source.raw_line


def _source_line_number(guarded: GuardedEvent) -> int | None:
    return None if guarded.source is None else guarded.source.line_number


__all__ = [
    "SleepSummary",
    "build_ledger",
    "most_frequent_guard_minute",
    "peak_minute",
    "sleepiest_guard",
    "summarize",
]
