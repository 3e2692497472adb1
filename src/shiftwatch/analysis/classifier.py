"""Shift event classifier.

Walks chronologically sorted records and turns each into a typed ``ShiftEvent``
tagged with the guard it applies to. Sleep and wake records never name a
guard, so the on-duty guard is threaded through the walk as an explicit
``GuardContext`` value: ``classify_record`` takes a context and returns the
next one, and ``classify_records`` folds it over a whole sequence.

States are "no guard yet" and "guard g on duty". A shift start always moves to
"guard g' on duty"; sleep and wake leave the context unchanged and are tagged
with the current guard, or fail with ``NoActiveGuard`` before the first shift.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, assert_never

from shiftwatch.domain.errors import NoActiveGuard, UnrecognizedEvent
from shiftwatch.domain.models import (
    FallAsleep,
    GuardContext,
    GuardedEvent,
    ShiftEvent,
    ShiftStart,
    WakeUp,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shiftwatch.domain.models import Record

logger = logging.getLogger(__name__)

_SHIFT_START_RE: Final[re.Pattern[str]] = re.compile(r"^Guard #(?P<guard_id>\d+) begins shift$")
_FALLS_ASLEEP_RE: Final[re.Pattern[str]] = re.compile(r"^falls asleep$")
_WAKES_UP_RE: Final[re.Pattern[str]] = re.compile(r"^wakes up$")


@dataclass(frozen=True, slots=True)
class Classification:
    """Classified events in input order plus the context left after the last one."""

    events: tuple[GuardedEvent, ...]
    context: GuardContext


def parse_event(record: Record) -> ShiftEvent:
    """Match a record's text against the three event patterns, in order."""

    text = record.text.strip()
    shift_start = _SHIFT_START_RE.match(text)
    if shift_start is not None:
        return ShiftStart(timestamp=record.timestamp, guard_id=shift_start.group("guard_id"))
    if _FALLS_ASLEEP_RE.match(text):
        return FallAsleep(timestamp=record.timestamp)
    if _WAKES_UP_RE.match(text):
        return WakeUp(timestamp=record.timestamp)
    raise UnrecognizedEvent(
        "expected 'Guard #<id> begins shift', 'falls asleep' or 'wakes up'",
        line=record.raw_line,
        line_number=record.line_number,
    )


def classify_record(record: Record, context: GuardContext) -> tuple[GuardedEvent, GuardContext]:
    """Classify one record under ``context`` and return the event with the next context."""

    event = parse_event(record)
    match event:
        case ShiftStart(guard_id=guard_id):
            return GuardedEvent(event=event, guard_id=guard_id, source=record), context.begin_shift(
                guard_id
            )
        case FallAsleep() | WakeUp():
            if context.guard_id is None:
                raise NoActiveGuard(
                    "sleep/wake record precedes every 'begins shift' record",
                    line=record.raw_line,
                    line_number=record.line_number,
                )
            return GuardedEvent(event=event, guard_id=context.guard_id, source=record), context
        case _:
            assert_never(event)


def classify_records(
    records: Iterable[Record],
    context: GuardContext | None = None,
) -> Classification:
    """Classify sorted records, threading the guard context from one to the next."""

    current = GuardContext.empty() if context is None else context
    events: list[GuardedEvent] = []
    for record in records:
        guarded, current = classify_record(record, current)
        events.append(guarded)
    logger.debug(
        "classified %d events; guard on duty at end: %s",
        len(events),
        current.guard_id,
    )
    return Classification(events=tuple(events), context=current)


__all__ = ["Classification", "classify_record", "classify_records", "parse_event"]
