"""
shiftwatch: domain layer

File: src/shiftwatch/domain/__init__.py

Purpose
- Domain types shared across the pipeline: Record, ShiftEvent variants, GuardContext,
  SleepInterval, SleepLedger and the two query answers.
- Error taxonomy for malformed shift logs.

Functional requirements
- Domain objects are immutable once built and validate their own invariants.

Non-functional requirements
- Domain layer is free of IO side effects and has no third-party dependencies.
"""

from shiftwatch.domain.errors import (
    DanglingSleep,
    InvalidSleepInterval,
    MalformedLine,
    MalformedTimestamp,
    NoActiveGuard,
    NoSleepRecorded,
    ShiftLogError,
    UnmatchedWakeUp,
    UnrecognizedEvent,
)
from shiftwatch.domain.models import (
    FallAsleep,
    GuardContext,
    GuardedEvent,
    GuardMinute,
    Record,
    ShiftEvent,
    ShiftStart,
    SleepiestGuard,
    SleepInterval,
    SleepLedger,
    WakeUp,
    format_timestamp,
    guard_sort_key,
)

__all__ = [
    "DanglingSleep",
    "FallAsleep",
    "GuardContext",
    "GuardMinute",
    "GuardedEvent",
    "InvalidSleepInterval",
    "MalformedLine",
    "MalformedTimestamp",
    "NoActiveGuard",
    "NoSleepRecorded",
    "Record",
    "ShiftEvent",
    "ShiftLogError",
    "ShiftStart",
    "SleepInterval",
    "SleepLedger",
    "SleepiestGuard",
    "UnmatchedWakeUp",
    "UnrecognizedEvent",
    "WakeUp",
    "format_timestamp",
    "guard_sort_key",
]
