"""Frozen domain models for guard shift logs and reconstructed sleep ledgers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import NoReturn, TypeAlias

from shiftwatch.constants import MINUTES_PER_HOUR

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


def format_timestamp(value: datetime) -> str:
    """Render a record timestamp in its bracketed log form (without brackets)."""

    return value.isoformat(sep=" ", timespec="minutes")


def guard_sort_key(guard_id: str) -> tuple[int, int, str]:
    """Order guard ids numerically, falling back to text for non-numeric ids."""

    if guard_id.isdigit():
        return (0, int(guard_id), guard_id)
    return (1, 0, guard_id)


def _as_timestamp(value: object, path: str) -> datetime:
    if not isinstance(value, datetime):
        _fail(path, f"expected datetime, got {type(value).__name__}")
    if value.tzinfo is not None:
        _fail(path, "timestamps carry no timezone")
    if value.second or value.microsecond:
        _fail(path, "timestamps have minute resolution")
    return value


def _as_guard_id(value: object, path: str) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    parsed = value.strip()
    if not parsed:
        _fail(path, "must not be empty")
    return parsed


def _as_minute(value: object, path: str, *, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(path, f"expected integer, got {type(value).__name__}")
    if not 0 <= value <= upper:
        _fail(path, f"must be within 0..{upper}")
    return value


@dataclass(frozen=True, slots=True)
class Record:
    """One parsed log line; immutable once created by the parser."""

    timestamp: datetime
    text: str
    line_number: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        _as_timestamp(self.timestamp, "Record.timestamp")
        if not isinstance(self.text, str) or not self.text.strip():
            _fail("Record.text", "must be a non-empty string")

    @property
    def raw_line(self) -> str:
        return f"[{format_timestamp(self.timestamp)}] {self.text}"


@dataclass(frozen=True, slots=True)
class ShiftStart:
    timestamp: datetime
    guard_id: str

    def __post_init__(self) -> None:
        _as_timestamp(self.timestamp, "ShiftStart.timestamp")
        object.__setattr__(self, "guard_id", _as_guard_id(self.guard_id, "ShiftStart.guard_id"))


@dataclass(frozen=True, slots=True)
class FallAsleep:
    timestamp: datetime

    def __post_init__(self) -> None:
        _as_timestamp(self.timestamp, "FallAsleep.timestamp")


@dataclass(frozen=True, slots=True)
class WakeUp:
    timestamp: datetime

    def __post_init__(self) -> None:
        _as_timestamp(self.timestamp, "WakeUp.timestamp")


ShiftEvent: TypeAlias = ShiftStart | FallAsleep | WakeUp


@dataclass(frozen=True, slots=True)
class GuardContext:
    """The guard currently on duty; ``None`` until the first shift starts."""

    guard_id: str | None = None

    @classmethod
    def empty(cls) -> GuardContext:
        return cls()

    @property
    def on_duty(self) -> bool:
        return self.guard_id is not None

    def begin_shift(self, guard_id: str) -> GuardContext:
        return GuardContext(guard_id=_as_guard_id(guard_id, "GuardContext.guard_id"))


@dataclass(frozen=True, slots=True)
class GuardedEvent:
    """A classified event tagged with the guard it applies to."""

    event: ShiftEvent
    guard_id: str
    source: Record | None = field(default=None, compare=False)

    @property
    def timestamp(self) -> datetime:
        return self.event.timestamp


@dataclass(frozen=True, slots=True)
class SleepInterval:
    """Half-open ``[start_minute, end_minute)`` span of one guard's sleep."""

    guard_id: str
    start_minute: int
    end_minute: int

    def __post_init__(self) -> None:
        _as_guard_id(self.guard_id, "SleepInterval.guard_id")
        start = _as_minute(self.start_minute, "SleepInterval.start_minute", upper=MINUTES_PER_HOUR - 1)
        end = _as_minute(self.end_minute, "SleepInterval.end_minute", upper=MINUTES_PER_HOUR)
        if start >= end:
            _fail("SleepInterval", f"start_minute {start} must be before end_minute {end}")

    @property
    def duration(self) -> int:
        return self.end_minute - self.start_minute

    def minutes(self) -> range:
        return range(self.start_minute, self.end_minute)

    def to_dict(self) -> dict[str, JSONValue]:
        return {"start": self.start_minute, "end": self.end_minute}


class SleepLedger:
    """Read-only mapping of guard id to that guard's sleep intervals in log order."""

    __slots__ = ("_intervals",)

    def __init__(self, intervals: Mapping[str, Iterable[SleepInterval]]) -> None:
        frozen: dict[str, tuple[SleepInterval, ...]] = {}
        for guard_id in sorted(intervals, key=guard_sort_key):
            items = tuple(intervals[guard_id])
            for item in items:
                if item.guard_id != guard_id:
                    _fail(
                        f"SleepLedger[{guard_id}]",
                        f"interval belongs to guard {item.guard_id!r}",
                    )
            frozen[guard_id] = items
        self._intervals: Mapping[str, tuple[SleepInterval, ...]] = MappingProxyType(frozen)

    def __repr__(self) -> str:
        return f"SleepLedger({dict(self._intervals)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SleepLedger):
            return NotImplemented
        return dict(self._intervals) == dict(other._intervals)

    def __hash__(self) -> int:
        return hash(tuple(self._intervals.items()))

    def __contains__(self, guard_id: object) -> bool:
        return guard_id in self._intervals

    def __len__(self) -> int:
        return len(self._intervals)

    @property
    def guard_ids(self) -> tuple[str, ...]:
        return tuple(self._intervals)

    @property
    def is_empty(self) -> bool:
        return not any(self._intervals.values())

    def intervals_for(self, guard_id: str) -> tuple[SleepInterval, ...]:
        return self._intervals.get(guard_id, ())

    def items(self) -> Iterable[tuple[str, tuple[SleepInterval, ...]]]:
        return self._intervals.items()

    def total_minutes(self, guard_id: str) -> int:
        return sum(interval.duration for interval in self.intervals_for(guard_id))

    def minute_histogram(self, guard_id: str) -> tuple[int, ...]:
        """Count, per minute bucket, how many of the guard's intervals cover it."""

        counts = [0] * MINUTES_PER_HOUR
        for interval in self.intervals_for(guard_id):
            for minute in interval.minutes():
                counts[minute] += 1
        return tuple(counts)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            guard_id: {
                "total_minutes": self.total_minutes(guard_id),
                "intervals": [interval.to_dict() for interval in intervals],
            }
            for guard_id, intervals in self._intervals.items()
        }


@dataclass(frozen=True, slots=True)
class SleepiestGuard:
    """Answer to "which guard sleeps most, and at which minute"."""

    guard_id: str
    minute: int
    total_minutes: int
    minute_count: int

    @property
    def pair(self) -> tuple[str, int]:
        return (self.guard_id, self.minute)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "guard_id": self.guard_id,
            "minute": self.minute,
            "total_minutes": self.total_minutes,
            "minute_count": self.minute_count,
        }


@dataclass(frozen=True, slots=True)
class GuardMinute:
    """Answer to "which guard is most often asleep on the same minute"."""

    guard_id: str
    minute: int
    count: int

    @property
    def pair(self) -> tuple[str, int]:
        return (self.guard_id, self.minute)

    def to_dict(self) -> dict[str, JSONValue]:
        return {"guard_id": self.guard_id, "minute": self.minute, "count": self.count}


__all__ = [
    "FallAsleep",
    "GuardContext",
    "GuardMinute",
    "GuardedEvent",
    "JSONScalar",
    "JSONValue",
    "Record",
    "ShiftEvent",
    "ShiftStart",
    "SleepInterval",
    "SleepLedger",
    "SleepiestGuard",
    "WakeUp",
    "format_timestamp",
    "guard_sort_key",
]
