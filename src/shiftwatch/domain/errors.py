"""Typed failures raised while reconstructing guard sleep timelines.

Every error carries the offending raw line (and its 1-based line number when
the line came from an input block) so malformed input can be diagnosed from
the message alone. None of these errors is recoverable: the pipeline aborts on
the first one.
"""

from __future__ import annotations


class ShiftLogError(ValueError):
    """Base class for input-contract violations in a shift log."""

    kind = "ShiftLogError"

    def __init__(
        self,
        message: str,
        *,
        line: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.line_number = line_number
        super().__init__(self._render())

    def _render(self) -> str:
        rendered = f"{self.kind}: {self.message}"
        if self.line is None:
            return rendered
        location = "" if self.line_number is None else f" (line {self.line_number})"
        return f"{rendered}{location}: {self.line!r}"


class MalformedLine(ShiftLogError):
    """Line does not have the ``[timestamp] text`` shape."""

    kind = "MalformedLine"


class MalformedTimestamp(ShiftLogError):
    """Bracketed text is not a valid ``YYYY-MM-DD HH:MM`` date/time."""

    kind = "MalformedTimestamp"


class UnrecognizedEvent(ShiftLogError):
    """Record text matches none of the shift event patterns."""

    kind = "UnrecognizedEvent"


class NoActiveGuard(ShiftLogError):
    """Sleep or wake record observed before any guard began a shift."""

    kind = "NoActiveGuard"


class DanglingSleep(ShiftLogError):
    """A guard fell asleep and never woke up before their interval had to close."""

    kind = "DanglingSleep"


class UnmatchedWakeUp(ShiftLogError):
    """A guard woke up without a preceding fall-asleep record."""

    kind = "UnmatchedWakeUp"


class InvalidSleepInterval(ShiftLogError):
    """Wake-up minute is not after the fall-asleep minute."""

    kind = "InvalidSleepInterval"


class NoSleepRecorded(ShiftLogError):
    """Ranking query asked of a ledger holding no sleep interval."""

    kind = "NoSleepRecorded"


__all__ = [
    "DanglingSleep",
    "InvalidSleepInterval",
    "MalformedLine",
    "MalformedTimestamp",
    "NoActiveGuard",
    "NoSleepRecorded",
    "ShiftLogError",
    "UnmatchedWakeUp",
    "UnrecognizedEvent",
]
