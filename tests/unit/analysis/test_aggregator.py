"""Unit tests for sleep interval aggregation and both ranking queries."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from shiftwatch.analysis import (
    build_ledger,
    classify_records,
    most_frequent_guard_minute,
    peak_minute,
    sleepiest_guard,
    summarize,
)
from shiftwatch.domain import (
    DanglingSleep,
    FallAsleep,
    GuardedEvent,
    InvalidSleepInterval,
    NoSleepRecorded,
    ShiftStart,
    SleepInterval,
    SleepLedger,
    UnmatchedWakeUp,
    WakeUp,
)
from shiftwatch.ingestion import parse_records, sort_records


def _events(text: str) -> tuple[GuardedEvent, ...]:
    return classify_records(sort_records(parse_records(text))).events


def _at(day: int, minute: int) -> datetime:
    return datetime(1518, 11, day, 0, minute)


@pytest.mark.unit
def test_interval_five_to_twenty_five_fills_buckets_five_through_twenty_four() -> None:
    ledger = build_ledger(
        _events(
            "[1518-11-01 00:00] Guard #10 begins shift\n"
            "[1518-11-01 00:05] falls asleep\n"
            "[1518-11-01 00:25] wakes up\n"
        )
    )

    assert ledger.intervals_for("10") == (SleepInterval("10", 5, 25),)
    assert ledger.total_minutes("10") == 20
    histogram = ledger.minute_histogram("10")
    assert [minute for minute, count in enumerate(histogram) if count] == list(range(5, 25))
    assert set(histogram) == {0, 1}


@pytest.mark.unit
def test_canonical_ledger(canonical_log: str) -> None:
    ledger = build_ledger(_events(canonical_log))

    assert ledger.guard_ids == ("10", "99")
    assert ledger.intervals_for("10") == (
        SleepInterval("10", 5, 25),
        SleepInterval("10", 30, 55),
        SleepInterval("10", 24, 29),
    )
    assert ledger.total_minutes("10") == 50
    assert ledger.total_minutes("99") == 30
    assert ledger.minute_histogram("99")[45] == 3


@pytest.mark.unit
def test_canonical_queries(canonical_log: str) -> None:
    summary = summarize(_events(canonical_log))

    assert summary.sleepiest_guard.pair == ("10", 24)
    assert summary.sleepiest_guard.total_minutes == 50
    assert summary.sleepiest_guard.minute_count == 2
    assert summary.guard_minute.pair == ("99", 45)
    assert summary.guard_minute.count == 3


@pytest.mark.unit
def test_guard_without_sleep_still_gets_ledger_entry() -> None:
    ledger = build_ledger(
        _events(
            "[1518-11-01 00:00] Guard #7 begins shift\n"
            "[1518-11-02 00:00] Guard #10 begins shift\n"
            "[1518-11-02 00:10] falls asleep\n"
            "[1518-11-02 00:11] wakes up\n"
        )
    )

    assert ledger.guard_ids == ("7", "10")
    assert ledger.intervals_for("7") == ()
    assert sleepiest_guard(ledger).guard_id == "10"


@pytest.mark.unit
def test_sleepiest_guard_tie_goes_to_lowest_numeric_id() -> None:
    ledger = SleepLedger(
        {
            "100": [SleepInterval("100", 0, 10)],
            "20": [SleepInterval("20", 30, 40)],
            "3": [SleepInterval("3", 50, 55)],
        }
    )

    answer = sleepiest_guard(ledger)

    assert answer.guard_id == "20"
    assert answer.minute == 30


@pytest.mark.unit
def test_most_frequent_minute_ties_go_to_lowest_guard_then_earliest_minute() -> None:
    ledger = SleepLedger(
        {
            "99": [SleepInterval("99", 10, 12), SleepInterval("99", 10, 12)],
            "12": [SleepInterval("12", 40, 42), SleepInterval("12", 30, 41)],
        }
    )

    answer = most_frequent_guard_minute(ledger)

    assert answer.pair == ("12", 40)
    assert answer.count == 2


@pytest.mark.unit
def test_peak_minute_prefers_earliest_maximum() -> None:
    assert peak_minute([0, 3, 1, 3]) == 1
    assert peak_minute([0] * 60) == 0
    with pytest.raises(ValueError, match="must not be empty"):
        peak_minute([])


@pytest.mark.unit
def test_queries_fail_when_nobody_slept() -> None:
    ledger = build_ledger(_events("[1518-11-01 00:00] Guard #10 begins shift\n"))

    with pytest.raises(NoSleepRecorded):
        sleepiest_guard(ledger)
    with pytest.raises(NoSleepRecorded):
        most_frequent_guard_minute(ledger)
    with pytest.raises(NoSleepRecorded):
        most_frequent_guard_minute(SleepLedger({}))


@pytest.mark.unit
def test_dangling_sleep_at_end_of_input_fails() -> None:
    with pytest.raises(DanglingSleep, match="still asleep at end of input") as excinfo:
        build_ledger(
            _events(
                "[1518-11-01 00:00] Guard #10 begins shift\n"
                "[1518-11-01 00:05] falls asleep\n"
            )
        )

    assert excinfo.value.line_number == 2
    assert excinfo.value.line == "[1518-11-01 00:05] falls asleep"


@pytest.mark.unit
def test_dangling_sleep_when_same_guard_starts_new_shift() -> None:
    with pytest.raises(DanglingSleep, match="begins a new shift while still asleep"):
        build_ledger(
            _events(
                "[1518-11-01 00:00] Guard #10 begins shift\n"
                "[1518-11-01 00:05] falls asleep\n"
                "[1518-11-02 00:00] Guard #10 begins shift\n"
            )
        )


@pytest.mark.unit
def test_second_fall_asleep_without_wake_fails() -> None:
    with pytest.raises(DanglingSleep, match="falls asleep again"):
        build_ledger(
            _events(
                "[1518-11-01 00:00] Guard #10 begins shift\n"
                "[1518-11-01 00:05] falls asleep\n"
                "[1518-11-01 00:07] falls asleep\n"
                "[1518-11-01 00:09] wakes up\n"
            )
        )


@pytest.mark.unit
def test_wake_without_sleep_fails() -> None:
    with pytest.raises(UnmatchedWakeUp) as excinfo:
        build_ledger(
            _events("[1518-11-01 00:00] Guard #10 begins shift\n[1518-11-01 00:05] wakes up\n")
        )

    assert excinfo.value.line_number == 2


@pytest.mark.unit
def test_wake_minute_not_after_sleep_minute_fails() -> None:
    events = (
        GuardedEvent(ShiftStart(_at(1, 0), "10"), "10"),
        GuardedEvent(FallAsleep(_at(1, 50)), "10"),
        GuardedEvent(WakeUp(datetime(1518, 11, 1, 1, 10)), "10"),
    )

    with pytest.raises(InvalidSleepInterval, match="wakes at minute 10"):
        build_ledger(events)


@st.composite
def _night(draw: st.DrawFn, guard_id: str, day: int) -> tuple[list[GuardedEvent], int]:
    cuts = sorted(draw(st.sets(st.integers(min_value=0, max_value=59), max_size=12)))
    if len(cuts) % 2:
        cuts = cuts[:-1]
    events = [GuardedEvent(ShiftStart(_at(day, 0) - timedelta(minutes=1), guard_id), guard_id)]
    slept = 0
    for start, end in zip(cuts[0::2], cuts[1::2], strict=True):
        events.append(GuardedEvent(FallAsleep(_at(day, start)), guard_id))
        events.append(GuardedEvent(WakeUp(_at(day, end)), guard_id))
        slept += end - start
    return events, slept


@st.composite
def _shift_logs(draw: st.DrawFn) -> tuple[list[GuardedEvent], dict[str, int]]:
    guard_ids = draw(st.lists(st.sampled_from(["10", "99", "1234"]), min_size=1, max_size=8))
    events: list[GuardedEvent] = []
    expected: dict[str, int] = {}
    for day, guard_id in enumerate(guard_ids, start=1):
        night_events, slept = draw(_night(guard_id, day))
        events.extend(night_events)
        expected[guard_id] = expected.get(guard_id, 0) + slept
    return events, expected


@pytest.mark.unit
@settings(max_examples=100, deadline=None)
@given(_shift_logs())
def test_total_minutes_equal_paired_sleep_wake_spans(
    log: tuple[list[GuardedEvent], dict[str, int]],
) -> None:
    events, expected = log

    ledger = build_ledger(events)

    assert set(ledger.guard_ids) == set(expected)
    for guard_id, minutes in expected.items():
        assert ledger.total_minutes(guard_id) == minutes
        assert sum(ledger.minute_histogram(guard_id)) == minutes
