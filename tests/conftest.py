"""Shared fixtures: the canonical two-guard shift log used across test modules."""

from __future__ import annotations

import pytest

CANONICAL_LOG = """\
[1518-11-01 00:00] Guard #10 begins shift
[1518-11-01 00:05] falls asleep
[1518-11-01 00:25] wakes up
[1518-11-01 00:30] falls asleep
[1518-11-01 00:55] wakes up
[1518-11-01 23:58] Guard #99 begins shift
[1518-11-02 00:40] falls asleep
[1518-11-02 00:50] wakes up
[1518-11-03 00:05] Guard #10 begins shift
[1518-11-03 00:24] falls asleep
[1518-11-03 00:29] wakes up
[1518-11-04 00:02] Guard #99 begins shift
[1518-11-04 00:36] falls asleep
[1518-11-04 00:46] wakes up
[1518-11-05 00:03] Guard #99 begins shift
[1518-11-05 00:45] falls asleep
[1518-11-05 00:55] wakes up
"""


@pytest.fixture
def canonical_log() -> str:
    return CANONICAL_LOG


@pytest.fixture
def shuffled_canonical_log() -> str:
    lines = CANONICAL_LOG.splitlines()
    # Deterministic permutation: odd lines reversed, then even lines.
    return "\n".join(lines[1::2][::-1] + lines[0::2]) + "\n"
