"""
Unit and property tests for BoundedLog

The log must never exceed its capacity and must always expose the most
recently pushed entries first.
"""

import pytest
from hypothesis import given, settings, strategies as st

from bloodchain.storage.bounded_log import BoundedLog, DEFAULT_CAPACITY


def test_default_capacity_is_1000():
    assert BoundedLog().capacity == DEFAULT_CAPACITY == 1000


def test_invalid_capacity():
    with pytest.raises(ValueError):
        BoundedLog(0)


def test_newest_first():
    log = BoundedLog(10)
    for i in range(3):
        log.push(i)

    assert log.latest() == [2, 1, 0]
    assert list(log) == [2, 1, 0]
    assert len(log) == 3


def test_overflow_drops_oldest():
    log = BoundedLog(1000)
    for i in range(1005):
        log.push(i)

    entries = log.latest()
    assert len(entries) == 1000
    assert entries[0] == 1004
    assert entries[-1] == 5


def test_limit_and_predicate():
    log = BoundedLog(10)
    for i in range(10):
        log.push(i)

    assert log.latest(3) == [9, 8, 7]
    assert log.latest(3, lambda entry: entry % 2 == 0) == [8, 6, 4]
    assert log.latest(0) == []
    assert log.latest(100) == list(range(9, -1, -1))


def test_clear():
    log = BoundedLog(5)
    log.push("a")
    log.clear()
    assert log.latest() == []


@given(
    capacity=st.integers(min_value=1, max_value=50),
    entries=st.lists(st.integers(), max_size=200),
)
@settings(max_examples=100)
def test_log_keeps_newest_entries_within_capacity(capacity, entries):
    """For any sequence of pushes the log holds the last `capacity` entries, newest first"""
    log = BoundedLog(capacity)
    for entry in entries:
        log.push(entry)

    stored = log.latest()
    assert len(stored) <= capacity
    assert stored == list(reversed(entries))[:capacity]
