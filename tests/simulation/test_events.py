"""Tests for the bounded event log."""

from datetime import datetime

from settlement_sim.simulation.events import EventLog


def test_newest_first():
    log = EventLog()
    log.record("first")
    log.record("second")
    assert log.latest().endswith("second")
    assert log[1].endswith("first")


def test_oldest_dropped_past_limit():
    log = EventLog()
    for i in range(250):
        log.record(f"entry {i}")
    assert len(log) == 200
    assert log[0].endswith("entry 249")
    assert log[-1].endswith("entry 50")


def test_entries_carry_time_prefix():
    log = EventLog()
    entry = log.record("Built House", when=datetime(2024, 1, 1, 9, 5, 3))
    assert entry == "[09:05:03] Built House"


def test_restore_from_list_keeps_order_and_limit():
    entries = [f"e{i}" for i in range(300)]
    log = EventLog(entries, limit=200)
    assert len(log) == 200
    assert log[0] == "e0"
    assert log[-1] == "e199"
