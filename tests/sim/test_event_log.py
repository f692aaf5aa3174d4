"""Tests for the bounded combat event log."""

import pytest

from ragequit.sim.event_log import EventLog, LogKind


class TestEventLog:
    def test_keeps_most_recent(self):
        log = EventLog(capacity=3)
        for i in range(5):
            log.add(LogKind.INFO, f"event {i}")
        assert [e.message for e in log.entries()] == ["event 2", "event 3", "event 4"]
        assert len(log) == 3

    def test_sequence_survives_clear(self):
        log = EventLog()
        first = log.add(LogKind.DAMAGE, "hit")
        log.clear()
        second = log.add(LogKind.HEAL, "heal")
        assert second.seq > first.seq
        assert log.since(first.seq) == [second]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            EventLog(capacity=0)
