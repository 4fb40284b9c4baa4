import logging
from datetime import datetime, timedelta, timezone

import pytest

from readygate.core.domain.exceptions import ObservationMismatch
from readygate.core.domain.gate_state import GateState
from readygate.core.observability.counting_observer import CountingObserver, NullObserver
from readygate.core.observability.logging_gate_observer import LoggingGateObserver
from readygate.core.time.virtual_clock import VirtualClock


def test_counting_observer_verifies_exact_count():
    observer = CountingObserver()
    observer()
    observer()

    observer.verify(2)
    with pytest.raises(ObservationMismatch) as excinfo:
        observer.verify(4)
    assert excinfo.value.expected == 4
    assert excinfo.value.actual == 2


def test_counting_observer_records_instants():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    clock = VirtualClock(start)
    observer = CountingObserver(clock=clock)

    clock.after(timedelta(milliseconds=100), observer)
    clock.advance(timedelta(milliseconds=200))

    assert observer.calls_at == [start + timedelta(milliseconds=100)]
    observer.reset()
    assert observer.call_count == 0


def test_null_observer_is_callable():
    NullObserver()()


def test_gate_state_latches_once():
    state = GateState()
    assert state.latch() is True
    assert state.latch() is False
    assert state.ready


def test_logging_gate_observer_emits_json_lines(caplog):
    hooks = LoggingGateObserver()
    with caplog.at_level(logging.INFO, logger="readygate.gate"):
        hooks.on_ready("g")
        hooks.on_credits_redeemed("g", 3)
        hooks.on_forward("g")

    messages = [record.getMessage() for record in caplog.records]
    assert any('"event_type": "gate_ready"' in m for m in messages)
    assert any('"count": 3' in m for m in messages)
    # Direct forwards are DEBUG only
    assert not any("gate_forward" in m for m in messages)
