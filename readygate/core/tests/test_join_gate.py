import logging

import pytest

from readygate.core.domain.exceptions import GateDetachedError
from readygate.core.gate.join_gate import JoinGate
from readygate.core.gate.outcome import Join, Outcome
from readygate.core.observability.counting_observer import CountingObserver
from readygate.core.observability.logging_gate_observer import LoggingGateObserver
from readygate.core.signals.one_shot_source import OneShotSource
from readygate.core.signals.recurring_source import RecurringSource


# --- Outcome / Join ---

def test_outcome_resolves_once_and_runs_callbacks_in_order():
    outcome = Outcome()
    calls = []
    outcome.add_done_callback(lambda: calls.append(1))
    outcome.add_done_callback(lambda: calls.append(2))

    assert outcome.resolve() is True
    assert outcome.resolve() is False
    assert calls == [1, 2]


def test_outcome_callback_added_after_resolution_runs_immediately():
    outcome = Outcome()
    outcome.resolve()
    calls = []
    outcome.add_done_callback(lambda: calls.append("late"))
    assert calls == ["late"]


@pytest.mark.parametrize("order", [("a", "b"), ("b", "a")])
def test_join_waits_for_both(order):
    outcomes = {"a": Outcome("a"), "b": Outcome("b")}
    join = Join(outcomes["a"], outcomes["b"])

    outcomes[order[0]].resolve()
    assert not join.resolved
    outcomes[order[1]].resolve()
    assert join.resolved


# --- JoinGate ---

def _gate():
    one_shot, recurring, observer = OneShotSource(), RecurringSource(), CountingObserver()
    gate = JoinGate(one_shot, recurring, observer).attach()
    return gate, one_shot, recurring, observer


def test_ready_then_recurring():
    gate, one_shot, recurring, observer = _gate()
    one_shot.fire()
    assert gate.ready_outcome.resolved
    observer.verify(0)

    for _ in range(4):
        recurring.fire()

    observer.verify(4)
    assert gate.ready


def test_recurring_then_ready_bursts_every_early_occurrence():
    gate, one_shot, recurring, observer = _gate()
    for _ in range(3):
        recurring.fire()
    observer.verify(0)
    assert gate.pending_credits == 3

    one_shot.fire()
    observer.verify(3)

    recurring.fire()
    observer.verify(4)


def test_latch_holds_after_refire():
    gate, one_shot, recurring, observer = _gate()
    recurring.fire()
    one_shot.fire()
    one_shot.fire()

    assert gate.ready
    observer.verify(1)


def test_detach_then_attach_raises():
    gate, one_shot, recurring, observer = _gate()
    recurring.fire()

    assert gate.detach() == 1
    one_shot.fire()
    observer.verify(0)

    with pytest.raises(GateDetachedError):
        gate.attach()


def test_interrupted_burst_keeps_remaining_credits():
    calls = []

    def ack():
        calls.append(len(calls) + 1)
        if len(calls) == 2:
            raise ValueError("ack 2 failed")

    one_shot, recurring = OneShotSource(), RecurringSource()
    gate = JoinGate(one_shot, recurring, ack).attach()
    for _ in range(3):
        recurring.fire()

    with pytest.raises(ValueError):
        one_shot.fire()

    assert calls == [1, 2]
    assert gate.pending_credits == 1
    assert gate.detach() == 1


def test_detach_is_logged(caplog):
    one_shot, recurring = OneShotSource(), RecurringSource()
    gate = JoinGate(one_shot, recurring, CountingObserver(), gate_observer=LoggingGateObserver()).attach()
    recurring.fire()
    recurring.fire()

    with caplog.at_level(logging.INFO, logger="readygate.gate"):
        gate.detach()

    messages = [record.getMessage() for record in caplog.records]
    assert any('"event_type": "gate_detached"' in m and '"dropped": 2' in m for m in messages)
