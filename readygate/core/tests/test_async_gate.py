import asyncio
import logging

import pytest

from readygate.core.domain.exceptions import GateDetachedError
from readygate.core.gate.async_gate import AsyncReadyGate, wait_for
from readygate.core.observability.counting_observer import CountingObserver
from readygate.core.observability.logging_gate_observer import LoggingGateObserver
from readygate.core.signals.one_shot_source import OneShotSource
from readygate.core.signals.recurring_source import RecurringSource


async def _settle(iterations: int = 5) -> None:
    for _ in range(iterations):
        await asyncio.sleep(0)


def test_wait_for_resolves_on_next_fire():
    async def scenario():
        source = RecurringSource()
        future = wait_for(source)
        assert not future.done()
        source.fire()
        assert await future is True
        assert source.listener_count == 0

    asyncio.run(scenario())


def test_cancelled_wait_releases_subscription():
    async def scenario():
        source = OneShotSource()
        future = wait_for(source)
        future.cancel()
        await _settle()
        assert source.listener_count == 0

    asyncio.run(scenario())


def test_ready_then_recurring():
    async def scenario():
        one_shot, recurring, observer = OneShotSource(), RecurringSource(), CountingObserver()
        gate = AsyncReadyGate(one_shot, recurring, observer)
        gate.start()

        one_shot.fire()
        await _settle()
        observer.verify(0)

        for _ in range(4):
            recurring.fire()
            await _settle()

        observer.verify(4)
        assert gate.ready
        await gate.stop()

    asyncio.run(scenario())


def test_recurring_then_ready_burst():
    async def scenario():
        one_shot, recurring, observer = OneShotSource(), RecurringSource(), CountingObserver()
        gate = AsyncReadyGate(one_shot, recurring, observer)
        gate.start()

        for _ in range(3):
            recurring.fire()
        await _settle()
        observer.verify(0)
        assert gate.pending_credits == 3

        one_shot.fire()
        await gate.wait_until_ready()
        observer.verify(3)

        recurring.fire()
        observer.verify(4)
        await gate.stop()

    asyncio.run(scenario())


def test_occurrence_between_fire_and_join_is_credited():
    async def scenario():
        one_shot, recurring, observer = OneShotSource(), RecurringSource(), CountingObserver()
        gate = AsyncReadyGate(one_shot, recurring, observer)
        gate.start()

        recurring.fire()
        one_shot.fire()
        recurring.fire()
        assert not gate.ready

        await gate.wait_until_ready()
        observer.verify(2)
        await gate.stop()

    asyncio.run(scenario())


def test_stop_drops_credits_and_cannot_restart():
    async def scenario():
        one_shot, recurring, observer = OneShotSource(), RecurringSource(), CountingObserver()
        gate = AsyncReadyGate(one_shot, recurring, observer)
        gate.start()
        recurring.fire()
        recurring.fire()

        assert await gate.stop() == 2
        one_shot.fire()
        recurring.fire()
        await _settle()

        observer.verify(0)
        assert recurring.listener_count == 0
        assert one_shot.listener_count == 0
        with pytest.raises(GateDetachedError):
            gate.start()

    asyncio.run(scenario())


def test_observer_failure_surfaces_from_waiters_and_stop():
    calls = []

    def ack():
        calls.append("ack")
        raise ValueError("ack failed")

    async def scenario():
        one_shot, recurring = OneShotSource(), RecurringSource()
        gate = AsyncReadyGate(one_shot, recurring, ack)
        gate.start()
        for _ in range(3):
            recurring.fire()
        one_shot.fire()

        with pytest.raises(ValueError, match="ack failed"):
            await gate.wait_until_ready()
        assert calls == ["ack"]
        assert gate.pending_credits == 2

        with pytest.raises(ValueError, match="ack failed"):
            await gate.stop()
        assert gate.pending_credits == 0

    asyncio.run(scenario())


def test_stop_is_logged(caplog):
    async def scenario():
        one_shot, recurring = OneShotSource(), RecurringSource()
        gate = AsyncReadyGate(one_shot, recurring, CountingObserver(), gate_observer=LoggingGateObserver())
        gate.start()
        recurring.fire()
        await gate.stop()

    with caplog.at_level(logging.INFO, logger="readygate.gate"):
        asyncio.run(scenario())

    messages = [record.getMessage() for record in caplog.records]
    assert any('"event_type": "gate_detached"' in m and '"dropped": 1' in m for m in messages)
