import asyncio
import logging
from datetime import timedelta

import pytest

from readygate.core.domain.exceptions import InvalidScheduleError
from readygate.core.time.asyncio_clock import AsyncioClock


def test_after_and_every_fire_on_the_loop():
    async def scenario():
        clock = AsyncioClock()
        seen = []
        clock.after(timedelta(milliseconds=15), lambda: seen.append("once"))
        interval = clock.every(timedelta(milliseconds=20), lambda: seen.append("tick"))

        await asyncio.sleep(0.07)
        clock.cancel(interval)
        ticks = seen.count("tick")
        await asyncio.sleep(0.05)

        assert seen.count("once") == 1
        assert ticks >= 3
        assert seen.count("tick") == ticks
        assert interval.runs == ticks

    asyncio.run(scenario())


def test_cancelled_timer_never_runs():
    async def scenario():
        clock = AsyncioClock()
        seen = []
        handle = clock.after(timedelta(milliseconds=5), lambda: seen.append("late"))
        assert clock.cancel(handle) is True
        await asyncio.sleep(0.02)
        assert seen == []
        assert clock.cancel(handle) is False

    asyncio.run(scenario())


def test_rejects_invalid_schedules():
    clock = AsyncioClock(loop=asyncio.new_event_loop())
    try:
        with pytest.raises(InvalidScheduleError):
            clock.after(timedelta(seconds=-1), lambda: None)
        with pytest.raises(InvalidScheduleError):
            clock.every(timedelta(0), lambda: None)
    finally:
        clock.loop.close()


def test_cancel_is_logged(caplog):
    async def scenario():
        clock = AsyncioClock()
        handle = clock.every(timedelta(milliseconds=50), lambda: None)
        clock.cancel(handle)

    with caplog.at_level(logging.INFO, logger="readygate.time"):
        asyncio.run(scenario())

    assert any('"timer_cancelled"' in record.getMessage() for record in caplog.records)
