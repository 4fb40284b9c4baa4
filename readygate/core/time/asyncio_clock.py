import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from readygate.core.time.clock import Clock, TimerCallback, TimerHandle, check_delay, check_period
from readygate.logging.structured_runtime_logger import StructuredRuntimeLogger


class AsyncioClock(Clock):
    """
    Production clock backed by an asyncio event loop.
    Always returns UTC-aware datetime.

    Same-instant ordering is left to the event loop; priority is recorded on
    the handle but not honored.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        logger: Optional[StructuredRuntimeLogger] = None,
    ):
        self._loop = loop
        self._log = logger or StructuredRuntimeLogger(name="readygate.time")

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def after(self, delay: timedelta, callback: TimerCallback, priority: int = 0) -> TimerHandle:
        check_delay(delay)
        handle = TimerHandle(callback=callback, due=self.now() + delay, priority=priority)

        def _run() -> None:
            handle.cancelled = True
            handle.runs += 1
            callback()

        handle.native = self.loop.call_later(delay.total_seconds(), _run)
        return handle

    def every(self, period: timedelta, callback: TimerCallback, priority: int = 0) -> TimerHandle:
        check_period(period)
        handle = TimerHandle(callback=callback, due=self.now() + period, period=period, priority=priority)
        seconds = period.total_seconds()
        start = self.loop.time()

        def _tick() -> None:
            if handle.cancelled:
                return
            handle.runs += 1
            # Re-armed from the first start time so the schedule does not drift
            handle.native = self.loop.call_at(start + seconds * (handle.runs + 1), _tick)
            handle.due = handle.due + period
            callback()

        handle.native = self.loop.call_at(start + seconds, _tick)
        return handle

    def cancel(self, handle: TimerHandle) -> bool:
        if handle.cancelled:
            return False
        handle.cancelled = True
        if handle.native is not None:
            handle.native.cancel()
        self._log.emit(
            "timer_cancelled", clock="asyncio", timer_id=handle.id, periodic=handle.periodic, runs=handle.runs
        )
        return True
