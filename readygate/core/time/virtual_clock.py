import heapq
from datetime import datetime, timedelta
from itertools import count
from typing import List, Optional, Tuple

from readygate.core.time.clock import Clock, TimerCallback, TimerHandle, check_delay, check_period
from readygate.logging.structured_runtime_logger import StructuredRuntimeLogger


class VirtualClock(Clock):
    """
    Deterministic discrete-event clock for tests and simulations.

    Nothing happens until advance()/advance_to() is called. Due timers run in
    (due, priority, scheduling sequence) order, lower priority first. A
    periodic timer is re-armed before its callback runs, so the re-armed slot
    sorts after anything scheduled earlier for the same instant and priority.
    """

    def __init__(self, start_time: datetime, logger: Optional[StructuredRuntimeLogger] = None):
        if start_time.tzinfo is None:
            raise ValueError("VirtualClock requires timezone-aware datetime")
        self._start_time = start_time
        self._current_time = start_time
        self._queue: List[Tuple[datetime, int, int, TimerHandle]] = []
        self._seq = count()
        self._log = logger or StructuredRuntimeLogger(name="readygate.time")

    def now(self) -> datetime:
        return self._current_time

    def elapsed(self) -> timedelta:
        return self._current_time - self._start_time

    def after(self, delay: timedelta, callback: TimerCallback, priority: int = 0) -> TimerHandle:
        check_delay(delay)
        handle = TimerHandle(callback=callback, due=self._current_time + delay, priority=priority)
        self._push(handle)
        return handle

    def every(self, period: timedelta, callback: TimerCallback, priority: int = 0) -> TimerHandle:
        check_period(period)
        handle = TimerHandle(
            callback=callback,
            due=self._current_time + period,
            period=period,
            priority=priority,
        )
        self._push(handle)
        return handle

    def cancel(self, handle: TimerHandle) -> bool:
        if handle.cancelled:
            return False
        handle.cancelled = True
        self._log.emit(
            "timer_cancelled", clock="virtual", timer_id=handle.id, periodic=handle.periodic, runs=handle.runs
        )
        return True

    def advance(self, delta: timedelta) -> int:
        if delta < timedelta(0):
            raise ValueError("VirtualClock cannot move backwards")
        return self.advance_to(self._current_time + delta)

    def advance_to(self, target: datetime) -> int:
        """Runs every timer due up to and including target. Returns the number of callbacks run."""
        if target < self._current_time:
            raise ValueError("VirtualClock cannot move backwards")
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._current_time = due
            if handle.periodic:
                handle.due = due + handle.period
                self._push(handle)
            else:
                handle.cancelled = True
            handle.runs += 1
            ran += 1
            handle.callback()
        self._current_time = target
        return ran

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[3].cancelled)

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (handle.due, handle.priority, next(self._seq), handle))
