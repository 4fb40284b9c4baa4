"""Clock and timer services."""

from readygate.core.time.asyncio_clock import AsyncioClock
from readygate.core.time.clock import Clock, TimerHandle
from readygate.core.time.virtual_clock import VirtualClock

__all__ = ["AsyncioClock", "Clock", "TimerHandle", "VirtualClock"]
