from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from itertools import count
from typing import Any, Callable, Optional

from readygate.core.domain.exceptions import InvalidScheduleError

TimerCallback = Callable[[], None]

_timer_ids = count(1)


@dataclass(eq=False)
class TimerHandle:
    callback: TimerCallback
    due: datetime
    period: Optional[timedelta] = None
    priority: int = 0
    id: int = field(default_factory=lambda: next(_timer_ids))
    cancelled: bool = False
    runs: int = 0
    # Backend specific handle (e.g. asyncio.TimerHandle)
    native: Any = None

    @property
    def periodic(self) -> bool:
        return self.period is not None


class Clock(ABC):
    """
    Abstract clock and timer service.
    All instants are UTC-aware datetimes.
    """

    @abstractmethod
    def now(self) -> datetime:
        pass

    @abstractmethod
    def after(self, delay: timedelta, callback: TimerCallback, priority: int = 0) -> TimerHandle:
        """Runs callback once, delay from now."""
        pass

    @abstractmethod
    def every(self, period: timedelta, callback: TimerCallback, priority: int = 0) -> TimerHandle:
        """Runs callback every period, first one period from now, until cancelled."""
        pass

    @abstractmethod
    def cancel(self, handle: TimerHandle) -> bool:
        pass


def check_delay(delay: timedelta) -> None:
    if delay < timedelta(0):
        raise InvalidScheduleError(f"delay must not be negative, got {delay}")


def check_period(period: timedelta) -> None:
    if period <= timedelta(0):
        raise InvalidScheduleError(f"period must be positive, got {period}")
