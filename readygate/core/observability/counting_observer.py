from datetime import datetime
from typing import List, Optional

from readygate.core.domain.exceptions import ObservationMismatch
from readygate.core.time.clock import Clock


class CountingObserver:
    """
    Zero-argument callable that records how many times, and when, it was invoked.
    """

    def __init__(self, name: str = "acknowledgement", clock: Optional[Clock] = None):
        self.name = name
        self.clock = clock
        self.call_count = 0
        self.calls_at: List[datetime] = []

    def __call__(self) -> None:
        self.call_count += 1
        if self.clock is not None:
            self.calls_at.append(self.clock.now())

    def verify(self, times: int) -> None:
        if self.call_count != times:
            raise ObservationMismatch(times, self.call_count, label=self.name)

    def reset(self) -> None:
        self.call_count = 0
        self.calls_at = []


class NullObserver:
    """
    Default no-op observer.
    """
    def __call__(self) -> None:
        pass
