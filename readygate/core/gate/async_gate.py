import asyncio
from typing import Callable, Optional, Tuple

from readygate.core.domain.exceptions import GateDetachedError
from readygate.core.domain.gate_state import GateState
from readygate.core.observability.gate_observer import GateObserver, NullGateObserver
from readygate.core.signals.signal_source import SignalSource
from readygate.core.signals.subscription import Subscription


def wait_for(source: SignalSource, loop: Optional[asyncio.AbstractEventLoop] = None) -> asyncio.Future:
    """Future resolved by the next fire() of source. Cancelling it drops the subscription."""
    loop = loop or asyncio.get_running_loop()
    future = loop.create_future()

    def _resolve() -> None:
        if not future.done():
            future.set_result(True)

    subscription = source.subscribe_once(_resolve)

    def _cleanup(done: asyncio.Future) -> None:
        if done.cancelled():
            source.unsubscribe(subscription)

    future.add_done_callback(_cleanup)
    return future


class AsyncReadyGate:
    """
    async/await rendition of the gate.

    start() subscribes synchronously, so no occurrence is missed before the
    task runs. The join completes on a later loop iteration than the one-shot
    fire; occurrences arriving in between are still counted as credits.
    """

    def __init__(
        self,
        one_shot: SignalSource,
        recurring: SignalSource,
        observer: Callable[[], None],
        name: str = "async_gate",
        gate_observer: Optional[GateObserver] = None,
    ):
        self.one_shot = one_shot
        self.recurring = recurring
        self.observer = observer
        self.name = name
        self.gate_observer = gate_observer or NullGateObserver()
        self.state = GateState()
        self.forwarded = 0
        self._pending = 0
        self._subscription: Optional[Subscription] = None
        self._task: Optional[asyncio.Task] = None
        self._waits: Tuple[asyncio.Future, ...] = ()
        self._ready: Optional[asyncio.Future] = None
        self._stopped = False

    @property
    def ready(self) -> bool:
        return self.state.ready

    @property
    def pending_credits(self) -> int:
        return self._pending

    def start(self) -> asyncio.Task:
        if self._stopped:
            raise GateDetachedError(f"{self.name} was stopped and cannot be restarted")
        if self._task is not None:
            return self._task
        self._ready = asyncio.get_running_loop().create_future()
        self._waits = (wait_for(self.one_shot), wait_for(self.recurring))
        self._subscription = self.recurring.subscribe_every_time(self._on_recurring)
        self._task = asyncio.get_running_loop().create_task(self.run(*self._waits))
        return self._task

    async def run(self, ready: asyncio.Future, first_recurring: asyncio.Future) -> None:
        try:
            await asyncio.gather(ready, first_recurring)
            if self.state.latch():
                self.gate_observer.on_ready(self.name)
            burst = 0
            while self._pending:
                self._pending -= 1
                burst += 1
                self._forward()
            self.gate_observer.on_credits_redeemed(self.name, burst)
        except asyncio.CancelledError:
            self._ready.cancel()
            raise
        except Exception as exc:
            # Waiters see the observer failure; stop() re-raises it from the task.
            if not self._ready.done():
                self._ready.set_exception(exc)
            raise
        self._ready.set_result(None)

    async def wait_until_ready(self) -> None:
        """Returns once forwarding has begun; raises the observer failure if the burst failed."""
        if self._ready is None:
            raise RuntimeError(f"{self.name} has not been started")
        await asyncio.shield(self._ready)

    async def stop(self) -> int:
        """
        Cancels the join and unsubscribes. Returns the number of dropped credits.
        An observer failure raised inside the join task is re-raised here.
        """
        self._stopped = True
        if self._subscription is not None:
            self.recurring.unsubscribe(self._subscription)
            self._subscription = None
        # A task cancelled before its first step never reaches gather, so release the waits here.
        for waiting in self._waits:
            waiting.cancel()
        failure: Optional[BaseException] = None
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
                try:
                    await self._task
                except asyncio.CancelledError:
                    pass
            elif not self._task.cancelled():
                failure = self._task.exception()
        if self._ready is not None:
            if self._ready.done() and not self._ready.cancelled():
                # Marks the failure as retrieved
                self._ready.exception()
            self._ready.cancel()
        dropped, self._pending = self._pending, 0
        self.gate_observer.on_detached(self.name, dropped)
        if failure is not None:
            raise failure
        return dropped

    def _on_recurring(self) -> None:
        if self.state.ready:
            self._forward()
            self.gate_observer.on_forward(self.name)
            return
        self._pending += 1
        self.gate_observer.on_credit_deferred(self.name, self._pending)

    def _forward(self) -> None:
        self.forwarded += 1
        self.observer()
