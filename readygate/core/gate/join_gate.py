from typing import Callable, Optional

from readygate.core.domain.exceptions import GateDetachedError
from readygate.core.domain.gate_state import GateState
from readygate.core.gate.outcome import Join, Outcome
from readygate.core.observability.gate_observer import GateObserver, NullGateObserver
from readygate.core.signals.signal_source import SignalSource
from readygate.core.signals.subscription import Subscription


class JoinGate:
    """
    Two-outcome join: waits for the one-shot fire and the first recurring
    occurrence, then switches to forwarding mode.

    Occurrences seen before the join completes are counted as pending credits
    and redeemed as a burst when it does, so the observable behaviour matches
    ReadyGate.
    """

    def __init__(
        self,
        one_shot: SignalSource,
        recurring: SignalSource,
        observer: Callable[[], None],
        name: str = "join_gate",
        gate_observer: Optional[GateObserver] = None,
    ):
        self.one_shot = one_shot
        self.recurring = recurring
        self.observer = observer
        self.name = name
        self.gate_observer = gate_observer or NullGateObserver()
        self.state = GateState()
        self.forwarded = 0
        self.ready_outcome = Outcome("ready")
        self.recurring_outcome = Outcome("first_recurring")
        self.joined = Join(self.ready_outcome, self.recurring_outcome)
        self._pending = 0
        self._ready_subscription: Optional[Subscription] = None
        self._recurring_subscription: Optional[Subscription] = None
        self._stopped = False

    @property
    def ready(self) -> bool:
        return self.state.ready

    @property
    def pending_credits(self) -> int:
        return self._pending

    def attach(self) -> "JoinGate":
        if self._stopped:
            raise GateDetachedError(f"{self.name} was detached and cannot be reattached")
        if self._recurring_subscription is not None:
            return self
        self._ready_subscription = self.one_shot.subscribe_once(self.ready_outcome.resolve)
        self._recurring_subscription = self.recurring.subscribe_every_time(self._on_recurring)
        self.joined.add_done_callback(self._on_joined)
        return self

    def detach(self) -> int:
        """Unsubscribes from both sources. Returns the number of dropped credits."""
        self._stopped = True
        if self._ready_subscription is not None:
            self.one_shot.unsubscribe(self._ready_subscription)
            self._ready_subscription = None
        if self._recurring_subscription is not None:
            self.recurring.unsubscribe(self._recurring_subscription)
            self._recurring_subscription = None
        dropped, self._pending = self._pending, 0
        self.gate_observer.on_detached(self.name, dropped)
        return dropped

    def _on_recurring(self) -> None:
        if self.state.ready:
            self._forward()
            self.gate_observer.on_forward(self.name)
            return
        self._pending += 1
        self.gate_observer.on_credit_deferred(self.name, self._pending)
        self.recurring_outcome.resolve()

    def _on_joined(self) -> None:
        if self._stopped:
            return
        if self.state.latch():
            self.gate_observer.on_ready(self.name)
        burst = 0
        while self._pending:
            self._pending -= 1
            burst += 1
            self._forward()
        self.gate_observer.on_credits_redeemed(self.name, burst)

    def _forward(self) -> None:
        self.forwarded += 1
        self.observer()
