from typing import Callable, List, Optional

from readygate.core.domain.gate_state import GateState
from readygate.core.observability.gate_observer import GateObserver, NullGateObserver
from readygate.core.signals.signal_source import SignalSource
from readygate.core.signals.subscription import Subscription


class ReadyGate:
    """
    Forwards recurring occurrences to the observer once the one-shot source has fired.

    Occurrences seen before readiness each register a fire-once listener on the
    one-shot source. When it fires, every pending listener latches the gate and
    calls the observer once, so K early occurrences become a burst of K calls.

    The gate does not own either source; they may have other listeners.
    """

    def __init__(
        self,
        one_shot: SignalSource,
        recurring: SignalSource,
        observer: Callable[[], None],
        name: str = "ready_gate",
        gate_observer: Optional[GateObserver] = None,
    ):
        self.one_shot = one_shot
        self.recurring = recurring
        self.observer = observer
        self.name = name
        self.gate_observer = gate_observer or NullGateObserver()
        self.state = GateState()
        self.forwarded = 0
        self._ready_subscription: Optional[Subscription] = None
        self._recurring_subscription: Optional[Subscription] = None
        self._credits: List[Subscription] = []
        self._redeemed_in_burst = 0

    @property
    def ready(self) -> bool:
        return self.state.ready

    @property
    def pending_credits(self) -> int:
        return sum(1 for credit in self._credits if credit.active)

    @property
    def attached(self) -> bool:
        return self._recurring_subscription is not None

    def attach(self) -> "ReadyGate":
        if self.attached:
            return self
        # Registered before any credit listener, so the latch is set before credits are redeemed.
        self._ready_subscription = self.one_shot.subscribe_every_time(self.on_one_shot_fire)
        self._recurring_subscription = self.recurring.subscribe_every_time(self.on_recurring_fire)
        return self

    def detach(self) -> int:
        """Unsubscribes from both sources and drops pending credits. Returns the number dropped."""
        if self._ready_subscription is not None:
            self.one_shot.unsubscribe(self._ready_subscription)
            self._ready_subscription = None
        if self._recurring_subscription is not None:
            self.recurring.unsubscribe(self._recurring_subscription)
            self._recurring_subscription = None
        dropped = 0
        for credit in self._credits:
            if self.one_shot.unsubscribe(credit):
                dropped += 1
        self._credits = []
        self.gate_observer.on_detached(self.name, dropped)
        return dropped

    def on_recurring_fire(self) -> None:
        if self.state.ready:
            self._forward()
            self.gate_observer.on_forward(self.name)
            return
        self._credits = [credit for credit in self._credits if credit.active]
        self._credits.append(self.one_shot.subscribe_once(self._redeem_credit))
        self.gate_observer.on_credit_deferred(self.name, len(self._credits))

    def on_one_shot_fire(self) -> None:
        self._latch()

    def _redeem_credit(self) -> None:
        self._latch()
        self._redeemed_in_burst += 1
        try:
            self._forward()
        except Exception:
            # An interrupted burst restarts its tally; the remaining credits stay pending.
            self._redeemed_in_burst = 0
            raise
        if self.pending_credits == 0:
            self.gate_observer.on_credits_redeemed(self.name, self._redeemed_in_burst)
            self._redeemed_in_burst = 0

    def _latch(self) -> None:
        if self.state.latch():
            self.gate_observer.on_ready(self.name)

    def _forward(self) -> None:
        self.forwarded += 1
        self.observer()
