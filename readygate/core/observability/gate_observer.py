from abc import ABC, abstractmethod


class GateObserver(ABC):
    """
    Hook interface for observing gate transitions.
    Implementations must not have side effects on the gate logic.
    """

    @abstractmethod
    def on_ready(self, gate_name: str) -> None:
        """Called once, when the gate latches ready."""
        pass

    @abstractmethod
    def on_forward(self, gate_name: str) -> None:
        """Called for every occurrence forwarded directly while ready."""
        pass

    @abstractmethod
    def on_credit_deferred(self, gate_name: str, pending: int) -> None:
        """Called when an occurrence arrives before readiness and becomes a pending credit."""
        pass

    @abstractmethod
    def on_credits_redeemed(self, gate_name: str, count: int) -> None:
        """Called after pending credits were forwarded as a burst."""
        pass

    @abstractmethod
    def on_detached(self, gate_name: str, dropped: int) -> None:
        """Called when the gate unsubscribes, with the number of credits it dropped."""
        pass


class NullGateObserver(GateObserver):
    def on_ready(self, gate_name: str) -> None:
        pass

    def on_forward(self, gate_name: str) -> None:
        pass

    def on_credit_deferred(self, gate_name: str, pending: int) -> None:
        pass

    def on_credits_redeemed(self, gate_name: str, count: int) -> None:
        pass

    def on_detached(self, gate_name: str, dropped: int) -> None:
        pass
