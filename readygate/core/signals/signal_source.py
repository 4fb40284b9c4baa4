from typing import List, Optional

from readygate.core.signals.subscription import Listener, Subscription, SubscriptionKind
from readygate.logging.structured_runtime_logger import StructuredRuntimeLogger


class SignalSource:
    """
    Owns an ordered list of subscriptions and delivers "this occurred" notifications.

    Delivery covers the listeners registered when fire() is called, in
    registration order. ONCE subscriptions are consumed before their listener
    runs, so listeners added during a delivery wait for the next fire().
    Listener exceptions propagate to the caller of fire().
    """

    def __init__(self, name: str = "signal", logger: Optional[StructuredRuntimeLogger] = None):
        self.name = name
        self._subscriptions: List[Subscription] = []
        self._log = logger or StructuredRuntimeLogger(name="readygate.signals")

    def subscribe_every_time(self, listener: Listener) -> Subscription:
        return self._subscribe(listener, SubscriptionKind.EVERY_TIME)

    def subscribe_once(self, listener: Listener) -> Subscription:
        return self._subscribe(listener, SubscriptionKind.ONCE)

    def unsubscribe(self, subscription: Subscription) -> bool:
        if not subscription.active:
            return False
        subscription.active = False
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            return False
        return True

    def fire(self) -> int:
        delivered = 0
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            if subscription.once:
                subscription.active = False
                self._subscriptions.remove(subscription)
            delivered += 1
            subscription.listener()
        return delivered

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def _subscribe(self, listener: Listener, kind: SubscriptionKind) -> Subscription:
        subscription = Subscription(listener=listener, kind=kind, source_name=self.name)
        self._subscriptions.append(subscription)
        return subscription

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, listeners={self.listener_count})"
