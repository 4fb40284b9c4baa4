"""In-process signal sources."""

from readygate.core.signals.one_shot_source import OneShotSource
from readygate.core.signals.recurring_source import RecurringSource
from readygate.core.signals.signal_source import SignalSource
from readygate.core.signals.subscription import Subscription, SubscriptionKind

__all__ = ["OneShotSource", "RecurringSource", "SignalSource", "Subscription", "SubscriptionKind"]
