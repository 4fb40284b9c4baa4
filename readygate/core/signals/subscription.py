from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Callable

Listener = Callable[[], None]

_ids = count(1)


class SubscriptionKind(Enum):
    ONCE = "once"
    EVERY_TIME = "every_time"


@dataclass(eq=False)
class Subscription:
    """
    Handle returned by a signal source.
    Inactive once consumed (ONCE) or unsubscribed.
    """
    listener: Listener
    kind: SubscriptionKind
    source_name: str
    id: int = field(default_factory=lambda: next(_ids))
    active: bool = True

    @property
    def once(self) -> bool:
        return self.kind is SubscriptionKind.ONCE
