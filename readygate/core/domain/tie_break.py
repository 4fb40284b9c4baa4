from enum import Enum
from typing import Tuple


class TieBreakPolicy(Enum):
    """
    Ordering of a one-shot fire and a recurring occurrence scheduled at the same instant.

    ONE_SHOT_FIRST: the latch is set first, so the coinciding occurrence is forwarded directly.
    RECURRING_FIRST: the occurrence is seen while not ready and is forwarded via burst credit.
    SCHEDULING_ORDER: whichever timer was scheduled first runs first.
    """
    ONE_SHOT_FIRST = "one_shot_first"
    RECURRING_FIRST = "recurring_first"
    SCHEDULING_ORDER = "scheduling_order"

    def priorities(self) -> Tuple[int, int]:
        """(one_shot_priority, recurring_priority); lower runs first at equal instants."""
        if self is TieBreakPolicy.ONE_SHOT_FIRST:
            return (0, 1)
        if self is TieBreakPolicy.RECURRING_FIRST:
            return (1, 0)
        return (0, 0)
