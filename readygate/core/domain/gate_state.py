from dataclasses import dataclass


@dataclass
class GateState:
    """
    Monotonic readiness latch.
    Once ready, never reverts.
    """
    ready: bool = False

    def latch(self) -> bool:
        """Sets ready. Returns True only for the first transition."""
        if self.ready:
            return False
        self.ready = True
        return True
