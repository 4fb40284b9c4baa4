class InvalidScheduleError(ValueError):
    """Raised when a timer is scheduled with a negative delay or a non-positive period."""
    pass

class ObservationMismatch(AssertionError):
    """Raised when an observer was not invoked the expected number of times."""

    def __init__(self, expected: int, actual: int, label: str = "observer"):
        super().__init__(f"{label} expected {expected} call(s), got {actual}")
        self.expected = expected
        self.actual = actual
        self.label = label

class GateDetachedError(RuntimeError):
    """Raised when a gate is started again after it was stopped."""
    pass
