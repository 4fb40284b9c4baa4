from typing import Callable, List

DoneCallback = Callable[[], None]


class Outcome:
    """
    Single-occurrence result holder.
    Callbacks run in registration order; resolving twice is a no-op.
    """

    def __init__(self, name: str = "outcome"):
        self.name = name
        self._resolved = False
        self._callbacks: List[DoneCallback] = []

    @property
    def resolved(self) -> bool:
        return self._resolved

    def resolve(self) -> bool:
        if self._resolved:
            return False
        self._resolved = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        return True

    def add_done_callback(self, callback: DoneCallback) -> None:
        """Runs callback on resolution, or immediately if already resolved."""
        if self._resolved:
            callback()
        else:
            self._callbacks.append(callback)

    def __repr__(self) -> str:
        return f"Outcome(name={self.name!r}, resolved={self._resolved})"


class Join(Outcome):
    """Resolves once both inputs have resolved, whatever their order."""

    def __init__(self, first: Outcome, second: Outcome, name: str = "join"):
        super().__init__(name=name)
        self.first = first
        self.second = second
        first.add_done_callback(self._check)
        second.add_done_callback(self._check)

    def _check(self) -> None:
        if self.first.resolved and self.second.resolved:
            self.resolve()
