from readygate.core.signals.signal_source import SignalSource


class OneShotSource(SignalSource):
    """
    Source that, by contract, fires at most once.
    A repeated fire() is tolerated: it is logged and delivered to whoever is
    still subscribed, but consumed ONCE listeners never run again.
    """

    def __init__(self, name: str = "ready", **kwargs):
        super().__init__(name=name, **kwargs)
        self.fire_count = 0

    @property
    def fired(self) -> bool:
        return self.fire_count > 0

    def fire(self) -> int:
        self.fire_count += 1
        if self.fire_count > 1:
            self._log.warning("one_shot_refired", source=self.name, fire_count=self.fire_count)
        return super().fire()
