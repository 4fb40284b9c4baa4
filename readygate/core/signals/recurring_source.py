from readygate.core.signals.signal_source import SignalSource


class RecurringSource(SignalSource):
    def __init__(self, name: str = "interval", **kwargs):
        super().__init__(name=name, **kwargs)
        self.fire_count = 0

    def fire(self) -> int:
        self.fire_count += 1
        return super().fire()
