from typing import Optional

from readygate.core.observability.gate_observer import GateObserver
from readygate.logging.structured_runtime_logger import StructuredRuntimeLogger


class LoggingGateObserver(GateObserver):
    """
    Emits gate transitions as JSON lines.
    Direct forwards go to DEBUG, everything else to INFO.
    """

    def __init__(self, logger: Optional[StructuredRuntimeLogger] = None):
        self._log = logger or StructuredRuntimeLogger(name="readygate.gate")

    def on_ready(self, gate_name: str) -> None:
        self._log.emit("gate_ready", gate=gate_name)

    def on_forward(self, gate_name: str) -> None:
        self._log.debug("gate_forward", gate=gate_name)

    def on_credit_deferred(self, gate_name: str, pending: int) -> None:
        self._log.emit("gate_credit_deferred", gate=gate_name, pending=pending)

    def on_credits_redeemed(self, gate_name: str, count: int) -> None:
        self._log.emit("gate_credits_redeemed", gate=gate_name, count=count)

    def on_detached(self, gate_name: str, dropped: int) -> None:
        self._log.emit("gate_detached", gate=gate_name, dropped=dropped)
