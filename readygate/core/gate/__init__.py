"""Ready-gate primitives."""

from readygate.core.gate.async_gate import AsyncReadyGate, wait_for
from readygate.core.gate.join_gate import JoinGate
from readygate.core.gate.outcome import Join, Outcome
from readygate.core.gate.ready_gate import ReadyGate

__all__ = ["AsyncReadyGate", "Join", "JoinGate", "Outcome", "ReadyGate", "wait_for"]
