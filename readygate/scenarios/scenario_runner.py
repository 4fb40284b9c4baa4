import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from readygate.config.settings import settings
from readygate.core.domain.exceptions import ObservationMismatch
from readygate.core.domain.tie_break import TieBreakPolicy
from readygate.core.gate.async_gate import AsyncReadyGate
from readygate.core.gate.join_gate import JoinGate
from readygate.core.gate.ready_gate import ReadyGate
from readygate.core.observability.counting_observer import CountingObserver
from readygate.core.observability.gate_observer import GateObserver
from readygate.core.observability.logging_gate_observer import LoggingGateObserver
from readygate.core.signals.one_shot_source import OneShotSource
from readygate.core.signals.recurring_source import RecurringSource
from readygate.core.time.asyncio_clock import AsyncioClock
from readygate.core.time.virtual_clock import VirtualClock
from readygate.scenarios.scenario_spec import ScenarioSpec

GateFactory = Callable[[OneShotSource, RecurringSource, Callable[[], None], GateObserver], Any]

STRATEGIES: Dict[str, GateFactory] = {
    "callback": lambda one_shot, recurring, observer, hooks: ReadyGate(
        one_shot, recurring, observer, name="callback", gate_observer=hooks
    ).attach(),
    "join": lambda one_shot, recurring, observer, hooks: JoinGate(
        one_shot, recurring, observer, name="join", gate_observer=hooks
    ).attach(),
}


class RecordingGateObserver(GateObserver):
    """Tallies gate transitions, then hands them on to a delegate."""

    def __init__(self, delegate: Optional[GateObserver] = None):
        self.delegate = delegate or LoggingGateObserver()
        self.direct = 0
        self.deferred = 0
        self.redeemed = 0
        self.bursts: List[int] = []
        self.detached: List[int] = []

    def on_ready(self, gate_name: str) -> None:
        self.delegate.on_ready(gate_name)

    def on_forward(self, gate_name: str) -> None:
        self.direct += 1
        self.delegate.on_forward(gate_name)

    def on_credit_deferred(self, gate_name: str, pending: int) -> None:
        self.deferred += 1
        self.delegate.on_credit_deferred(gate_name, pending)

    def on_credits_redeemed(self, gate_name: str, count: int) -> None:
        self.redeemed += count
        self.bursts.append(count)
        self.delegate.on_credits_redeemed(gate_name, count)

    def on_detached(self, gate_name: str, dropped: int) -> None:
        self.detached.append(dropped)
        self.delegate.on_detached(gate_name, dropped)


@dataclass
class ScenarioResult:
    spec: ScenarioSpec
    strategy: str
    policy: TieBreakPolicy
    call_count: int
    calls_at: List[timedelta] = field(default_factory=list)
    ready_at: Optional[timedelta] = None
    direct: int = 0
    redeemed: int = 0
    bursts: List[int] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.call_count == self.spec.expected_calls

    def verify(self) -> None:
        if not self.passed:
            raise ObservationMismatch(
                self.spec.expected_calls, self.call_count, label=f"{self.strategy}/{self.spec.name}"
            )


class ScenarioRunner:
    """
    Drives a gate through a scenario on a VirtualClock.
    Fresh sources, clock and observer per run.
    """

    def __init__(self, policy: Optional[TieBreakPolicy] = None, start_time: Optional[datetime] = None):
        self.policy = policy or settings.TIE_BREAK_POLICY
        self.start_time = start_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def run(self, spec: ScenarioSpec, strategy: str = "callback") -> ScenarioResult:
        return self.run_with(spec, STRATEGIES[strategy], strategy)

    def run_with(self, spec: ScenarioSpec, gate_factory: GateFactory, strategy: str = "custom") -> ScenarioResult:
        clock = VirtualClock(self.start_time)
        one_shot = OneShotSource()
        recurring = RecurringSource()
        observer = CountingObserver(clock=clock)
        hooks = RecordingGateObserver()
        gate = gate_factory(one_shot, recurring, observer, hooks)

        ready_at: List[timedelta] = []
        one_shot.subscribe_once(lambda: ready_at.append(clock.elapsed()))

        one_shot_priority, recurring_priority = self.policy.priorities()
        clock.after(spec.one_shot_at, one_shot.fire, priority=one_shot_priority)
        interval = clock.every(spec.period, recurring.fire, priority=recurring_priority)
        clock.advance(spec.window)
        clock.cancel(interval)
        gate.detach()

        return ScenarioResult(
            spec=spec,
            strategy=strategy,
            policy=self.policy,
            call_count=observer.call_count,
            calls_at=[at - self.start_time for at in observer.calls_at],
            ready_at=ready_at[0] if ready_at else None,
            direct=hooks.direct,
            redeemed=hooks.redeemed,
            bursts=list(hooks.bursts),
        )

    def run_all(self, specs: List[ScenarioSpec], strategies: Optional[List[str]] = None) -> List[ScenarioResult]:
        results = []
        for strategy in strategies or list(STRATEGIES):
            for spec in specs:
                results.append(self.run(spec, strategy))
        return results


class AsyncScenarioRunner:
    """
    Drives an AsyncReadyGate through a scenario in real time on the running loop.
    Durations are divided by time_scale. Same-instant ordering is the loop's.
    """

    def __init__(self, time_scale: Optional[float] = None):
        self.time_scale = time_scale or settings.ASYNC_TIME_SCALE

    async def run(self, spec: ScenarioSpec) -> ScenarioResult:
        scaled = spec.scaled(self.time_scale)
        clock = AsyncioClock()
        one_shot = OneShotSource()
        recurring = RecurringSource()
        observer = CountingObserver()
        hooks = RecordingGateObserver()
        gate = AsyncReadyGate(one_shot, recurring, observer, name="async", gate_observer=hooks)
        gate.start()

        ready_timer = clock.after(scaled.one_shot_at, one_shot.fire)
        interval = clock.every(scaled.period, recurring.fire)
        try:
            await asyncio.sleep(scaled.window.total_seconds())
        finally:
            clock.cancel(interval)
            clock.cancel(ready_timer)
            await gate.stop()

        return ScenarioResult(
            spec=spec,
            strategy="async",
            policy=TieBreakPolicy.SCHEDULING_ORDER,
            call_count=observer.call_count,
            direct=hooks.direct,
            redeemed=hooks.redeemed,
            bursts=list(hooks.bursts),
        )

    def run_sync(self, spec: ScenarioSpec) -> ScenarioResult:
        return asyncio.run(self.run(spec))
