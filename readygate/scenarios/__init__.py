"""Canonical timing scenarios for the ready-gate."""

from readygate.scenarios.scenario_runner import AsyncScenarioRunner, ScenarioResult, ScenarioRunner, STRATEGIES
from readygate.scenarios.scenario_spec import (
    ScenarioSpec,
    canonical_scenarios,
    ready_then_recurring,
    recurring_then_ready,
    simultaneous,
)

__all__ = [
    "AsyncScenarioRunner",
    "STRATEGIES",
    "ScenarioResult",
    "ScenarioRunner",
    "ScenarioSpec",
    "canonical_scenarios",
    "ready_then_recurring",
    "recurring_then_ready",
    "simultaneous",
]
