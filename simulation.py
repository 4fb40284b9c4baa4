"""
SCENARIO SIMULATION
Runs every gate strategy through the three timing regimes.

- ready_then_recurring: one-shot at 50ms, interval every 100ms
- recurring_then_ready: one-shot at 150ms, interval every 100ms
- simultaneous: one-shot and first interval both at 100ms

Each run observes until 421ms and expects 4 acknowledgements.
Timings come from READYGATE_* environment settings.
"""

import sys

from readygate.config.settings import settings
from readygate.core.domain.tie_break import TieBreakPolicy
from readygate.logging.structured_runtime_logger import configure_logging
from readygate.scenarios.scenario_runner import AsyncScenarioRunner, ScenarioResult, ScenarioRunner
from readygate.scenarios.scenario_spec import canonical_scenarios


def _report(result: ScenarioResult) -> None:
    status = "PASS" if result.passed else "FAIL"
    print(
        f"  [{status}] {result.strategy:<8} {result.spec.name:<22} "
        f"policy={result.policy.value:<17} calls={result.call_count} "
        f"(direct={result.direct}, redeemed={result.redeemed}, bursts={result.bursts})"
    )


def main() -> int:
    configure_logging()
    specs = canonical_scenarios()
    failures = 0

    for policy in TieBreakPolicy:
        print(f"Virtual clock, tie-break {policy.value}:")
        for result in ScenarioRunner(policy).run_all(specs):
            _report(result)
            failures += 0 if result.passed else 1

    print(f"asyncio clock, time scale x{settings.ASYNC_TIME_SCALE}:")
    runner = AsyncScenarioRunner()
    for spec in specs:
        result = runner.run_sync(spec)
        _report(result)
        failures += 0 if result.passed else 1

    if failures:
        print(f"\nFAILURE: {failures} scenario run(s) did not match the expected count.")
        return 1
    print("\nREADY-GATE SCENARIO CHECK: PASSED")
    return 0


if __name__ == "__main__":
    sys.exit(main())
