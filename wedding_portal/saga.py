"""Ordered steps with compensating actions.

Each step's action receives the results of the steps before it, keyed by
step name. When a critical step fails, the compensations of the steps that
already completed run in reverse order before the failure is raised.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Results = Mapping[str, Any]
Action = Callable[[Results], Awaitable[Any]]


class SagaStepFailedError(Exception):
    def __init__(self, step: str, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"Saga step '{step}' failed: {cause}")


@dataclass(frozen=True)
class SagaStep:
    name: str
    action: Action
    compensation: Action | None = None
    # a non-critical failure is logged and the saga carries on
    critical: bool = True


class SagaRunner:
    def __init__(self, name: str = "saga") -> None:
        self.name = name

    async def run(self, steps: list[SagaStep]) -> dict[str, Any]:
        results: dict[str, Any] = {}
        completed: list[SagaStep] = []

        for step in steps:
            try:
                results[step.name] = await step.action(results)
            except Exception as e:
                if not step.critical:
                    logger.error("%s: non-critical step '%s' failed: %s", self.name, step.name, e)
                    continue
                logger.error("%s: step '%s' failed, compensating: %s", self.name, step.name, e)
                await self._compensate(completed, results)
                raise SagaStepFailedError(step.name, e) from e
            logger.debug("%s: step '%s' done", self.name, step.name)
            completed.append(step)

        return results

    async def _compensate(self, completed: list[SagaStep], results: Results) -> None:
        for step in reversed(completed):
            if step.compensation is None:
                continue
            try:
                await step.compensation(results)
            except Exception:
                logger.exception("%s: compensation for '%s' failed", self.name, step.name)
            else:
                logger.info("%s: compensated '%s'", self.name, step.name)
