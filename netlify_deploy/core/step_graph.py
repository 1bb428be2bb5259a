# netlify_deploy/core/step_graph.py
"""Dependency-ordered pipeline steps"""

import asyncio
import logging
from collections import OrderedDict, deque
from typing import Awaitable, Callable, Dict, List, Optional

from .reporting import ActivityReporter, ReportingStep
from ..api.exceptions import DeployCancelledError, StepGraphError
from ..models.result import StepResult, StepStatus, _utcnow

logger = logging.getLogger(__name__)

StepAction = Callable[[ReportingStep], Awaitable[None]]


class PipelineStep:
    """A named action with dependencies on other steps"""

    def __init__(self,
                 name: str,
                 action: StepAction,
                 dependencies: Optional[List[str]] = None,
                 title: Optional[str] = None):
        self.name = name
        self.action = action
        self.dependencies: List[str] = list(dependencies or [])
        self.title = title or name

    def depends_on(self, *steps) -> 'PipelineStep':
        """Add dependencies (step objects or names)"""
        for step in steps:
            name = step.name if isinstance(step, PipelineStep) else str(step)
            if name not in self.dependencies:
                self.dependencies.append(name)
        return self

    def __repr__(self) -> str:
        return f"PipelineStep({self.name!r}, dependencies={self.dependencies!r})"


class PipelineStepGraph:
    """Runs steps in dependency order, one at a time"""

    def __init__(self):
        self._steps: "OrderedDict[str, PipelineStep]" = OrderedDict()
        self.results: Dict[str, StepResult] = {}

    @property
    def steps(self) -> List[PipelineStep]:
        return list(self._steps.values())

    def add_step(self, step: PipelineStep) -> PipelineStep:
        if step.name in self._steps:
            raise StepGraphError(f"Duplicate step: {step.name}")
        self._steps[step.name] = step
        return step

    def execution_order(self) -> List[PipelineStep]:
        """
        Stable topological order

        Steps run in the order they become ready; steps ready at the same
        time keep their insertion order.

        Raises:
            StepGraphError: On unknown dependencies or cycles
        """
        for step in self._steps.values():
            for dep in step.dependencies:
                if dep not in self._steps:
                    raise StepGraphError(f"Step '{step.name}' depends on unknown step '{dep}'")

        remaining = {name: set(step.dependencies) for name, step in self._steps.items()}
        ready = deque(name for name, deps in remaining.items() if not deps)
        order: List[PipelineStep] = []

        while ready:
            name = ready.popleft()
            order.append(self._steps[name])
            del remaining[name]

            # Newly unblocked steps queue behind those already ready
            for other, deps in remaining.items():
                if name in deps:
                    deps.discard(name)
                    if not deps:
                        ready.append(other)

        if remaining:
            cycle = ", ".join(sorted(remaining))
            raise StepGraphError(f"Dependency cycle between steps: {cycle}")

        return order

    async def run(self, reporter: ActivityReporter) -> Dict[str, StepResult]:
        """
        Run every step

        A step whose dependency did not succeed is skipped without running.

        Args:
            reporter: Activity reporter providing per-step scopes

        Returns:
            Step results keyed by step name, in execution order
        """
        order = self.execution_order()
        self.results = OrderedDict((s.name, StepResult(name=s.name)) for s in order)

        for step in order:
            result = self.results[step.name]

            blocked = [d for d in step.dependencies
                       if self.results[d].status != StepStatus.SUCCEEDED]
            if blocked:
                result.status = StepStatus.SKIPPED
                result.message = f"Skipped: dependency {', '.join(blocked)} did not succeed"
                logger.info(f"Skipping step '{step.name}' ({result.message})")
                reporter.record(step.title, "step-skip", result.message)
                continue

            await self._run_step(step, result, reporter)

        return self.results

    async def _run_step(self, step: PipelineStep, result: StepResult,
                        reporter: ActivityReporter) -> None:
        result.status = StepStatus.RUNNING
        result.start_time = _utcnow()
        logger.debug(f"Running step '{step.name}'")

        reporting_step = await reporter.create_step(step.title)

        try:
            await step.action(reporting_step)
        except (DeployCancelledError, asyncio.CancelledError) as e:
            result.status = StepStatus.CANCELLED
            result.error = str(e) or "Cancelled"
            await reporting_step.fail(result.error)
            if isinstance(e, asyncio.CancelledError):
                raise
        except Exception as e:
            result.status = StepStatus.FAILED
            result.error = str(e)
            logger.error(f"Step '{step.name}' failed: {e}")
            logger.debug("Step failure details", exc_info=True)
            await reporting_step.fail(result.error)
        else:
            result.status = StepStatus.SUCCEEDED
            await reporting_step.complete(reporting_step.message or None)
        finally:
            result.end_time = _utcnow()
            result.message = reporting_step.message
