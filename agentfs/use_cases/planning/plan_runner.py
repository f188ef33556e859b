"""
Use case for authoring plans and running them step by step.
"""

import logging
import re
import threading
import time
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from agentfs.entities.plan import (
    Plan,
    PlanRunResult,
    PlanState,
    StepContext,
    StepOutcome,
)
from agentfs.entities.result import ErrorKind, MutationResult
from agentfs.exceptions import ConfigurationError, InterpreterError, PlanNotFoundError
from agentfs.ports.planning.plan_author_port import PlanAuthorPort
from agentfs.ports.planning.step_interpreter_port import StepInterpreterPort
from agentfs.use_cases.files.mutation_engine import MutationEngine

_STEP_LINE = re.compile(r"^\d+\.\s*(.+)$")


def parse_steps(content: str) -> list[str]:
    """
    Extract numbered steps from the ``STEPS:`` section of plan content.

    The section ends at a blank line or at a ``FILES``/``CONSIDERATIONS``
    heading. Lines that are not numbered are skipped.
    """
    steps: list[str] = []
    in_steps = False
    for line in content.splitlines():
        trimmed = line.strip()
        if trimmed == "STEPS:":
            in_steps = True
            continue
        if not in_steps:
            continue
        if not trimmed or trimmed.startswith("FILES") or trimmed.startswith("CONSIDERATIONS"):
            in_steps = False
            continue
        match = _STEP_LINE.match(trimmed)
        if match:
            steps.append(match.group(1).strip())
    return steps


def _millis() -> int:
    return int(time.time() * 1000)


class PlanRunner:
    """
    Plan registry and sequential, fail-fast plan execution.

    States move Idle -> Running -> Completed | Failed. Steps run strictly in
    order; the first interpreter failure or failed mutation stops the run.
    Mutations of completed steps stay applied; the caller may undo them
    through the engine.
    """

    def __init__(
        self,
        engine: MutationEngine,
        interpreter: StepInterpreterPort,
        author: Optional[PlanAuthorPort] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], int] = _millis,
    ):
        """
        Initialize the runner.

        Args:
            engine: Mutation engine applying the requests of each step
            interpreter: Translates step text into mutation requests
            author: Drafts plan content for ``create_plan``
            logger: Logger instance to use for logging
            clock: Source of plan ids (milliseconds)
        """
        self._engine = engine
        self._interpreter = interpreter
        self._author = author
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._plans: list[Plan] = []
        self._last_id = 0
        self._registry_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self.state = PlanState.IDLE

    # ------------------------- registry -------------------------
    def _next_id(self) -> int:
        candidate = self._clock()
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def register_plan(
        self,
        task: str,
        steps: Sequence[str],
        content: str = "",
        context: Optional[Mapping[str, Any]] = None,
    ) -> Plan:
        """Register a plan whose steps are already known."""
        with self._registry_lock:
            plan = Plan(
                id=self._next_id(),
                task=task,
                steps=tuple(steps),
                content=content,
                context=dict(context or {}),
            )
            self._plans.append(plan)
        self._logger.info(f"Registered plan {plan.id} with {len(plan.steps)} step(s)")
        return plan

    def create_plan(self, task: str, context: Optional[Mapping[str, Any]] = None) -> Plan:
        """
        Ask the plan author for content and register the parsed plan.

        Raises:
            ConfigurationError: If no plan author is configured
            LLMError: If the author fails
        """
        if self._author is None:
            raise ConfigurationError("No plan author configured")
        ctx: dict[str, Any] = {
            "working_dir": self._engine.workspace_root,
            "timestamp": datetime.now().isoformat(),
        }
        ctx.update(context or {})
        content = self._author.draft(task, ctx)
        steps = parse_steps(content)
        if not steps:
            self._logger.warning(f"Plan for '{task}' contains no numbered steps")
        return self.register_plan(task, steps, content=content, context=ctx)

    def get_plan(self, plan_id: int) -> Optional[Plan]:
        with self._registry_lock:
            for plan in self._plans:
                if plan.id == plan_id:
                    return plan
        return None

    def plans(self) -> list[Plan]:
        with self._registry_lock:
            return list(self._plans)

    def latest_plan(self) -> Optional[Plan]:
        with self._registry_lock:
            return self._plans[-1] if self._plans else None

    def clear_plans(self) -> None:
        with self._registry_lock:
            self._plans.clear()
        self._logger.info("All plans cleared")

    # ------------------------- execution -------------------------
    def _run_step(self, plan: Plan, index: int) -> StepOutcome:
        step = plan.steps[index]
        context = StepContext(
            plan_id=plan.id, step_index=index, task=plan.task, context=plan.context
        )
        try:
            requests = self._interpreter.interpret(step, context)
        except InterpreterError as e:
            return StepOutcome(
                index, step, False, error=str(e), error_kind=ErrorKind.INTERPRETER_FAILURE
            )
        except Exception as e:
            self._logger.error(f"Unexpected interpreter error: {e}")
            return StepOutcome(
                index,
                step,
                False,
                error=f"Interpreter failed: {e}",
                error_kind=ErrorKind.INTERPRETER_FAILURE,
            )

        results: list[MutationResult] = []
        for request in requests:
            result = self._engine.apply(request)
            results.append(result)
            if not result.success:
                return StepOutcome(
                    index,
                    step,
                    False,
                    results=results,
                    error=result.error,
                    error_kind=result.error_kind,
                )
        return StepOutcome(index, step, True, results=results)

    def run_plan(self, plan_id: Optional[int] = None) -> PlanRunResult:
        """
        Execute a registered plan (the most recent one when ``plan_id`` is None).

        Returns:
            PlanRunResult with the final state, the number of completed steps
            and one outcome per step that ran

        Raises:
            PlanNotFoundError: If the plan is not registered
        """
        plan = self.latest_plan() if plan_id is None else self.get_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(
                "No plans available" if plan_id is None else f"Plan not found: {plan_id}"
            )

        with self._run_lock:
            self.state = PlanState.RUNNING
            total = len(plan.steps)
            self._logger.info(f"Executing plan {plan.id}: {plan.task}")
            outcomes: list[StepOutcome] = []
            for index in range(total):
                self._logger.info(f"[Step {index + 1}/{total}] {plan.steps[index]}")
                outcome = self._run_step(plan, index)
                outcomes.append(outcome)
                if not outcome.success:
                    self.state = PlanState.FAILED
                    self._logger.error(f"Step {index + 1} failed: {outcome.error}")
                    return PlanRunResult(plan.id, self.state, index, total, outcomes)

            self.state = PlanState.COMPLETED
            self._logger.info(f"Plan {plan.id} completed successfully")
            return PlanRunResult(plan.id, self.state, total, total, outcomes)
