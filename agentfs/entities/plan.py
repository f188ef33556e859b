"""
Plan domain entities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from agentfs.entities.result import ErrorKind, MutationResult


class PlanState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Plan:
    """An immutable, registered plan: task, authored content and ordered steps."""

    id: int
    task: str
    steps: tuple[str, ...]
    content: str
    context: Mapping[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task": self.task,
            "steps": list(self.steps),
            "content": self.content,
            "context": dict(self.context),
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class StepContext:
    """What an interpreter sees besides the step text."""

    plan_id: int
    step_index: int
    task: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan_id": self.plan_id,
            "step_index": self.step_index,
            "task": self.task,
            "context": dict(self.context),
        }


@dataclass
class StepOutcome:
    index: int
    step: str
    success: bool
    results: list[MutationResult] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "step": self.step,
            "success": self.success,
            "results": [r.to_dict() for r in self.results],
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


@dataclass
class PlanRunResult:
    """
    Outcome of a plan execution.

    ``completed_steps`` counts the steps that finished before the first
    failure; on success it equals the number of steps.
    """

    plan_id: int
    state: PlanState
    completed_steps: int
    total_steps: int
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.state is PlanState.COMPLETED

    @property
    def error(self) -> Optional[str]:
        for outcome in self.outcomes:
            if not outcome.success:
                return outcome.error
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan_id": self.plan_id,
            "state": self.state.value,
            "success": self.success,
            "completed_steps": self.completed_steps,
            "total_steps": self.total_steps,
            "error": self.error,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
