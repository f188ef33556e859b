"""
Tests for plan entities.
"""

import dataclasses

import pytest

from agentfs.entities.plan import Plan, PlanRunResult, PlanState, StepOutcome
from agentfs.entities.result import ErrorKind


class TestPlan:
    def test_plan_is_immutable(self):
        plan = Plan(id=1, task="t", steps=["a", "b"], content="", context={"k": "v"})

        assert plan.steps == ("a", "b")
        with pytest.raises(dataclasses.FrozenInstanceError):
            plan.task = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            plan.context["k"] = "changed"  # type: ignore[index]

    def test_to_dict(self):
        data = Plan(id=7, task="t", steps=("a",), content="STEPS:\n1. a").to_dict()
        assert data["id"] == 7
        assert data["steps"] == ["a"]
        assert "created_at" in data


class TestPlanRunResult:
    def test_failed_result_reports_first_error(self):
        outcomes = [
            StepOutcome(0, "a", True),
            StepOutcome(1, "b", False, error="boom", error_kind=ErrorKind.NOT_FOUND),
        ]
        result = PlanRunResult(1, PlanState.FAILED, 1, 3, outcomes)

        assert not result.success
        assert result.error == "boom"
        data = result.to_dict()
        assert data["state"] == "failed"
        assert data["outcomes"][1]["error_kind"] == "not_found"

    def test_completed_result(self):
        result = PlanRunResult(1, PlanState.COMPLETED, 2, 2, [])
        assert result.success
        assert result.error is None
