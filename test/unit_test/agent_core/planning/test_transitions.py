from __future__ import annotations

import pytest

from plancraft_ai.agent_core.planning import transitions
from plancraft_ai.agent_core.schemas.domain import Plan, PlanStatus


def test_status_for_cursor() -> None:
    assert transitions.status_for_cursor(1, 2) == PlanStatus.in_progress
    assert transitions.status_for_cursor(2, 2) == PlanStatus.completed


@pytest.mark.parametrize("status", [PlanStatus.approved, PlanStatus.in_progress])
def test_advance_moves_cursor_by_exactly_one(status: PlanStatus) -> None:
    plan = Plan(steps=["a", "b", "c"], status=status, current_step_index=0)

    nxt = transitions.advance(plan)

    assert nxt.current_step_index == 1
    assert nxt.status == PlanStatus.in_progress
    assert plan.current_step_index == 0


def test_advance_on_last_step_completes() -> None:
    plan = Plan(steps=["a", "b"], status=PlanStatus.in_progress, current_step_index=1)
    nxt = transitions.advance(plan)
    assert nxt.current_step_index == 2
    assert nxt.status == PlanStatus.completed


@pytest.mark.parametrize("status", [PlanStatus.draft, PlanStatus.pending_approval, PlanStatus.completed])
def test_advance_refuses_non_executable_plans(status: PlanStatus) -> None:
    with pytest.raises(ValueError):
        transitions.advance(Plan(steps=["a"], status=status))


def test_advance_refuses_exhausted_plan() -> None:
    with pytest.raises(ValueError):
        transitions.advance(Plan(steps=["a"], status=PlanStatus.in_progress, current_step_index=1))


def test_complete_requires_exhausted_plan() -> None:
    with pytest.raises(ValueError):
        transitions.complete(Plan(steps=["a"], status=PlanStatus.approved))

    done = transitions.complete(Plan(steps=[], status=PlanStatus.approved))
    assert done.status == PlanStatus.completed
    assert done.current_step_index == 0


def test_restart_returns_fresh_approved_plan() -> None:
    template = Plan(steps=["a", "b"], status=PlanStatus.completed, current_step_index=2, questions=["q"])
    fresh = transitions.restart(template)
    assert fresh.status == PlanStatus.approved
    assert fresh.current_step_index == 0
    assert fresh.steps == ["a", "b"]
    assert fresh.questions == ["q"]


def test_status_predicates() -> None:
    assert transitions.awaits_approval(Plan(status=PlanStatus.draft))
    assert transitions.awaits_approval(Plan(status=PlanStatus.pending_approval))
    assert transitions.is_executable(Plan(steps=["a"], status=PlanStatus.approved))
    assert not transitions.is_executable(Plan(steps=["a"], status=PlanStatus.completed, current_step_index=1))
