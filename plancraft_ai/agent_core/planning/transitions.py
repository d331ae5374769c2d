from __future__ import annotations

"""Plan status transitions.

Every change to ``Plan.status`` and ``Plan.current_step_index`` made by the
engine goes through this module so the status is always derived from the
cursor in one place.

Lifecycle
---------

``draft`` / ``pending_approval`` are set by the external plan generator and
approval flow. Once approved, the executor moves the plan through
``in_progress`` to ``completed``::

    approved --advance--> in_progress --advance--> ... --advance--> completed

``completed`` holds iff the cursor reached the end of a non-empty plan, or the
plan was completed while empty.
"""

from ..schemas.domain import Plan, PlanStatus

EXECUTABLE_STATUSES = frozenset({PlanStatus.approved, PlanStatus.in_progress})
AWAITING_APPROVAL_STATUSES = frozenset({PlanStatus.draft, PlanStatus.pending_approval})


def status_for_cursor(current_step_index: int, step_count: int) -> PlanStatus:
    """Return the status an executing plan has with its cursor at ``current_step_index``."""
    return PlanStatus.completed if current_step_index >= step_count else PlanStatus.in_progress


def is_executable(plan: Plan) -> bool:
    return plan.status in EXECUTABLE_STATUSES


def awaits_approval(plan: Plan) -> bool:
    return plan.status in AWAITING_APPROVAL_STATUSES


def advance(plan: Plan) -> Plan:
    """Consume the current step and return the updated plan.

    The cursor moves by exactly one. Raises ``ValueError`` when the plan is not
    executable or has no step left, so callers cannot double-increment.
    """
    if not is_executable(plan):
        raise ValueError(f"cannot advance a plan in status {plan.status.value!r}")
    if plan.is_exhausted:
        raise ValueError("cannot advance past the last step")
    next_index = plan.current_step_index + 1
    return Plan(
        steps=list(plan.steps),
        status=status_for_cursor(next_index, len(plan.steps)),
        current_step_index=next_index,
        questions=list(plan.questions),
    )


def complete(plan: Plan) -> Plan:
    """Mark an executable plan whose cursor already sits at the end as completed."""
    if not plan.is_exhausted:
        raise ValueError("only a plan with no remaining steps can be completed")
    return Plan(
        steps=list(plan.steps),
        status=PlanStatus.completed,
        current_step_index=len(plan.steps),
        questions=list(plan.questions),
    )


def restart(template: Plan) -> Plan:
    """Build a fresh approved plan from ``template`` for a new recurrence cycle."""
    return Plan(
        steps=list(template.steps),
        status=PlanStatus.approved,
        current_step_index=0,
        questions=list(template.questions),
    )
