"""Objective plan execution engine.

This package contains the "engine room" of PlanCraft-AI.

Design overview
---------------

The engine advances an approved plan one step per call:

- ``runtime.PlanExecutor`` is a LangGraph state machine routing on the plan
  status. It holds a per-objective lock for the whole call and persists the
  objective as its last action.
- ``gateway.PydanticAIModelGateway`` asks the model whether a step is answered
  directly or needs a tool, and summarizes tool results.
- ``dispatcher.ToolDispatcher`` validates tool calls against the
  ``tools.ToolRegistry``, checks project preconditions and runs the adapter
  from ``capabilities``. Tool failures are result kinds, never exceptions.
- ``planning.transitions`` is the only place plan status changes are derived.

Typical usage
-------------

Build an executor with ``factory.build_plan_executor`` and call
``await executor.advance(objective_id, user_input)``.
"""

from .errors import ModelUnavailable, ObjectiveConflict, ObjectiveNotFound, PlanCraftError, ProjectNotFound
from .schemas.domain import (
    Asset,
    ChatMessage,
    Objective,
    Plan,
    PlanStatus,
    Project,
    StepOutcome,
    ToolInvocation,
)

__all__ = [
    "Asset",
    "ChatMessage",
    "ModelUnavailable",
    "Objective",
    "ObjectiveConflict",
    "ObjectiveNotFound",
    "Plan",
    "PlanCraftError",
    "PlanStatus",
    "Project",
    "ProjectNotFound",
    "StepOutcome",
    "ToolInvocation",
]
