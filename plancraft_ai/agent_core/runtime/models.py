from __future__ import annotations

"""Runtime dependency bundle and LangGraph state types.

The plan executor is dependency-injected.

- ``ExecutorDeps`` collects the repository, gateway and dispatcher the
  executor needs.
- ``_StepState`` is the state passed between LangGraph nodes during one
  ``advance`` call.
"""

from dataclasses import dataclass
from typing import List, NotRequired, Optional, Required, TypedDict

from ..dispatcher import ToolDispatcher
from ..gateway import ModelGateway
from ..repos.interfaces import ObjectiveRepository
from ..schemas.domain import Asset, ChatMessage, Objective, Plan, StepOutcome


@dataclass(frozen=True)
class ExecutorDeps:
    """Dependency bundle for ``PlanExecutor``.

    Built by ``plancraft_ai.agent_core.factory.build_plan_executor`` in
    production wiring; tests construct it directly with fakes.
    """

    objectives: ObjectiveRepository
    gateway: ModelGateway
    dispatcher: ToolDispatcher
    tool_result_max_chars: int = 4000


class _StepState(TypedDict):
    """LangGraph state for a single ``advance`` call.

    Required keys:

    - ``objective``: the transient copy loaded before the graph runs.
    - ``user_input``: the caller's message (may be empty).

    Optional keys, filled by nodes:

    - ``plan`` / ``chat_history`` / ``assets``: values to persist.
    - ``original_plan``: snapshot recorded on the first step of a recurring objective.
    - ``outcome``: the ``StepOutcome`` returned to the caller.
    """

    objective: Required[Objective]
    user_input: Required[str]

    plan: NotRequired[Plan]
    chat_history: NotRequired[List[ChatMessage]]
    assets: NotRequired[List[Asset]]
    original_plan: NotRequired[Optional[Plan]]
    outcome: NotRequired[StepOutcome]
