from __future__ import annotations

"""LangGraph plan executor.

``PlanExecutor.advance`` drives exactly one plan step of one objective.

Execution model
---------------

The objective is loaded under a per-objective lock, then a small LangGraph
state machine routes on ``plan.status``:

- ``draft`` / ``pending_approval`` -> ``guidance``: fixed approval message,
  nothing is written.
- ``completed`` -> ``already_completed``: fixed message, nothing is written.
- ``approved`` / ``in_progress`` with a step left -> ``execute`` -> ``persist``.
- ``approved`` / ``in_progress`` with the cursor already at the end ->
  ``finalize`` -> ``persist``.

Failure semantics
-----------------

Model and tool failures never escape ``advance``. They become the step's
chat-visible output and the cursor still moves forward by exactly one; there
are no retries. Only ``ObjectiveNotFound``, ``ObjectiveConflict`` (and other
repository failures while persisting) reach the caller.

The lock serializes ``advance`` within one process. Across processes the
persist write is a compare-and-set on the cursor read at the start of the
step, so a second process that raced on the same step gets
``ObjectiveConflict`` instead of advancing it twice.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from langgraph.graph import END, StateGraph

from ...core.monitoring import log_error, log_step_executed
from ..errors import ObjectiveNotFound, PlanCraftError
from ..planning import transitions
from ..schemas.domain import (
    Asset,
    ChatMessage,
    ObjectiveUpdate,
    PlanStatus,
    Speaker,
    StepOutcome,
    TextResult,
    ToolInvocation,
)
from .locks import ObjectiveLocks
from .models import ExecutorDeps, _StepState

logger = logging.getLogger(__name__)

APPROVAL_REQUIRED_MESSAGE = (
    "The plan must be approved before it can be executed. Please review and approve the plan first."
)
ALREADY_COMPLETED_MESSAGE = "This objective's plan is already completed."
ALL_STEPS_COMPLETED_MESSAGE = "All plan steps completed!"
SYSTEM_TRIGGER_PREFIX = "_SYSTEM_"


def merge_assets(existing: Sequence[Asset], new: Sequence[Asset]) -> List[Asset]:
    """Append ``new`` to ``existing``, replacing entries with the same ``asset_id``."""
    new_ids = {a.asset_id for a in new}
    return [a for a in existing if a.asset_id not in new_ids] + list(new)


def _message(speaker: Speaker, content: str) -> ChatMessage:
    return ChatMessage(speaker=speaker, content=content)


class PlanExecutor:
    """Advance objective plans one step per call.

    The executor owns no state besides the lock table; objectives live in
    ``ExecutorDeps.objectives`` and every call works on a fresh copy.
    """

    def __init__(self, *, deps: ExecutorDeps, locks: Optional[ObjectiveLocks] = None) -> None:
        """
        Initialize the PlanExecutor.

        Args:
            deps: Repository, model gateway and tool dispatcher.
            locks: Lock table to share between executors of the same process.
        """
        self._deps = deps
        self._locks = locks or ObjectiveLocks()
        self._graph = self._build_graph()

    @property
    def locks(self) -> ObjectiveLocks:
        return self._locks

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_StepState)
        g.add_node("inspect", self._node_inspect)
        g.add_node("guidance", self._node_guidance)
        g.add_node("already_completed", self._node_already_completed)
        g.add_node("finalize", self._node_finalize)
        g.add_node("execute", self._node_execute)
        g.add_node("persist", self._node_persist)

        g.set_entry_point("inspect")
        g.add_conditional_edges(
            "inspect",
            self._route,
            {
                "guidance": "guidance",
                "already_completed": "already_completed",
                "finalize": "finalize",
                "execute": "execute",
            },
        )
        g.add_edge("guidance", END)
        g.add_edge("already_completed", END)
        g.add_edge("finalize", "persist")
        g.add_edge("execute", "persist")
        g.add_edge("persist", END)
        return g.compile()

    async def advance(self, objective_id: str, user_input: str = "") -> StepOutcome:
        """
        Execute the next step of an objective's plan.

        Args:
            objective_id: The objective to advance.
            user_input: Optional message from the user; recorded in the chat
                unless empty or a ``_SYSTEM_``-prefixed trigger.

        Returns:
            The step outcome. Guidance and already-completed outcomes carry no
            step index or description.

        Raises:
            ObjectiveNotFound: If the objective id does not resolve.
            ObjectiveConflict: If another process advanced the objective
                while this step ran.
        """
        async with self._locks.hold(objective_id):
            objective = await self._deps.objectives.find_by_id(objective_id)
            if objective is None:
                raise ObjectiveNotFound(objective_id)

            started = time.perf_counter()
            final = await self._graph.ainvoke({"objective": objective, "user_input": user_input or ""})
            outcome: StepOutcome = final["outcome"]
            log_step_executed(
                objective_id,
                outcome.current_step if outcome.current_step is not None else -1,
                outcome.plan_status.value,
                (time.perf_counter() - started) * 1000,
            )
            return outcome

    def _route(self, state: _StepState) -> str:
        plan = state["objective"].plan
        if plan.status == PlanStatus.completed:
            return "already_completed"
        if transitions.awaits_approval(plan):
            return "guidance"
        if plan.is_exhausted:
            return "finalize"
        return "execute"

    async def _node_inspect(self, state: _StepState) -> Dict[str, Any]:
        plan = state["objective"].plan
        logger.debug(
            f"Objective {state['objective'].id}: status={plan.status.value} "
            f"step={plan.current_step_index}/{len(plan.steps)}"
        )
        return {"user_input": state["user_input"]}

    async def _node_guidance(self, state: _StepState) -> Dict[str, Any]:
        return {
            "outcome": StepOutcome(message=APPROVAL_REQUIRED_MESSAGE, plan_status=state["objective"].plan.status)
        }

    async def _node_already_completed(self, state: _StepState) -> Dict[str, Any]:
        return {"outcome": StepOutcome(message=ALREADY_COMPLETED_MESSAGE, plan_status=PlanStatus.completed)}

    async def _node_finalize(self, state: _StepState) -> Dict[str, Any]:
        objective = state["objective"]
        logger.warning(f"Objective {objective.id} is {objective.plan.status.value} with no step left; completing it")
        return {
            "plan": transitions.complete(objective.plan),
            "outcome": StepOutcome(message=ALL_STEPS_COMPLETED_MESSAGE, plan_status=PlanStatus.completed),
        }

    async def _node_execute(self, state: _StepState) -> Dict[str, Any]:
        objective = state["objective"]
        plan = objective.plan
        index = plan.current_step_index
        step = plan.steps[index]
        step_number = index + 1

        history = list(objective.chat_history)
        history.append(_message(Speaker.system, f'Executing step {step_number}: "{step}"'))
        user_input = state["user_input"]
        if user_input.strip() and not user_input.startswith(SYSTEM_TRIGGER_PREFIX):
            history.append(_message(Speaker.user, user_input))

        assets = list(objective.assets)
        try:
            result = await self._deps.gateway.execute_step(
                step,
                history,
                assets,
                objective.title,
                objective.brief,
                recurrence_context=objective.current_recurrence_context,
            )
        except PlanCraftError as e:
            logger.warning(f"Step {step_number} of objective {objective.id} could not reach the model: {e.message}")
            log_error("ModelUnavailable", e.message, {"objective_id": objective.id, "step": index})
            output = (
                f"Sorry, I could not complete step {step_number} because the language model is unavailable: "
                f"{e.message}"
            )
        except Exception as e:
            logger.exception(f"Unexpected error executing step {step_number} of objective {objective.id}")
            log_error(type(e).__name__, str(e), {"objective_id": objective.id, "step": index})
            output = f"Sorry, an unexpected error occurred while executing step {step_number}: {e}"
        else:
            if isinstance(result, ToolInvocation):
                output, assets = await self._run_tool(result, objective.project_id, history, assets)
            elif isinstance(result, TextResult):
                output = result.text
            else:
                output = str(result)

        history.append(_message(Speaker.agent, output))
        next_plan = transitions.advance(plan)

        message = output
        if next_plan.status == PlanStatus.completed:
            message = f"{ALL_STEPS_COMPLETED_MESSAGE} Final step result: {output}"

        update: Dict[str, Any] = {
            "plan": next_plan,
            "chat_history": history,
            "assets": assets,
            "outcome": StepOutcome(
                message=message,
                current_step=index,
                step_description=step,
                plan_status=next_plan.status,
            ),
        }
        if objective.is_recurring and objective.original_plan is None:
            update["original_plan"] = transitions.restart(plan)
        return update

    async def _run_tool(
        self, invocation: ToolInvocation, project_id: str, history: List[ChatMessage], assets: List[Asset]
    ) -> Tuple[str, List[Asset]]:
        """Dispatch a tool call and summarize its result; ``history`` receives the call record."""
        arguments = json.dumps(invocation.arguments, ensure_ascii=False, default=str)
        history.append(_message(Speaker.system, f"Calling tool {invocation.name} with arguments: {arguments}"))

        try:
            result = await self._deps.dispatcher.dispatch(invocation, project_id)
        except Exception as e:
            logger.exception(f"Dispatching tool '{invocation.name}' failed")
            log_error(type(e).__name__, str(e), {"tool": invocation.name, "project_id": project_id})
            return f"Sorry, the tool {invocation.name} could not be executed: {e}", assets

        tool_text = result.to_text(self._deps.tool_result_max_chars)
        merged = merge_assets(assets, result.assets)
        try:
            summary = await self._deps.gateway.summarize(tool_text, history, merged)
        except Exception as e:
            reason = e.message if isinstance(e, PlanCraftError) else str(e)
            logger.warning(f"Summarizing tool '{invocation.name}' failed: {reason}")
            return f"Tool execution finished. Error getting AI summary: {reason}. Raw result: {tool_text}", merged
        return summary.text, merged

    async def _node_persist(self, state: _StepState) -> Dict[str, Any]:
        objective = state["objective"]
        changes: Dict[str, Any] = {"plan": state["plan"]}
        if "chat_history" in state:
            changes["chat_history"] = state["chat_history"]
        if "assets" in state:
            changes["assets"] = state["assets"]
        if state.get("original_plan") is not None:
            changes["original_plan"] = state["original_plan"]
        stored = await self._deps.objectives.update(
            objective.id, ObjectiveUpdate(**changes), expected_step_index=objective.plan.current_step_index
        )
        return {"objective": stored}
