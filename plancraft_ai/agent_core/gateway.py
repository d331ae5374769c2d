from __future__ import annotations

"""Model gateway: the single place where the engine talks to a language model.

``execute_step`` asks the model how to resolve one plan step and returns
either a ``TextResult`` (the step is answered directly) or a
``ToolInvocation`` (the step needs a tool). ``summarize`` turns a serialized
tool result into prose for the user.

The gateway never mutates engine state. Any failure talking to the model,
including a structurally unusable answer, is raised as ``ModelUnavailable``
so the executor can record it and move on.
"""

import json
import logging
import time
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from ..core.monitoring import log_model_call
from .errors import ModelUnavailable
from .prompts import BuiltinPromptProvider, PromptProvider, render
from .schemas.domain import Asset, ChatMessage, TextResult, ToolInvocation

logger = logging.getLogger(__name__)

StepResult = Union[TextResult, ToolInvocation]


class StepDecision(BaseModel):
    """Structured answer requested from the model for one plan step."""

    kind: Literal["text", "tool_call"] = Field(..., description="'text' to answer directly, 'tool_call' to use a tool")
    text: Optional[str] = Field(None, description="The step result when kind is 'text'")
    tool_name: Optional[str] = Field(None, description="Name of the tool to call when kind is 'tool_call'")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Arguments for the tool call")


class ModelGateway(Protocol):
    async def execute_step(
        self,
        description: str,
        history: Sequence[ChatMessage],
        assets: Sequence[Asset],
        objective_title: str,
        objective_brief: str,
        *,
        recurrence_context: Optional[str] = None,
    ) -> StepResult: ...

    async def summarize(
        self, tool_output_description: str, history: Sequence[ChatMessage], assets: Sequence[Asset]
    ) -> TextResult: ...


def format_history(history: Sequence[ChatMessage], window: int) -> str:
    recent = list(history)[-window:] if window > 0 else []
    if not recent:
        return "(no messages yet)"
    return "\n".join(f"{m.speaker.value}: {m.content}" for m in recent)


def format_assets(assets: Sequence[Asset]) -> str:
    rows = [
        {"asset_id": a.asset_id, "name": a.name, "type": a.type, "url": a.url, "description": a.description}
        for a in assets
    ]
    return json.dumps(rows, ensure_ascii=False)


class PydanticAIModelGateway(ModelGateway):
    """
    ``ModelGateway`` backed by Pydantic AI agents.

    Args:
        model: A Pydantic AI model (or model name string) used for both calls.
        tool_schemas: Tool contracts shown to the model, usually ``ToolRegistry.schemas()``.
        prompts: Source of prompt templates; defaults to the builtin set.
        history_window: Number of most recent chat messages included in prompts.
    """

    def __init__(
        self,
        model: Any,
        *,
        tool_schemas: List[Dict[str, Any]],
        prompts: Optional[PromptProvider] = None,
        history_window: int = 20,
    ) -> None:
        self._model = model
        self._tools_json = json.dumps(tool_schemas, ensure_ascii=False)
        self._prompts = prompts or BuiltinPromptProvider()
        self._history_window = history_window

    @property
    def model_name(self) -> str:
        return str(getattr(self._model, "model_name", self._model))

    async def execute_step(
        self,
        description: str,
        history: Sequence[ChatMessage],
        assets: Sequence[Asset],
        objective_title: str,
        objective_brief: str,
        *,
        recurrence_context: Optional[str] = None,
    ) -> StepResult:
        prompt = render(
            self._prompts.get("executor/step"),
            {
                "objective_title": objective_title,
                "objective_brief": objective_brief or "(none)",
                "recurrence_context": (
                    f"Context from the previous cycle: {recurrence_context}\n" if recurrence_context else ""
                ),
                "step_description": description,
                "assets": format_assets(assets),
                "history": format_history(history, self._history_window),
                "tools": self._tools_json,
            },
        )
        agent: Agent = Agent(
            self._model, output_type=StepDecision, system_prompt=self._prompts.get("executor/system")
        )
        decision = await self._run(agent, prompt, operation="execute_step")

        if decision.kind == "tool_call":
            if not decision.tool_name:
                raise ModelUnavailable("Model requested a tool call without a tool name.", details=decision.model_dump())
            return ToolInvocation(name=decision.tool_name, arguments=decision.arguments)
        if decision.text is None:
            raise ModelUnavailable("Model returned a text decision without text.", details=decision.model_dump())
        return TextResult(text=decision.text)

    async def summarize(
        self, tool_output_description: str, history: Sequence[ChatMessage], assets: Sequence[Asset]
    ) -> TextResult:
        prompt = render(
            self._prompts.get("executor/summarize"),
            {
                "tool_output": tool_output_description,
                "assets": format_assets(assets),
                "history": format_history(history, self._history_window),
            },
        )
        agent: Agent = Agent(
            self._model, output_type=str, system_prompt=self._prompts.get("executor/summarize_system")
        )
        text = await self._run(agent, prompt, operation="summarize")
        return TextResult(text=str(text))

    async def _run(self, agent: Agent, prompt: str, *, operation: str) -> Any:
        started = time.perf_counter()
        try:
            result = await agent.run(prompt)
        except Exception as e:
            logger.warning(f"Model call '{operation}' failed: {e}")
            raise ModelUnavailable(str(e) or type(e).__name__, details={"operation": operation}) from e
        finally:
            log_model_call(operation, self.model_name, (time.perf_counter() - started) * 1000)
        logger.debug(f"Model call '{operation}' succeeded (prompts={self._prompts.version()})")
        return result.output
