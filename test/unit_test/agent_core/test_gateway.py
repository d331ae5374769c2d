from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import pytest

pytest.importorskip("pydantic_ai")

from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, ToolCallPart, UserPromptPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

import plancraft_ai.agent_core.gateway as gateway_mod
from plancraft_ai.agent_core.errors import ModelUnavailable
from plancraft_ai.agent_core.gateway import PydanticAIModelGateway, StepDecision, format_history
from plancraft_ai.agent_core.prompts import BuiltinPromptProvider, render
from plancraft_ai.agent_core.schemas.domain import Asset, ChatMessage, Speaker, TextResult, ToolInvocation

TOOLS = [{"name": "create_image_asset", "description": "d", "parameters": {"type": "object", "properties": {}, "required": []}}]


def _decision_model(decision: Dict[str, Any], prompts: List[str]) -> FunctionModel:
    def _fn(messages: List[ModelMessage], info: AgentInfo) -> ModelResponse:
        for message in messages:
            if isinstance(message, ModelRequest):
                prompts.extend(p.content for p in message.parts if isinstance(p, UserPromptPart))
        return ModelResponse(parts=[ToolCallPart(info.output_tools[0].name, decision)])

    return FunctionModel(_fn)


@pytest.mark.asyncio
async def test_text_decision_becomes_text_result() -> None:
    prompts: List[str] = []
    gw = PydanticAIModelGateway(_decision_model({"kind": "text", "text": "Done A"}, prompts), tool_schemas=TOOLS)

    result = await gw.execute_step(
        "Step A",
        [ChatMessage(speaker=Speaker.user, content="please hurry")],
        [Asset(asset_id="img_1", name="Logo", type="image", url="https://cdn/logo.png")],
        "Spring launch",
        "Promote the new sneakers",
        recurrence_context="Last cycle posted twice.",
    )

    assert result == TextResult(text="Done A")
    (prompt,) = prompts
    assert "Current step: Step A" in prompt
    assert "Objective: Spring launch" in prompt
    assert "user: please hurry" in prompt
    assert "img_1" in prompt
    assert "create_image_asset" in prompt
    assert "Last cycle posted twice." in prompt


@pytest.mark.asyncio
async def test_tool_decision_becomes_invocation() -> None:
    model = _decision_model(
        {"kind": "tool_call", "tool_name": "create_image_asset", "arguments": {"prompt": "sneakers"}}, []
    )
    gw = PydanticAIModelGateway(model, tool_schemas=TOOLS)

    result = await gw.execute_step("Make a picture", [], [], "t", "b")

    assert result == ToolInvocation(name="create_image_asset", arguments={"prompt": "sneakers"})


@pytest.mark.asyncio
@pytest.mark.parametrize("decision", [{"kind": "tool_call"}, {"kind": "text"}])
async def test_incomplete_decision_raises_model_unavailable(decision: Dict[str, Any]) -> None:
    gw = PydanticAIModelGateway(_decision_model(decision, []), tool_schemas=TOOLS)
    with pytest.raises(ModelUnavailable):
        await gw.execute_step("s", [], [], "t", "b")


@pytest.mark.asyncio
async def test_summarize_returns_model_text() -> None:
    gw = PydanticAIModelGateway(TestModel(custom_output_text="Your image is ready."), tool_schemas=TOOLS)
    result = await gw.summarize('{"status": "succeeded"}', [], [])
    assert result == TextResult(text="Your image is ready.")


@pytest.mark.asyncio
async def test_agent_failures_are_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    @dataclass
    class _FailingAgent:
        model: Any
        output_type: Any = None
        system_prompt: str = ""

        async def run(self, prompt: str):
            raise ConnectionError("upstream timeout")

    def _agent(model: Any, *, output_type: Any, system_prompt: str) -> _FailingAgent:
        return _FailingAgent(model, output_type, system_prompt)

    monkeypatch.setattr(gateway_mod, "Agent", _agent)
    gw = PydanticAIModelGateway("test", tool_schemas=TOOLS)

    with pytest.raises(ModelUnavailable) as exc_info:
        await gw.execute_step("s", [], [], "t", "b")
    with pytest.raises(ModelUnavailable):
        await gw.summarize("{}", [], [])

    assert exc_info.value.message == "upstream timeout"
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_agent_receives_structured_output_type(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[Dict[str, Any]] = []

    @dataclass
    class _Result:
        output: Any

    class _FakeAgent:
        def __init__(self, model: Any, *, output_type: Any, system_prompt: str) -> None:
            seen.append({"output_type": output_type, "system_prompt": system_prompt})

        async def run(self, prompt: str) -> _Result:
            return _Result(output=StepDecision(kind="text", text="ok"))

    monkeypatch.setattr(gateway_mod, "Agent", _FakeAgent)
    gw = PydanticAIModelGateway("test", tool_schemas=TOOLS)

    assert await gw.execute_step("s", [], [], "t", "b") == TextResult(text="ok")
    assert seen[0]["output_type"] is StepDecision
    assert seen[0]["system_prompt"] == BuiltinPromptProvider().get("executor/system")


def test_history_window_keeps_most_recent_messages() -> None:
    history = [ChatMessage(speaker=Speaker.user, content=str(i)) for i in range(5)]
    assert format_history(history, 2) == "user: 3\nuser: 4"
    assert format_history([], 2) == "(no messages yet)"


def test_render_and_provider() -> None:
    provider = BuiltinPromptProvider(prompts={"en": {"greet": "Hi {{ name }}, {{missing}}!"}}, version_id="v9")
    assert render(provider.get("greet"), {"name": "Ada"}) == "Hi Ada, !"
    assert provider.version() == "v9"
    with pytest.raises(KeyError):
        provider.get("nope")
