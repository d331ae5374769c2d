from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from plancraft_ai.agent_core.capabilities import AdapterContext, AdapterDeps, AdapterRegistry, AdapterResult
from plancraft_ai.agent_core.capabilities.builtin import CreateImageAssetAdapter
from plancraft_ai.agent_core.dispatcher import (
    TRUNCATION_MARKER,
    ToolDispatcher,
    ToolExecutionFailed,
    ToolPreconditionFailed,
    ToolSucceeded,
    UnknownTool,
    asset_embedding_text,
)
from plancraft_ai.agent_core.integrations import IntegrationError, MediaGenerationClient
from plancraft_ai.agent_core.repos.memory import InMemoryProjectRepository, InMemoryVectorIndex
from plancraft_ai.agent_core.schemas.domain import Asset, Project, ToolInvocation
from plancraft_ai.agent_core.tools import BUILTIN_TOOLS, ToolRegistry


@dataclass
class _RecordingAdapter:
    name: str
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ()
    result: AdapterResult = field(default_factory=lambda: AdapterResult(ok=True, output={"done": True}))
    raises: Exception | None = None
    calls: List[Dict[str, Any]] = field(default_factory=list)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        self.calls.append(args)
        if self.raises is not None:
            raise self.raises
        return self.result


class _Media:
    async def generate_image(self, prompt: str) -> str:
        return "https://cdn.example/gen.png"


class _CountingIndex(InMemoryVectorIndex):
    def __init__(self) -> None:
        super().__init__(embedder=self._embed)
        self.embedded: List[str] = []
        self.upserts: List[Tuple[str, str]] = []

    async def _embed(self, text: str) -> list[float]:
        self.embedded.append(text)
        return [1.0, 0.0]

    async def upsert(self, project_id: str, asset_id: str, vector) -> None:
        self.upserts.append((project_id, asset_id))
        await super().upsert(project_id, asset_id, vector)


async def _dispatcher(*adapters: Any, project: Project | None = None, index=None, deps=None):
    projects = InMemoryProjectRepository()
    await projects.create(project or Project(id="p1", name="Acme"))
    reg = AdapterRegistry()
    for adapter in adapters:
        reg.register(adapter)
    dispatcher = ToolDispatcher(
        registry=ToolRegistry(BUILTIN_TOOLS),
        adapters=reg,
        projects=projects,
        deps=deps or AdapterDeps(),
        vector_index=index,
        max_chars=4000,
    )
    return dispatcher, projects


@pytest.mark.asyncio
async def test_unknown_tool_is_a_result_not_an_exception() -> None:
    dispatcher, _ = await _dispatcher()
    result = await dispatcher.dispatch(ToolInvocation(name="send_fax", arguments={}), "p1")

    assert isinstance(result, UnknownTool)
    assert result.message == "Tool 'send_fax' not found in the tool registry."
    assert "send_fax" in result.to_text()


@pytest.mark.asyncio
async def test_invalid_arguments_never_reach_adapter() -> None:
    adapter = _RecordingAdapter(name="create_image_asset")
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="create_image_asset", arguments={}), "p1")

    assert isinstance(result, ToolPreconditionFailed)
    assert result.message == "Missing required argument 'prompt' for tool create_image_asset."
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_missing_project_configuration_never_reaches_adapter() -> None:
    adapter = _RecordingAdapter(
        name="post_to_linkedin",
        required_project_fields=("linkedin_access_token", "linkedin_user_id"),
        precondition_message="LinkedIn account not connected or credentials missing for this project.",
    )
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="post_to_linkedin", arguments={"content": "hi"}), "p1")

    assert isinstance(result, ToolPreconditionFailed)
    assert result.message == "LinkedIn account not connected or credentials missing for this project."
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_unknown_project_is_a_precondition_failure() -> None:
    adapter = _RecordingAdapter(name="browse_web")
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="browse_web", arguments={"url": "https://x"}), "nope")

    assert isinstance(result, ToolPreconditionFailed)
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_tool_without_adapter_is_an_execution_failure() -> None:
    dispatcher, _ = await _dispatcher()
    result = await dispatcher.dispatch(ToolInvocation(name="browse_web", arguments={"url": "https://x"}), "p1")
    assert isinstance(result, ToolExecutionFailed)


@pytest.mark.asyncio
async def test_integration_error_maps_to_execution_failure() -> None:
    adapter = _RecordingAdapter(
        name="browse_web", raises=IntegrationError("browse_web failed: API Error 502", status_code=502)
    )
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="browse_web", arguments={"url": "https://x"}), "p1")

    assert isinstance(result, ToolExecutionFailed)
    assert result.message == "browse_web failed: API Error 502"
    assert result.payload == {"status_code": 502}


@pytest.mark.asyncio
async def test_unexpected_adapter_exception_maps_to_execution_failure() -> None:
    adapter = _RecordingAdapter(name="browse_web", raises=RuntimeError("kaput"))
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="browse_web", arguments={"url": "https://x"}), "p1")

    assert isinstance(result, ToolExecutionFailed)
    assert "kaput" in result.message


@pytest.mark.asyncio
async def test_adapter_reported_failure_maps_to_execution_failure() -> None:
    adapter = _RecordingAdapter(name="browse_web", result=AdapterResult(ok=False, output={"error": "blocked"}))
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="browse_web", arguments={"url": "https://x"}), "p1")

    assert isinstance(result, ToolExecutionFailed)
    assert result.message == "blocked"


@pytest.mark.asyncio
async def test_created_assets_are_stored_and_indexed_exactly_once() -> None:
    index = _CountingIndex()
    dispatcher, projects = await _dispatcher(
        CreateImageAssetAdapter(), index=index, deps=AdapterDeps(media=_Media(), vector_index=index)
    )

    result = await dispatcher.dispatch(
        ToolInvocation(name="create_image_asset", arguments={"prompt": "Blue sneakers"}), "p1"
    )

    assert isinstance(result, ToolSucceeded)
    (asset,) = result.assets
    stored = await projects.find_by_id("p1")
    assert [a.asset_id for a in stored.assets] == [asset.asset_id]
    assert index.upserts == [("p1", asset.asset_id)]
    assert index.embedded == [asset_embedding_text(asset)]
    assert await index.query("p1", [1.0, 0.0], 5) == [asset.asset_id]


def test_asset_embedding_text() -> None:
    asset = Asset(
        asset_id="img_1", name="Logo", type="image", description="Brand logo", prompt="a fox", tags={"b", "a"}
    )
    assert asset_embedding_text(asset) == "Logo Brand logo a fox a b"


def test_result_text_is_bounded_with_marker() -> None:
    result = ToolSucceeded(tool_name="browse_web", payload={"text": "x" * 10_000})

    text = result.to_text(200)

    assert len(text) == 200
    assert text.endswith(TRUNCATION_MARKER)


def test_short_result_text_is_plain_json() -> None:
    result = ToolPreconditionFailed(tool_name="post_to_linkedin", message="not connected")
    assert json.loads(result.to_text()) == {
        "status": "precondition_failed",
        "tool": "post_to_linkedin",
        "message": "not connected",
    }


def test_result_text_respects_bounds_smaller_than_marker() -> None:
    result = ToolSucceeded(tool_name="browse_web", payload={"text": "x" * 100})

    assert result.to_text(5) == result.to_text(10_000)[:5]
    assert result.to_text(0) == ""


@pytest.mark.asyncio
async def test_missing_deployment_client_never_reaches_adapter() -> None:
    adapter = _RecordingAdapter(name="create_image_asset", required_deps=("media",))
    dispatcher, _ = await _dispatcher(adapter)

    result = await dispatcher.dispatch(ToolInvocation(name="create_image_asset", arguments={"prompt": "sunset"}), "p1")

    assert isinstance(result, ToolPreconditionFailed)
    assert result.message == "Integration not configured for this deployment: media."
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_unconfigured_generation_endpoint_is_a_precondition_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request to {request.url}")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        dispatcher, projects = await _dispatcher(
            CreateImageAssetAdapter(), deps=AdapterDeps(media=MediaGenerationClient(client))
        )
        result = await dispatcher.dispatch(
            ToolInvocation(name="create_image_asset", arguments={"prompt": "sunset"}), "p1"
        )

    assert isinstance(result, ToolPreconditionFailed)
    assert result.message == "Image generation service is not configured by the administrator."
    assert (await projects.find_by_id("p1")).assets == []
