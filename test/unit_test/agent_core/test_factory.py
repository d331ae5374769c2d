from __future__ import annotations

import httpx
import pytest
from pydantic_ai.models.test import TestModel
from sqlalchemy.ext.asyncio import async_sessionmaker

import plancraft_ai.agent_core.factory as factory
from plancraft_ai.agent_core.factory import (
    build_adapter_deps,
    build_adapter_registry,
    build_plan_executor,
    build_tool_registry,
    build_vector_index,
)
from plancraft_ai.agent_core.gateway import PydanticAIModelGateway
from plancraft_ai.agent_core.repos.memory import (
    InMemoryObjectiveRepository,
    InMemoryProjectRepository,
    InMemoryVectorIndex,
)
from plancraft_ai.agent_core.repos.sql import SqlVectorIndex
from plancraft_ai.agent_core.runtime import ObjectiveLocks, PlanExecutor
from plancraft_ai.agent_core.schemas.domain import Objective, Plan, PlanStatus, Project, TextResult
from plancraft_ai.agent_core.tools import ToolName
from plancraft_ai.server.core.config import Settings


def _settings(**env: str) -> Settings:
    return Settings(_env_file=None, **env)


def test_registries_cover_every_tool() -> None:
    tools = build_tool_registry()
    adapters = build_adapter_registry()

    expected = {t.value for t in ToolName}
    assert {s["name"] for s in tools.schemas()} == expected
    assert set(adapters.names()) == expected


@pytest.mark.asyncio
async def test_vector_index_requires_embedding_endpoint() -> None:
    async with httpx.AsyncClient() as client:
        assert build_vector_index(client, _settings()) is None
        index = build_vector_index(client, _settings(EMBEDDING_API_URL="http://mock-embed/v1/embeddings"))

    assert isinstance(index, InMemoryVectorIndex)


@pytest.mark.asyncio
async def test_vector_index_is_stored_in_the_database_when_one_is_configured() -> None:
    sessions = async_sessionmaker()
    cfg = _settings(EMBEDDING_API_URL="http://mock-embed/v1/embeddings")
    async with httpx.AsyncClient() as client:
        index = build_vector_index(client, cfg, session_factory=sessions)
        assert build_vector_index(client, _settings(), session_factory=sessions) is None

    assert isinstance(index, SqlVectorIndex)
    assert index.session_factory is sessions


@pytest.mark.asyncio
async def test_adapter_deps_follow_settings() -> None:
    cfg = _settings(
        FACEBOOK_APP_ACCESS_TOKEN="app-tok",
        PLANCRAFT_AI_BROWSE_MAX_CHARS="120",
        PLANCRAFT_AI_SEMANTIC_SEARCH_TOP_N="3",
        IMAGE_GENERATION_API_URL="http://mock-media/image",
    )
    async with httpx.AsyncClient() as client:
        deps = build_adapter_deps(client, cfg)

    assert deps.facebook_app_access_token == "app-tok"
    assert deps.semantic_search_top_n == 3
    assert deps.web.max_chars == 120
    assert deps.media.image_api_url == "http://mock-media/image"
    assert deps.vector_index is None


@pytest.mark.asyncio
async def test_build_plan_executor_with_explicit_model(monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_model(config):
        raise AssertionError("create_model must not be called when a model is given")

    monkeypatch.setattr(factory, "create_model", _no_model)
    locks = ObjectiveLocks()
    async with httpx.AsyncClient() as client:
        executor = build_plan_executor(
            objectives=InMemoryObjectiveRepository(),
            projects=InMemoryProjectRepository(),
            client=client,
            cfg=_settings(),
            model=TestModel(),
            locks=locks,
        )

    assert isinstance(executor, PlanExecutor)
    assert executor.locks is locks


class _EchoGateway:
    async def execute_step(self, description, history, assets, objective_title, objective_brief, *, recurrence_context=None):
        return TextResult(text=f"done: {description}")

    async def summarize(self, tool_output_description, history, assets):
        return TextResult(text="summary")


@pytest.mark.asyncio
async def test_build_plan_executor_with_custom_gateway_advances() -> None:
    objectives = InMemoryObjectiveRepository()
    projects = InMemoryProjectRepository()
    await projects.create(Project(id="p1", name="Acme"))
    await objectives.create(
        Objective(id="o1", project_id="p1", title="t", plan=Plan(steps=["only"], status=PlanStatus.approved))
    )

    async with httpx.AsyncClient() as client:
        executor = build_plan_executor(
            objectives=objectives, projects=projects, client=client, cfg=_settings(), gateway=_EchoGateway()
        )
        outcome = await executor.advance("o1")

    assert outcome.plan_status == PlanStatus.completed
    assert outcome.message.endswith("done: only")


def test_default_gateway_is_pydantic_ai() -> None:
    gateway = PydanticAIModelGateway(TestModel(), tool_schemas=build_tool_registry().schemas())
    assert gateway.model_name == "test"
