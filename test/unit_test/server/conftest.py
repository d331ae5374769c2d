from typing import AsyncGenerator

import httpx
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from plancraft_ai.agent_core.factory import build_plan_executor, build_tool_registry
from plancraft_ai.agent_core.repos.memory import InMemoryObjectiveRepository, InMemoryProjectRepository
from plancraft_ai.agent_core.schemas.domain import Objective, Plan, PlanStatus, Project, TextResult
from plancraft_ai.server.core.config import Settings
from plancraft_ai.server.main import app
from plancraft_ai.server.services.engine import EngineService, get_engine_service


class EchoGateway:
    async def execute_step(self, description, history, assets, objective_title, objective_brief, *, recurrence_context=None):
        return TextResult(text=f"Done: {description}")

    async def summarize(self, tool_output_description, history, assets):
        return TextResult(text="summary")


@pytest_asyncio.fixture(name="engine_service")
async def engine_service_fixture() -> AsyncGenerator[EngineService, None]:
    """In-memory engine holding one approved two-step objective ``o1``."""
    objectives = InMemoryObjectiveRepository()
    projects = InMemoryProjectRepository()
    await projects.create(Project(id="p1", name="Acme"))
    await objectives.create(
        Objective(
            id="o1",
            project_id="p1",
            title="Spring launch",
            plan=Plan(steps=["Step A", "Step B"], status=PlanStatus.approved),
        )
    )
    await objectives.create(Objective(id="o2", project_id="p1", title="Draft", plan=Plan(steps=["x"])))

    client = httpx.AsyncClient()
    executor = build_plan_executor(
        objectives=objectives,
        projects=projects,
        client=client,
        cfg=Settings(_env_file=None),
        gateway=EchoGateway(),
    )
    service = EngineService(
        objectives=objectives, projects=projects, executor=executor, tools=build_tool_registry(), client=client
    )
    yield service
    await service.aclose()


@pytest_asyncio.fixture(name="client")
async def client_fixture(engine_service: EngineService) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_engine_service] = lambda: engine_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
    app.dependency_overrides.clear()
