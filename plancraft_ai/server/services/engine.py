"""
Engine Service.

Owns the long-lived objects behind the API: repositories, the shared HTTP
client, the tool registry and the ``PlanExecutor``. A single instance is
created lazily and shared by all requests.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from plancraft_ai.agent_core.factory import build_http_client, build_plan_executor, build_tool_registry
from plancraft_ai.agent_core.planning import RecurrenceScheduler
from plancraft_ai.agent_core.repos.interfaces import ObjectiveRepository, ProjectRepository
from plancraft_ai.agent_core.repos.memory import InMemoryObjectiveRepository, InMemoryProjectRepository
from plancraft_ai.agent_core.repos.sql import build_sql_repos
from plancraft_ai.agent_core.runtime import PlanExecutor
from plancraft_ai.agent_core.tools import ToolRegistry
from plancraft_ai.core.logging_config import get_logger
from plancraft_ai.server.core import database
from plancraft_ai.server.core.config import Settings, settings

logger = get_logger(__name__)


@dataclass
class EngineService:
    objectives: ObjectiveRepository
    projects: ProjectRepository
    executor: PlanExecutor
    tools: ToolRegistry
    client: Optional[httpx.AsyncClient] = None

    @property
    def scheduler(self) -> RecurrenceScheduler:
        return RecurrenceScheduler(objectives=self.objectives)

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()


def create_engine_service(cfg: Settings = settings) -> EngineService:
    """Wire repositories and the executor from settings."""
    if database.async_session_maker is not None:
        repos = build_sql_repos(session_factory=database.async_session_maker)
        objectives: ObjectiveRepository = repos.objectives
        projects: ProjectRepository = repos.projects
        logger.info("Using SQL repositories")
    else:
        objectives = InMemoryObjectiveRepository()
        projects = InMemoryProjectRepository()
        logger.warning("DATABASE_URL is not set; objectives are kept in memory only")

    client = build_http_client(cfg)
    executor = build_plan_executor(
        objectives=objectives,
        projects=projects,
        client=client,
        cfg=cfg,
        session_factory=database.async_session_maker,
    )
    return EngineService(
        objectives=objectives,
        projects=projects,
        executor=executor,
        tools=build_tool_registry(),
        client=client,
    )


async def run_recurrence_loop(service: EngineService, interval_seconds: float) -> None:
    """Call ``RecurrenceScheduler.run_due`` every ``interval_seconds`` until cancelled."""
    scheduler = service.scheduler
    while True:
        try:
            restarted = await scheduler.run_due()
            if restarted:
                logger.info(f"Restarted {len(restarted)} recurring objective(s)")
        except Exception as e:
            logger.error(f"Recurrence scheduler pass failed: {e}", exc_info=True)
        await asyncio.sleep(interval_seconds)


_engine_service: Optional[EngineService] = None


def get_engine_service() -> EngineService:
    global _engine_service
    if _engine_service is None:
        _engine_service = create_engine_service()
    return _engine_service


async def shutdown_engine_service() -> None:
    global _engine_service
    if _engine_service is not None:
        await _engine_service.aclose()
        _engine_service = None
