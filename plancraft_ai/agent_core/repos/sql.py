from __future__ import annotations

"""SQLAlchemy async repository implementations.

This module provides a Postgres-backed persistence implementation for the
repository interfaces defined in ``plancraft_ai.agent_core.repos.interfaces``.

Usage
-----

Typical wiring (tests or application setup):

- Create an async engine with ``create_engine``.
- Create tables with ``create_all`` (for tests/dev).
- Create a session factory with ``create_sessionmaker``.
- Build repository instances with ``build_sql_repos``.
- Build the asset vector index with ``SqlVectorIndex`` when an embedding
  service is configured.

Transaction model
-----------------

Each repository method opens an ``AsyncSession``, performs its operation, and
commits. The plan executor writes an objective once per ``advance`` call, so a
step's plan, chat and asset changes become durable together.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..errors import ObjectiveConflict, ObjectiveNotFound, ProjectNotFound
from ..schemas.domain import Asset, Objective, ObjectiveUpdate, Project
from .interfaces import ObjectiveRepository, ProjectRepository, VectorIndex
from .memory import euclidean_distance
from .models import AssetVectorRow, Base, ObjectiveRow, ProjectRow

_PROJECT_COLUMNS = {"id", "name", "description", "assets"}


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    The helper normalizes Postgres URLs to ensure the async driver is used.
    For example, it rewrites ``postgresql://`` and other variants to
    ``postgresql+asyncpg://``.
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    if url.startswith("sqlite"):
        return create_async_engine(url)
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` with safe defaults for this project."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables for the current ORM metadata.

    This is mainly intended for tests and local development.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _objective_to_row_values(objective: Objective) -> Dict[str, Any]:
    data = objective.model_dump(mode="json")
    return {
        "project_id": objective.project_id,
        "title": objective.title,
        "brief": objective.brief,
        "plan": data["plan"],
        "plan_status": objective.plan.status.value,
        "current_step_index": objective.plan.current_step_index,
        "chat_history": data["chat_history"],
        "assets": data["assets"],
        "is_recurring": objective.is_recurring,
        "recurrence_rule": data["recurrence_rule"],
        "next_run_time": objective.next_run_time,
        "original_plan": data["original_plan"],
        "current_recurrence_context": objective.current_recurrence_context,
        "created_at": objective.created_at,
        "updated_at": objective.updated_at,
    }


def _objective_from_row(row: ObjectiveRow) -> Objective:
    return Objective.model_validate(
        {
            "id": row.id,
            "project_id": row.project_id,
            "title": row.title,
            "brief": row.brief,
            "plan": row.plan,
            "chat_history": row.chat_history or [],
            "assets": row.assets or [],
            "is_recurring": row.is_recurring,
            "recurrence_rule": row.recurrence_rule,
            "next_run_time": row.next_run_time,
            "original_plan": row.original_plan,
            "current_recurrence_context": row.current_recurrence_context,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _project_from_row(row: ProjectRow) -> Project:
    return Project.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "assets": row.assets or [],
            **(row.integrations or {}),
        }
    )


@dataclass(frozen=True)
class SqlObjectiveRepository(ObjectiveRepository):
    """SQL implementation of ``ObjectiveRepository``."""

    session_factory: async_sessionmaker[AsyncSession]

    async def create(self, objective: Objective) -> None:
        """
        Persist a new objective.

        Args:
            objective: The objective domain object to insert.
        """
        async with self.session_factory() as s:
            s.add(ObjectiveRow(id=objective.id, **_objective_to_row_values(objective)))
            await s.commit()

    async def find_by_id(self, objective_id: str) -> Optional[Objective]:
        async with self.session_factory() as s:
            row = await s.get(ObjectiveRow, objective_id)
            if row is None:
                return None
            return _objective_from_row(row)

    async def update(
        self, objective_id: str, changes: ObjectiveUpdate, *, expected_step_index: Optional[int] = None
    ) -> Objective:
        """
        Apply a partial update inside a single transaction.

        The row is loaded ``FOR UPDATE`` (a no-op on SQLite), the set fields of
        ``changes`` are applied and validated through the domain model, and
        every column is written back. With ``expected_step_index`` the write is
        refused when another process already moved the plan cursor.
        """
        async with self.session_factory() as s:
            row = await s.get(ObjectiveRow, objective_id, with_for_update=True)
            if row is None:
                raise ObjectiveNotFound(objective_id)
            if expected_step_index is not None and row.current_step_index != expected_step_index:
                raise ObjectiveConflict(
                    objective_id, expected_step_index=expected_step_index, actual_step_index=row.current_step_index
                )
            current = _objective_from_row(row)
            merged = Objective.model_validate(
                {**current.model_dump(), **changes.changes(), "updated_at": _utc_now()}
            )
            for column, value in _objective_to_row_values(merged).items():
                setattr(row, column, value)
            await s.commit()
            return merged

    async def list_recurring(self) -> list[Objective]:
        async with self.session_factory() as s:
            stmt = select(ObjectiveRow).where(ObjectiveRow.is_recurring.is_(True)).order_by(ObjectiveRow.created_at)
            result = await s.execute(stmt)
            return [_objective_from_row(row) for row in result.scalars().all()]


@dataclass(frozen=True)
class SqlProjectRepository(ProjectRepository):
    """SQL implementation of ``ProjectRepository``."""

    session_factory: async_sessionmaker[AsyncSession]

    async def create(self, project: Project) -> None:
        data = project.model_dump(mode="json")
        async with self.session_factory() as s:
            s.add(
                ProjectRow(
                    id=project.id,
                    name=project.name,
                    description=project.description,
                    assets=data["assets"],
                    integrations={k: v for k, v in data.items() if k not in _PROJECT_COLUMNS},
                )
            )
            await s.commit()

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        async with self.session_factory() as s:
            row = await s.get(ProjectRow, project_id)
            if row is None:
                return None
            return _project_from_row(row)

    async def add_asset(self, project_id: str, asset: Asset) -> None:
        """
        Add or replace an asset in the project's library.

        Raises:
            ProjectNotFound: If the project does not exist.
        """
        async with self.session_factory() as s:
            row = await s.get(ProjectRow, project_id)
            if row is None:
                raise ProjectNotFound(project_id)
            kept = [a for a in (row.assets or []) if a.get("asset_id") != asset.asset_id]
            row.assets = kept + [asset.model_dump(mode="json")]
            await s.commit()


@dataclass(frozen=True)
class SqlVectorIndex(VectorIndex):
    """
    ``VectorIndex`` stored in ``pc_asset_vectors``.

    Vectors are kept as JSON arrays and ranked by Euclidean distance in
    process, one project at a time. Stored vectors whose dimension differs
    from the query (an embedding model change) are skipped.
    """

    session_factory: async_sessionmaker[AsyncSession]
    embedder: Callable[[str], Awaitable[list[float]]]

    async def embed(self, text: str) -> list[float]:
        return list(await self.embedder(text))

    async def upsert(self, project_id: str, asset_id: str, vector: Sequence[float]) -> None:
        values = [float(v) for v in vector]
        async with self.session_factory() as s:
            row = await s.get(AssetVectorRow, (project_id, asset_id))
            if row is None:
                row = AssetVectorRow(project_id=project_id, asset_id=asset_id)
                s.add(row)
            row.vector = values
            row.dimensions = len(values)
            row.updated_at = _utc_now()
            await s.commit()

    async def query(self, project_id: str, vector: Sequence[float], top_n: int) -> list[str]:
        if top_n <= 0:
            return []
        async with self.session_factory() as s:
            stmt = select(AssetVectorRow.asset_id, AssetVectorRow.vector).where(
                AssetVectorRow.project_id == project_id, AssetVectorRow.dimensions == len(vector)
            )
            rows = (await s.execute(stmt)).all()
        ranked = sorted(rows, key=lambda row: euclidean_distance(vector, row.vector))
        return [row.asset_id for row in ranked[:top_n]]

@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories."""

    objectives: SqlObjectiveRepository
    projects: SqlProjectRepository


def build_sql_repos(*, session_factory: async_sessionmaker[AsyncSession]) -> SqlRepoBundle:
    """Build a ``SqlRepoBundle`` from a session factory."""
    return SqlRepoBundle(
        objectives=SqlObjectiveRepository(session_factory=session_factory),
        projects=SqlProjectRepository(session_factory=session_factory),
    )
