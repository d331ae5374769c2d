from __future__ import annotations

"""In-memory repository and vector index implementations.

Used for local runs without a database and as realistic fakes in tests. The
stores hand out deep copies so callers never share state with the store, which
mirrors how the SQL repositories behave.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional, Sequence

from ..errors import ObjectiveConflict, ObjectiveNotFound, ProjectNotFound
from ..schemas.domain import Asset, Objective, ObjectiveUpdate, Project
from .interfaces import ObjectiveRepository, ProjectRepository, VectorIndex


class InMemoryObjectiveRepository(ObjectiveRepository):
    def __init__(self) -> None:
        self._by_id: Dict[str, Objective] = {}

    async def create(self, objective: Objective) -> None:
        self._by_id[objective.id] = objective.model_copy(deep=True)

    async def find_by_id(self, objective_id: str) -> Optional[Objective]:
        found = self._by_id.get(objective_id)
        return found.model_copy(deep=True) if found is not None else None

    async def update(
        self, objective_id: str, changes: ObjectiveUpdate, *, expected_step_index: Optional[int] = None
    ) -> Objective:
        current = self._by_id.get(objective_id)
        if current is None:
            raise ObjectiveNotFound(objective_id)
        if expected_step_index is not None and current.plan.current_step_index != expected_step_index:
            raise ObjectiveConflict(
                objective_id,
                expected_step_index=expected_step_index,
                actual_step_index=current.plan.current_step_index,
            )
        updated = current.model_copy(
            update={**changes.changes(), "updated_at": datetime.now(timezone.utc)},
            deep=True,
        )
        self._by_id[objective_id] = Objective.model_validate(updated.model_dump())
        return self._by_id[objective_id].model_copy(deep=True)

    async def list_recurring(self) -> list[Objective]:
        return [o.model_copy(deep=True) for o in self._by_id.values() if o.is_recurring]


class InMemoryProjectRepository(ProjectRepository):
    def __init__(self) -> None:
        self._by_id: Dict[str, Project] = {}

    async def create(self, project: Project) -> None:
        self._by_id[project.id] = project.model_copy(deep=True)

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        found = self._by_id.get(project_id)
        return found.model_copy(deep=True) if found is not None else None

    async def add_asset(self, project_id: str, asset: Asset) -> None:
        project = self._by_id.get(project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        kept = [a for a in project.assets if a.asset_id != asset.asset_id]
        project.assets = kept + [asset.model_copy(deep=True)]


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise ValueError(f"vector dimensions differ: {len(a)} != {len(b)}")
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


@dataclass
class InMemoryVectorIndex(VectorIndex):
    """Brute-force vector index ordered by Euclidean distance.

    ``embedder`` turns text into a vector; production wiring passes
    ``EmbeddingClient.embed``.
    """

    embedder: Callable[[str], Awaitable[list[float]]]
    _vectors: Dict[str, Dict[str, list[float]]] = field(default_factory=dict)

    async def embed(self, text: str) -> list[float]:
        return list(await self.embedder(text))

    async def upsert(self, project_id: str, asset_id: str, vector: Sequence[float]) -> None:
        self._vectors.setdefault(project_id, {})[asset_id] = list(vector)

    async def query(self, project_id: str, vector: Sequence[float], top_n: int) -> list[str]:
        if top_n <= 0:
            return []
        stored = self._vectors.get(project_id) or {}
        ranked = sorted(stored.items(), key=lambda item: euclidean_distance(vector, item[1]))
        return [asset_id for asset_id, _ in ranked[:top_n]]
