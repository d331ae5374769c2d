from __future__ import annotations

"""Repository and index interface contracts.

The engine depends on these Protocols instead of concrete persistence
implementations.

Contract guidelines
-------------------

- All methods are async.
- Lookups return ``None`` for unknown ids; the engine decides whether that is
  an error (``ObjectiveNotFound``) or a recoverable condition (a tool
  precondition).
- ``ObjectiveRepository.update`` has partial-update semantics: fields not set
  on the ``ObjectiveUpdate`` are left unchanged. Given ``expected_step_index``
  it is a compare-and-set on the plan cursor and raises ``ObjectiveConflict``
  when the stored cursor differs.
- Returned domain objects are copies; mutating them never changes stored state
  until they are written back through ``update``.
"""

from typing import Optional, Protocol, Sequence

from ..schemas.domain import Asset, Objective, ObjectiveUpdate, Project


class ObjectiveRepository(Protocol):
    """Persist objectives with their plan, chat history and assets."""

    async def create(self, objective: Objective) -> None:
        """
        Persist a new objective.

        Args:
            objective: The objective to insert.
        """
        ...

    async def find_by_id(self, objective_id: str) -> Optional[Objective]:
        """
        Retrieve an objective by id.

        Args:
            objective_id: The objective identifier.

        Returns:
            The objective if found, else None.
        """
        ...

    async def update(
        self, objective_id: str, changes: ObjectiveUpdate, *, expected_step_index: Optional[int] = None
    ) -> Objective:
        """
        Apply a partial update.

        Args:
            objective_id: The objective identifier.
            changes: Fields to overwrite; unset fields are left unchanged.
            expected_step_index: When given, the update only applies if the
                stored plan cursor still equals this value.

        Returns:
            The stored objective after the update.

        Raises:
            ObjectiveNotFound: If the objective does not exist.
            ObjectiveConflict: If ``expected_step_index`` does not match.
        """
        ...

    async def list_recurring(self) -> list[Objective]:
        """Return every objective flagged as recurring."""
        ...


class ProjectRepository(Protocol):
    """Read projects (integration credentials) and record generated assets."""

    async def create(self, project: Project) -> None:
        """Persist a new project."""
        ...

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        """
        Retrieve a project by id.

        Args:
            project_id: The project identifier.

        Returns:
            The project if found, else None.
        """
        ...

    async def add_asset(self, project_id: str, asset: Asset) -> None:
        """
        Add an asset to the project's asset library.

        An asset with the same ``asset_id`` is replaced.

        Raises:
            ProjectNotFound: If the project does not exist.
        """
        ...


class VectorIndex(Protocol):
    """Embedding index used by asset creation and semantic asset search."""

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``."""
        ...

    async def upsert(self, project_id: str, asset_id: str, vector: Sequence[float]) -> None:
        """Insert or replace the vector stored for ``asset_id`` within ``project_id``."""
        ...

    async def query(self, project_id: str, vector: Sequence[float], top_n: int) -> list[str]:
        """Return up to ``top_n`` asset ids of ``project_id`` ordered by similarity."""
        ...
