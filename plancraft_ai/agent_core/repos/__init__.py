"""Repository interfaces and implementations for objective persistence.

The repository layer is the persistence boundary of the plan executor.

Responsibilities
----------------

- Provide small async interfaces (Protocols) the engine depends on:
  objectives, projects and the asset vector index.
- Ship an in-memory implementation (``repos.memory``) for local runs and tests
  and an async SQLAlchemy implementation (``repos.sql``).

The SQL implementation commits at repository-method boundaries, so each
``advance`` call persists its step with a single ``update``.
"""

from .interfaces import ObjectiveRepository, ProjectRepository, VectorIndex

__all__ = [
    "ObjectiveRepository",
    "ProjectRepository",
    "VectorIndex",
]
