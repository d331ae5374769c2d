from __future__ import annotations

"""Adapter protocol and execution data models.

An adapter is the concrete execution unit behind one tool name.

The ``ToolDispatcher`` resolves ``ToolInvocation.name`` through an
``AdapterRegistry`` and executes the implementation with an
``AdapterContext`` once arguments and project preconditions have been
checked.

Adapters should:

- return structured outputs in ``AdapterResult.output``,
- name the ``AdapterDeps`` clients they need in ``required_deps``; the
  dispatcher reports a missing one as a precondition failure,
- report expected failures as ``ok=False`` with an ``error`` entry instead of
  raising (integration clients may still raise ``IntegrationError``; the
  dispatcher maps it),
- return created assets in ``AdapterResult.assets`` and leave persisting and
  indexing them to the dispatcher.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from ..integrations import (
    FacebookGraphClient,
    LinkedInClient,
    MediaGenerationClient,
    TikTokClient,
    WebPageReader,
    WordPressClient,
)
from ..repos.interfaces import VectorIndex
from ..schemas.domain import Asset, Project


@dataclass(frozen=True)
class AdapterDeps:
    """Integration clients shared by every adapter.

    Any client may be None when the deployment does not configure the service.
    Adapters needing one list its field name in ``required_deps``.
    """

    media: Optional[MediaGenerationClient] = None
    vector_index: Optional[VectorIndex] = None
    linkedin: Optional[LinkedInClient] = None
    facebook: Optional[FacebookGraphClient] = None
    tiktok: Optional[TikTokClient] = None
    wordpress: Optional[WordPressClient] = None
    web: Optional[WebPageReader] = None
    facebook_app_access_token: Optional[str] = None
    semantic_search_top_n: int = 5


@dataclass(frozen=True)
class AdapterContext:
    """Execution context passed to adapter implementations.

    Attributes
    ----------
    project:
        The project the objective belongs to; carries per-project credentials
        and the asset library.
    deps:
        Shared integration clients bundled in ``AdapterDeps``.
    """

    project: Project
    deps: AdapterDeps


@dataclass(frozen=True)
class AdapterResult:
    """Structured adapter execution result."""

    ok: bool
    output: Dict[str, Any]
    assets: List[Asset] = field(default_factory=list)


class Adapter(Protocol):
    """Protocol for adapter implementations."""

    name: str
    required_project_fields: Tuple[str, ...]
    precondition_message: str
    required_deps: Tuple[str, ...]

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult: ...


def missing_project_fields(adapter: Adapter, project: Project) -> List[str]:
    """Return the names of ``adapter.required_project_fields`` that are empty on ``project``."""
    return [name for name in adapter.required_project_fields if not getattr(project, name, None)]


def missing_deps(adapter: Adapter, deps: AdapterDeps) -> List[str]:
    """Return the names of ``adapter.required_deps`` that are unset on ``deps``."""
    return [name for name in getattr(adapter, "required_deps", ()) if getattr(deps, name, None) is None]
