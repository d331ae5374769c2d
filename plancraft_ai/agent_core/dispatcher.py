from __future__ import annotations

"""Tool dispatch: from a model-issued ``ToolInvocation`` to a ``ToolResult``.

``ToolDispatcher.dispatch`` never raises for tool problems. Every outcome is
one of four result kinds:

- ``UnknownTool``: the name is not in the registry.
- ``ToolPreconditionFailed``: invalid arguments, unknown project, missing
  project configuration or a missing deployment integration. The adapter is
  never invoked, except when the adapter itself finds an integration
  endpoint unconfigured.
- ``ToolExecutionFailed``: the adapter raised or reported failure.
- ``ToolSucceeded``: the adapter's payload plus any assets it created. Those
  assets are already stored on the project and indexed when ``dispatch``
  returns.

Each result renders to bounded JSON text with ``to_text`` for the model.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List

from ..core.monitoring import log_tool_dispatch
from .capabilities.base import AdapterContext, AdapterDeps, missing_deps, missing_project_fields
from .capabilities.registry import AdapterRegistry
from .integrations.errors import IntegrationError, IntegrationNotConfiguredError
from .repos.interfaces import ProjectRepository, VectorIndex
from .schemas.domain import Asset, ToolInvocation
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "... [truncated]"


@dataclass(frozen=True)
class ToolResult:
    kind: ClassVar[str] = "tool_result"

    tool_name: str
    message: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)
    assets: List[Asset] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.kind, "tool": self.tool_name}
        if self.message:
            data["message"] = self.message
        if self.payload:
            data["result"] = self.payload
        return data

    def to_text(self, max_chars: int = 4000) -> str:
        """Serialize to JSON, cut to ``max_chars`` (marker included) when longer.

        Bounds too small to hold the marker get a plain cut.
        """
        text = json.dumps(self.to_dict(), ensure_ascii=False, default=str)
        if len(text) <= max_chars:
            return text
        if max_chars < len(TRUNCATION_MARKER):
            return text[: max(max_chars, 0)]
        return text[: max_chars - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


@dataclass(frozen=True)
class ToolSucceeded(ToolResult):
    kind: ClassVar[str] = "succeeded"

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class UnknownTool(ToolResult):
    kind: ClassVar[str] = "unknown_tool"


@dataclass(frozen=True)
class ToolPreconditionFailed(ToolResult):
    kind: ClassVar[str] = "precondition_failed"


@dataclass(frozen=True)
class ToolExecutionFailed(ToolResult):
    kind: ClassVar[str] = "execution_failed"


def asset_embedding_text(asset: Asset) -> str:
    parts = [asset.name, asset.description or "", asset.prompt or "", " ".join(sorted(asset.tags))]
    return " ".join(p for p in parts if p)


class ToolDispatcher:
    """
    Validate, resolve and execute tool invocations for a project.

    Args:
        registry: Catalogue used for name lookup and argument validation.
        adapters: Tool name to adapter mapping.
        projects: Source of project configuration; receives created assets.
        deps: Integration clients handed to adapters.
        vector_index: Index that created assets are embedded into; when None,
            assets are stored but not indexed.
        max_chars: Bound applied by callers through ``to_text``.
    """

    def __init__(
        self,
        *,
        registry: ToolRegistry,
        adapters: AdapterRegistry,
        projects: ProjectRepository,
        deps: AdapterDeps,
        vector_index: VectorIndex | None = None,
        max_chars: int = 4000,
    ) -> None:
        self._registry = registry
        self._adapters = adapters
        self._projects = projects
        self._deps = deps
        self._vector_index = vector_index
        self.max_chars = max_chars

    async def dispatch(self, invocation: ToolInvocation, project_id: str) -> ToolResult:
        started = time.perf_counter()
        result = await self._dispatch(invocation, project_id)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Tool '{invocation.name}' for project {project_id} finished: {result.kind} ({duration_ms:.0f}ms)")
        log_tool_dispatch(invocation.name, project_id, result.kind, duration_ms)
        return result

    async def _dispatch(self, invocation: ToolInvocation, project_id: str) -> ToolResult:
        name = invocation.name
        if not self._registry.has(name):
            return UnknownTool(tool_name=name, message=f"Tool '{name}' not found in the tool registry.")

        validation = self._registry.validate(invocation)
        if not validation.ok:
            return ToolPreconditionFailed(tool_name=name, message=" ".join(validation.errors))

        if not self._adapters.has(name):
            return ToolExecutionFailed(tool_name=name, message=f"No integration is installed for tool '{name}'.")
        adapter = self._adapters.get(name)

        project = await self._projects.find_by_id(project_id)
        if project is None:
            return ToolPreconditionFailed(tool_name=name, message=f"Project {project_id} not found.")

        missing = missing_project_fields(adapter, project)
        if missing:
            logger.debug(f"Tool '{name}' blocked, project {project_id} lacks: {', '.join(missing)}")
            return ToolPreconditionFailed(
                tool_name=name,
                message=adapter.precondition_message or f"Project configuration missing: {', '.join(missing)}.",
            )

        unset = missing_deps(adapter, self._deps)
        if unset:
            logger.debug(f"Tool '{name}' blocked, deployment lacks: {', '.join(unset)}")
            return ToolPreconditionFailed(
                tool_name=name, message=f"Integration not configured for this deployment: {', '.join(unset)}."
            )

        ctx = AdapterContext(project=project, deps=self._deps)
        try:
            outcome = await adapter.execute(ctx, args=validation.arguments)
        except IntegrationNotConfiguredError as e:
            logger.warning(f"Tool '{name}' blocked: {e.message}")
            return ToolPreconditionFailed(tool_name=name, message=e.message)
        except IntegrationError as e:
            logger.warning(f"Tool '{name}' integration error: {e.message}")
            payload = {"status_code": e.status_code} if e.status_code is not None else {}
            return ToolExecutionFailed(tool_name=name, message=e.message, payload=payload)
        except Exception as e:
            logger.exception(f"Tool '{name}' raised an unexpected error")
            return ToolExecutionFailed(tool_name=name, message=f"Error executing tool {name}: {e}")

        if not outcome.ok:
            error = outcome.output.get("error") if isinstance(outcome.output, dict) else None
            return ToolExecutionFailed(
                tool_name=name, message=str(error or f"Tool {name} reported a failure."), payload=outcome.output
            )

        try:
            for asset in outcome.assets:
                await self._store_asset(project_id, asset)
        except Exception as e:
            logger.exception(f"Tool '{name}' created assets that could not be stored")
            return ToolExecutionFailed(
                tool_name=name, message=f"Asset created but could not be saved: {e}", payload=outcome.output
            )

        return ToolSucceeded(tool_name=name, payload=outcome.output, assets=list(outcome.assets))

    async def _store_asset(self, project_id: str, asset: Asset) -> None:
        await self._projects.add_asset(project_id, asset)
        if self._vector_index is None:
            logger.debug(f"No vector index configured; asset {asset.asset_id} stored without embedding")
            return
        vector = await self._vector_index.embed(asset_embedding_text(asset))
        await self._vector_index.upsert(project_id, asset.asset_id, vector)
