from __future__ import annotations

"""Convenience factories for wiring the plan execution engine.

This module contains small helpers to build the default tool and adapter
registries, the integration clients, and a ready ``PlanExecutor``.

The intent is to keep application wiring and tests concise, while still
allowing deployments to provide their own model, prompts, repositories and
clients.
"""

from typing import Any, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from plancraft_ai.server.core.config import Settings, settings as default_settings

from .capabilities.base import AdapterDeps
from .capabilities.builtin import builtin_adapters
from .capabilities.registry import AdapterRegistry
from .dispatcher import ToolDispatcher
from .gateway import ModelGateway, PydanticAIModelGateway
from .integrations import (
    EmbeddingClient,
    FacebookGraphClient,
    LinkedInClient,
    MediaGenerationClient,
    TikTokClient,
    WebPageReader,
    WordPressClient,
)
from .model_provider import create_model
from .prompts import PromptProvider
from .repos.interfaces import ObjectiveRepository, ProjectRepository, VectorIndex
from .repos.memory import InMemoryVectorIndex
from .repos.sql import SqlVectorIndex
from .runtime import ExecutorDeps, ObjectiveLocks, PlanExecutor
from .tools import BUILTIN_TOOLS, ToolRegistry


def build_tool_registry() -> ToolRegistry:
    """Build the ``ToolRegistry`` holding the builtin tool catalogue."""
    return ToolRegistry(BUILTIN_TOOLS)


def build_adapter_registry() -> AdapterRegistry:
    """Build the default ``AdapterRegistry`` with one adapter per builtin tool."""
    reg = AdapterRegistry()
    for adapter in builtin_adapters():
        reg.register(adapter)
    return reg


def build_http_client(cfg: Settings = default_settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=cfg.engine.http_timeout_seconds, follow_redirects=True)


def build_vector_index(
    client: httpx.AsyncClient,
    cfg: Settings = default_settings,
    *,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> Optional[VectorIndex]:
    """
    Build the asset index backed by the embedding service.

    Returns None when no embedding service is configured. With a
    ``session_factory`` the vectors are stored in the database; otherwise
    they are kept in memory for the life of the process.
    """
    embedding = cfg.embedding
    if not embedding.api_url:
        return None
    embedder = EmbeddingClient(
        client=client,
        api_url=embedding.api_url,
        api_key=embedding.api_key.get_secret_value() if embedding.api_key else None,
        model=embedding.model,
    )
    if session_factory is not None:
        return SqlVectorIndex(session_factory=session_factory, embedder=embedder.embed)
    return InMemoryVectorIndex(embedder=embedder.embed)


def build_adapter_deps(
    client: httpx.AsyncClient,
    cfg: Settings = default_settings,
    *,
    vector_index: Optional[VectorIndex] = None,
) -> AdapterDeps:
    """Build the integration clients shared by all adapters from settings."""
    media = cfg.media
    facebook = cfg.facebook
    engine = cfg.engine
    return AdapterDeps(
        media=MediaGenerationClient(
            client=client,
            image_api_url=media.image_api_url,
            video_api_url=media.video_api_url,
            api_key=media.api_key.get_secret_value() if media.api_key else None,
        ),
        vector_index=vector_index,
        linkedin=LinkedInClient(client=client, api_url=cfg.linkedin.api_url),
        facebook=FacebookGraphClient(client=client, graph_api_url=facebook.graph_api_url),
        tiktok=TikTokClient(client=client, api_url=cfg.tiktok.api_url),
        wordpress=WordPressClient(client=client),
        web=WebPageReader(client=client, max_chars=engine.browse_max_chars),
        facebook_app_access_token=(
            facebook.app_access_token.get_secret_value() if facebook.app_access_token else None
        ),
        semantic_search_top_n=engine.semantic_search_top_n,
    )


def build_plan_executor(
    *,
    objectives: ObjectiveRepository,
    projects: ProjectRepository,
    client: httpx.AsyncClient,
    cfg: Settings = default_settings,
    model: Any | None = None,
    gateway: Optional[ModelGateway] = None,
    prompts: Optional[PromptProvider] = None,
    vector_index: Optional[VectorIndex] = None,
    locks: Optional[ObjectiveLocks] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> PlanExecutor:
    """
    Construct a ``PlanExecutor`` with the builtin tools.

    Args:
        objectives: Objective storage.
        projects: Project storage; receives generated assets.
        client: Shared HTTP client for all integrations.
        cfg: Settings to read integration endpoints and engine tuning from.
        model: Pydantic AI model; created from ``cfg.model`` when omitted.
        gateway: Fully custom model gateway; takes precedence over ``model``.
        prompts: Prompt provider for the default gateway.
        vector_index: Asset index; built from the embedding settings when omitted.
        locks: Lock table to share between executors.
        session_factory: Database sessions for the asset index; when given
            (and ``vector_index`` is omitted) embeddings are persisted.
    """
    engine = cfg.engine
    registry = build_tool_registry()
    if vector_index is None:
        vector_index = build_vector_index(client, cfg, session_factory=session_factory)

    if gateway is None:
        gateway = PydanticAIModelGateway(
            model if model is not None else create_model(cfg.model),
            tool_schemas=registry.schemas(),
            prompts=prompts,
            history_window=engine.history_window,
        )

    dispatcher = ToolDispatcher(
        registry=registry,
        adapters=build_adapter_registry(),
        projects=projects,
        deps=build_adapter_deps(client, cfg, vector_index=vector_index),
        vector_index=vector_index,
        max_chars=engine.tool_result_max_chars,
    )
    deps = ExecutorDeps(
        objectives=objectives,
        gateway=gateway,
        dispatcher=dispatcher,
        tool_result_max_chars=engine.tool_result_max_chars,
    )
    return PlanExecutor(deps=deps, locks=locks)
