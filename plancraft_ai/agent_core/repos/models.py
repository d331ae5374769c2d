from __future__ import annotations

"""SQLAlchemy ORM models for objective persistence.

These ORM models define the SQL schema used by
``plancraft_ai.agent_core.repos.sql``.

Design
------

Objectives are read and written as a whole by the plan executor (one read at
the start of ``advance``, one partial update at the end), so nested state is
stored in JSONB columns rather than normalized tables:

- ``plan``: steps, status, cursor and questions.
- ``chat_history``: the append-only message list.
- ``assets``: assets surfaced on this objective.

Asset embeddings live in ``pc_asset_vectors``, one row per project asset, so
semantic search survives restarts and is shared by every server process.

Plan status and cursor are duplicated into scalar columns so operators can
query progress without unpacking JSON.

Table names are prefixed with ``pc_`` to avoid collisions in shared databases.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class ObjectiveRow(Base):
    """Row model for ``pc_objectives``."""

    __tablename__ = "pc_objectives"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    project_id: Mapped[str] = mapped_column(String(64), index=True)

    title: Mapped[str] = mapped_column(Text)
    brief: Mapped[str] = mapped_column(Text, default="")

    plan: Mapped[Dict[str, Any]] = mapped_column(JSONB)
    plan_status: Mapped[str] = mapped_column(String(32), index=True)
    current_step_index: Mapped[int] = mapped_column(Integer, default=0)

    chat_history: Mapped[List[Dict[str, Any]]] = mapped_column(JSONB)
    assets: Mapped[List[Dict[str, Any]]] = mapped_column(JSONB)

    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    recurrence_rule: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    next_run_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    original_plan: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    current_recurrence_context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class ProjectRow(Base):
    """Row model for ``pc_projects``.

    ``integrations`` holds per-project credentials and endpoints (social
    tokens, WordPress site) as one JSONB document.
    """

    __tablename__ = "pc_projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256))
    description: Mapped[str] = mapped_column(Text, default="")

    assets: Mapped[List[Dict[str, Any]]] = mapped_column(JSONB)
    integrations: Mapped[Dict[str, Any]] = mapped_column(JSONB)


class AssetVectorRow(Base):
    """Row model for ``pc_asset_vectors``: the embedding of one project asset."""

    __tablename__ = "pc_asset_vectors"

    project_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    asset_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    vector: Mapped[List[float]] = mapped_column(JSONB)
    dimensions: Mapped[int] = mapped_column(Integer)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
