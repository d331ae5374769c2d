"""
Database Connection and Session Management.

This module sets up the asynchronous SQLAlchemy engine and session factory
when ``DATABASE_URL`` is configured. Without it the server runs on in-memory
repositories and these globals stay ``None``.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from plancraft_ai.agent_core.repos.sql import create_all, create_engine, create_sessionmaker
from plancraft_ai.server.core.config import settings

engine: Optional[AsyncEngine] = create_engine(settings.database_url) if settings.database_url else None

async_session_maker: Optional[async_sessionmaker[AsyncSession]] = (
    create_sessionmaker(engine) if engine is not None else None
)


async def init_db() -> bool:
    """
    Initialize the database.

    Creates all tables defined in the agent_core ORM metadata. Returns False
    when no database is configured.
    """
    if engine is None:
        return False
    await create_all(engine)
    return True
