"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
monitoring and exception handlers, and includes all API routers.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plancraft_ai.core.logging_config import get_logger, setup_logging
from plancraft_ai.core.monitoring import initialize_logfire

from .api.v1 import health, objectives, tools
from .core import constant
from .core.config import settings
from .core.database import init_db
from .exception_handlers import setup_exception_handlers
from .services.engine import get_engine_service, run_recurrence_loop, shutdown_engine_service

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates database tables when a database is configured, and runs the
    recurring objective scheduler when ``PLANCRAFT_AI_RECURRENCE_POLL_SECONDS``
    is positive.
    """
    logger.info("Starting up PlanCraft-AI Server...")
    try:
        if await init_db():
            logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    scheduler_task = None
    poll_seconds = settings.engine.recurrence_poll_seconds
    if poll_seconds > 0:
        scheduler_task = asyncio.create_task(run_recurrence_loop(get_engine_service(), poll_seconds))
        logger.info(f"Recurring objective scheduler started (every {poll_seconds}s)")

    yield

    logger.info("Shutting down PlanCraft-AI Server...")
    if scheduler_task is not None:
        scheduler_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scheduler_task
    await shutdown_engine_service()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    PlanCraft-AI Server API

    This API advances approved marketing plans one step at a time. Each step is
    resolved by the language model directly or through one of the integrated tools
    (asset generation, social posting, CMS drafts, ad scaffolds, web browsing).
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(objectives.router, prefix=f"{constant.API_V1_STR}/objectives", tags=["objectives"])
app.include_router(tools.router, prefix=f"{constant.API_V1_STR}/tools", tags=["tools"])
