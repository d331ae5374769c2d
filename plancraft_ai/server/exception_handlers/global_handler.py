"""
Exception Handlers for the FastAPI Application.

``ObjectiveNotFound`` becomes a 404 carrying the objective id and
``ObjectiveConflict`` a 409 the client may retry. Every other
unhandled exception is logged with request context and returned as a 500 with
an error id that clients can quote when reporting issues.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from plancraft_ai.agent_core.errors import ObjectiveConflict, ObjectiveNotFound
from plancraft_ai.core.logging_config import get_logger
from plancraft_ai.core.monitoring import log_error

logger = get_logger(__name__)


async def objective_not_found_handler(request: Request, exc: ObjectiveNotFound) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path}: objective {exc.objective_id} not found")
    return JSONResponse(status_code=404, content={"detail": exc.message, "objective_id": exc.objective_id})


async def objective_conflict_handler(request: Request, exc: ObjectiveConflict) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=409, content={"detail": exc.message, "objective_id": exc.objective_id, **exc.details}
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"path": request.url.path, "error_id": error_id})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ObjectiveNotFound, objective_not_found_handler)
    app.add_exception_handler(ObjectiveConflict, objective_conflict_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
