"""
Monitoring and Tracing Configuration Module.

This module integrates Pydantic Logfire for tracing of the plan execution
engine:
- Pydantic AI model calls made by the model gateway
- Outbound HTTPX requests made by integration clients
- SQLAlchemy repository operations
- FastAPI endpoints

It also exposes small ``log_*`` helpers used by the executor and dispatcher.
The helpers are best-effort: monitoring problems are logged at debug level and
never interrupt a plan step.
"""

import logging
from typing import Any, Optional

import logfire
from fastapi import FastAPI

from plancraft_ai.server.core.config import LogfireConfig, settings

logger = logging.getLogger(__name__)


def initialize_logfire(app: FastAPI | None = None, config: Optional[LogfireConfig] = None) -> bool:
    """
    Initialize Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).
        config: Logfire settings; defaults to ``settings.logfire``.

    Returns:
        True when Logfire was configured, False when it is disabled or misconfigured.
    """
    cfg = config or settings.logfire
    if not cfg.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not cfg.token:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set. Monitoring will not work.")
        return False

    try:
        logfire.configure(
            token=cfg.token.get_secret_value(),
            service_name=cfg.service_name,
            environment=cfg.environment,
            send_to_logfire="if-token-present",
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    instrumentations = [
        ("Pydantic AI", cfg.trace_pydantic_ai, logfire.instrument_pydantic_ai, {}),
        ("HTTPX", cfg.trace_httpx, logfire.instrument_httpx, {}),
        ("SQLAlchemy", cfg.trace_sqlalchemy, logfire.instrument_sqlalchemy, {}),
    ]
    if app is not None:
        instrumentations.append(("FastAPI", cfg.trace_fastapi, logfire.instrument_fastapi, {"app": app}))

    for label, enabled, instrument, kwargs in instrumentations:
        if not enabled:
            continue
        try:
            instrument(**kwargs)
            logger.info(f"Logfire: {label} instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument {label}: {e}")

    logger.info(f"Logfire monitoring initialized: environment={cfg.environment}, service={cfg.service_name}")
    return True


def log_step_executed(objective_id: str, step_index: int, plan_status: str, duration_ms: float) -> None:
    """
    Log the execution of one plan step.

    Args:
        objective_id: The objective whose plan advanced
        step_index: Zero-based index of the step that was executed
        plan_status: Plan status after the step
        duration_ms: Wall time of the ``advance`` call in milliseconds
    """
    try:
        logfire.info(
            "Plan step executed",
            objective_id=objective_id,
            step_index=step_index,
            plan_status=plan_status,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log plan step to Logfire: objective_id={objective_id}")


def log_tool_dispatch(tool_name: str, project_id: str, outcome: str, duration_ms: float) -> None:
    """
    Log a tool dispatch with its outcome kind.

    Args:
        tool_name: Name of the requested tool
        project_id: Project on whose behalf the tool ran
        outcome: Result kind (succeeded, unknown_tool, precondition_failed, execution_failed)
        duration_ms: Dispatch duration in milliseconds
    """
    try:
        logfire.info(
            "Tool dispatched",
            tool_name=tool_name,
            project_id=project_id,
            outcome=outcome,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log tool dispatch to Logfire: tool={tool_name}")


def log_model_call(operation: str, model: str, duration_ms: float) -> None:
    """
    Log a model gateway call.

    Args:
        operation: ``execute_step`` or ``summarize``
        model: Model name used by the gateway
        duration_ms: Call duration in milliseconds
    """
    try:
        logfire.info("Model call completed", operation=operation, model=model, duration_ms=duration_ms)
    except Exception:
        logger.debug(f"Could not log model call to Logfire: operation={operation}")


def log_error(error_type: str, error_message: str, context: Optional[dict[str, Any]] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        logfire.error(f"{error_type}: {error_message}", **(context or {}))
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
