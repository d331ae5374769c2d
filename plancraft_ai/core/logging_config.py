"""
Logging Configuration Module.

This module provides centralized logging configuration for the PlanCraft-AI project.
It sets up console (and optionally file) logging with per-module levels so the
plan executor, dispatcher and integrations can be tuned independently.

Features:
- Configurable log levels per module
- Console and file logging
- Simple, detailed or JSON-like line formats
"""

import logging
import os
from pathlib import Path
from typing import Optional


def _get_logging_config():
    """Get logging configuration from the settings model.

    Settings are imported lazily to avoid circular imports during module
    initialization.
    """
    try:
        from plancraft_ai.server.core.config import settings

        return {
            "log_level": settings.log_level.upper(),
            "log_format": settings.log_format,
            "log_file_dir": settings.log_file_dir,
            "enable_file_logging": settings.enable_file_logging,
        }
    except Exception:
        # Settings can fail to load in stripped-down environments (bad .env values).
        return {
            "log_level": os.getenv("PLANCRAFT_AI_LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "detailed"),
            "log_file_dir": os.getenv("LOG_FILE_DIR", "logs"),
            "enable_file_logging": os.getenv("ENABLE_FILE_LOGGING", "false").lower() in ("true", "1", "yes"),
        }


_config = _get_logging_config()
LOG_LEVEL = _config["log_level"]
LOG_FORMAT = _config["log_format"]
LOG_FILE_DIR = _config["log_file_dir"]
ENABLE_FILE_LOGGING = _config["enable_file_logging"]


SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)


MODULE_LOG_LEVELS = {
    # Engine
    "plancraft_ai.agent_core": "DEBUG",
    "plancraft_ai.agent_core.runtime": "DEBUG",
    "plancraft_ai.agent_core.dispatcher": "DEBUG",
    "plancraft_ai.agent_core.gateway": "DEBUG",
    "plancraft_ai.agent_core.capabilities": "DEBUG",
    "plancraft_ai.agent_core.integrations": "INFO",
    "plancraft_ai.agent_core.planning": "INFO",
    "plancraft_ai.agent_core.repos": "INFO",
    # Server
    "plancraft_ai.server": "INFO",
    "plancraft_ai.server.api": "DEBUG",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _format_string(fmt: str) -> str:
    if fmt == "json":
        return JSON_FORMAT
    if fmt == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override default format (simple, detailed, json)
        enable_file: Whether to enable file logging (also requires ENABLE_FILE_LOGGING)
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT

    formatter = logging.Formatter(_format_string(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        Path(LOG_FILE_DIR).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(LOG_FILE_DIR) / "plancraft_ai.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
