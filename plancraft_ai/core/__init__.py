"""
Core utilities for PlanCraft-AI.

This package provides shared functionality such as the logging configuration
and the Logfire monitoring helpers.
"""

from plancraft_ai.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
