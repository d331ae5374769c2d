"""Error types for outbound integration clients.

Integration clients wrap ``httpx`` failures into ``IntegrationError`` so the
tool dispatcher can report them as ``ToolExecutionFailed`` results with the
upstream status code attached.
"""

from __future__ import annotations

from typing import Any, Optional


class IntegrationError(Exception):
    """Base error for third-party API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional upstream HTTP status code.
        details: Optional response body or structured payload.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class IntegrationNotConfiguredError(IntegrationError):
    """Raised when a deployment-level integration (endpoint, key) is missing."""

    def __init__(self, integration: str) -> None:
        super().__init__(f"{integration} is not configured by the administrator.")
        self.integration = integration
