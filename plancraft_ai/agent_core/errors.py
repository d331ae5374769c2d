"""Error types raised by the plan execution engine.

Purpose:
- Provide typed exceptions for the few failures that leave the engine.
- Expose HTTP-oriented context (``status_code``) and structured ``details`` so
  the server layer can map them without string matching.

Only ``ObjectiveNotFound`` and ``ObjectiveConflict`` reach callers of
``PlanExecutor.advance``. The other errors are recovered inside the engine and
turned into chat messages; tool failures are not exceptions at all but
``ToolResult`` kinds (see ``plancraft_ai.agent_core.dispatcher``).
"""

from __future__ import annotations

from typing import Any, Optional


class PlanCraftError(Exception):
    """Base error for engine failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured context.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class ObjectiveNotFound(PlanCraftError):
    """Raised when an objective id does not resolve (HTTP 404)."""

    def __init__(self, objective_id: str) -> None:
        super().__init__(f"Objective not found: {objective_id}", status_code=404)
        self.objective_id = objective_id


class ProjectNotFound(PlanCraftError):
    """Raised when a project id does not resolve (HTTP 404)."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}", status_code=404)
        self.project_id = project_id


class ModelUnavailable(PlanCraftError):
    """Raised by the model gateway when the language model cannot be reached or answers badly."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=503, details=details)


class ObjectiveConflict(PlanCraftError):
    """Raised when an objective changed under a conditional update (HTTP 409).

    Another writer, typically a second server process advancing the same
    objective, moved the plan cursor after it was read.
    """

    def __init__(self, objective_id: str, *, expected_step_index: int, actual_step_index: int) -> None:
        super().__init__(
            f"Objective {objective_id} was modified concurrently "
            f"(expected step {expected_step_index}, found {actual_step_index})",
            status_code=409,
            details={"expected_step_index": expected_step_index, "actual_step_index": actual_step_index},
        )
        self.objective_id = objective_id
