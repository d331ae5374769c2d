"""Plan execution runtime.

- ``PlanExecutor``: LangGraph state machine advancing one plan step per call.
- ``ExecutorDeps``: dependency bundle (objective repository, model gateway,
  tool dispatcher).
- ``ObjectiveLocks``: per-objective lock table guaranteeing at most one
  concurrent ``advance`` per objective.
"""

from .executor import PlanExecutor
from .locks import ObjectiveLocks
from .models import ExecutorDeps

__all__ = ["ExecutorDeps", "ObjectiveLocks", "PlanExecutor"]
