from __future__ import annotations

"""Recurring objective scheduling.

A recurring objective keeps the plan it was first approved with in
``original_plan``. When a cycle completes, ``RecurrenceScheduler`` schedules the
next run from the objective's ``recurrence_rule``; once that time has passed it
restarts the plan from the original steps and records a short summary of the
finished cycle in ``current_recurrence_context`` so the next cycle's prompts can
refer to it.

Chat history is preserved across cycles.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..errors import ObjectiveConflict
from ..repos.interfaces import ObjectiveRepository
from ..schemas.domain import (
    Objective,
    ObjectiveUpdate,
    PlanStatus,
    RecurrenceFrequency,
    RecurrenceRule,
    Speaker,
)
from . import transitions

logger = logging.getLogger(__name__)

_PERIOD_DAYS = {
    RecurrenceFrequency.daily: 1,
    RecurrenceFrequency.weekly: 7,
    RecurrenceFrequency.monthly: 30,
}

_CONTEXT_MAX_CHARS = 1000


def next_run_after(completed_at: datetime, rule: RecurrenceRule) -> datetime:
    """Return the next run time for a cycle that completed at ``completed_at``."""
    return completed_at + timedelta(days=_PERIOD_DAYS[rule.frequency] * rule.interval)


def summarize_cycle(objective: Objective) -> str:
    """Build the recurrence context from the last agent message of the finished cycle."""
    last_agent = next((m.content for m in reversed(objective.chat_history) if m.speaker == Speaker.agent), None)
    steps = len(objective.plan.steps)
    summary = f"Previous cycle completed {steps} step(s)."
    if last_agent:
        summary += f" Last result: {last_agent}"
    return summary[:_CONTEXT_MAX_CHARS]


@dataclass(frozen=True)
class RecurrenceScheduler:
    """Drive recurring objectives between cycles.

    ``run_due`` is meant to be called periodically (e.g. by a cron job or a
    background task). It returns the ids of objectives restarted on this call.
    """

    objectives: ObjectiveRepository

    async def run_due(self, now: Optional[datetime] = None) -> list[str]:
        now = now or datetime.now(timezone.utc)
        restarted: list[str] = []
        for objective in await self.objectives.list_recurring():
            if objective.plan.status != PlanStatus.completed or objective.recurrence_rule is None:
                continue
            if objective.original_plan is None:
                logger.warning(f"Recurring objective {objective.id} has no original plan; skipping")
                continue

            if objective.next_run_time is None:
                next_run = next_run_after(now, objective.recurrence_rule)
                await self.objectives.update(objective.id, ObjectiveUpdate(next_run_time=next_run))
                logger.info(f"Scheduled next cycle of objective {objective.id} for {next_run.isoformat()}")
                continue

            if _as_utc(objective.next_run_time) > now:
                continue

            try:
                await self.objectives.update(
                    objective.id,
                    ObjectiveUpdate(
                        plan=transitions.restart(objective.original_plan),
                        current_recurrence_context=summarize_cycle(objective),
                        next_run_time=None,
                    ),
                    expected_step_index=objective.plan.current_step_index,
                )
            except ObjectiveConflict as e:
                logger.info(f"Skipping restart of objective {objective.id}: {e.message}")
                continue
            logger.info(f"Restarted recurring objective {objective.id}")
            restarted.append(objective.id)
        return restarted


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes for timezone-aware columns.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
