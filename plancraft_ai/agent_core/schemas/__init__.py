"""Domain schemas for objectives, plans, chat history and tool calls."""

from .base import BaseSchema
from .domain import (
    Asset,
    ChatMessage,
    Objective,
    ObjectiveUpdate,
    Plan,
    PlanStatus,
    Project,
    RecurrenceFrequency,
    RecurrenceRule,
    Speaker,
    StepOutcome,
    TextResult,
    ToolInvocation,
)

__all__ = [
    "Asset",
    "BaseSchema",
    "ChatMessage",
    "Objective",
    "ObjectiveUpdate",
    "Plan",
    "PlanStatus",
    "Project",
    "RecurrenceFrequency",
    "RecurrenceRule",
    "Speaker",
    "StepOutcome",
    "TextResult",
    "ToolInvocation",
]
