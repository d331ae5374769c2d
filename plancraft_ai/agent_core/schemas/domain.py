from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import Field, model_validator

from .base import BaseSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PlanStatus(str, Enum):
    draft = "draft"
    pending_approval = "pending_approval"
    approved = "approved"
    in_progress = "in_progress"
    completed = "completed"


class Speaker(str, Enum):
    user = "user"
    agent = "agent"
    system = "system"


class RecurrenceFrequency(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class ChatMessage(BaseSchema):
    speaker: Speaker
    content: str
    timestamp: datetime = Field(default_factory=_utc_now)


class Plan(BaseSchema):
    """Ordered plan steps plus the execution cursor.

    ``current_step_index`` points at the next step to execute and may equal
    ``len(steps)`` once every step has run.
    """

    steps: List[str] = Field(default_factory=list)
    status: PlanStatus = PlanStatus.pending_approval
    current_step_index: int = Field(default=0, ge=0)
    questions: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _cursor_within_steps(self) -> "Plan":
        if self.current_step_index > len(self.steps):
            raise ValueError(
                f"current_step_index {self.current_step_index} exceeds the number of steps ({len(self.steps)})"
            )
        return self

    @property
    def is_exhausted(self) -> bool:
        return self.current_step_index >= len(self.steps)


class Asset(BaseSchema):
    asset_id: str = Field(default_factory=lambda: f"asset_{uuid4().hex[:12]}")
    name: str
    type: str
    url: Optional[str] = None
    prompt: Optional[str] = None
    description: Optional[str] = None
    tags: set[str] = Field(default_factory=set)
    created_at: datetime = Field(default_factory=_utc_now)


class RecurrenceRule(BaseSchema):
    frequency: RecurrenceFrequency
    interval: int = Field(default=1, ge=1)


class Objective(BaseSchema):
    id: str = Field(default_factory=lambda: f"objective_{uuid4().hex[:12]}")
    project_id: str

    title: str
    brief: str = ""

    plan: Plan = Field(default_factory=Plan)
    chat_history: List[ChatMessage] = Field(default_factory=list)
    assets: List[Asset] = Field(default_factory=list)

    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    next_run_time: Optional[datetime] = None
    original_plan: Optional[Plan] = None
    current_recurrence_context: Optional[str] = None

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class ObjectiveUpdate(BaseSchema):
    """Partial update for an objective; only fields explicitly set are applied."""

    title: Optional[str] = None
    brief: Optional[str] = None
    plan: Optional[Plan] = None
    chat_history: Optional[List[ChatMessage]] = None
    assets: Optional[List[Asset]] = None
    next_run_time: Optional[datetime] = None
    original_plan: Optional[Plan] = None
    current_recurrence_context: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class Project(BaseSchema):
    id: str = Field(default_factory=lambda: f"project_{uuid4().hex[:12]}")
    name: str
    description: str = ""
    assets: List[Asset] = Field(default_factory=list)

    facebook_page_id: Optional[str] = None
    facebook_page_access_token: Optional[str] = None
    facebook_user_access_token: Optional[str] = None
    tiktok_access_token: Optional[str] = None
    linkedin_access_token: Optional[str] = None
    linkedin_user_id: Optional[str] = None
    wordpress_url: Optional[str] = None
    wordpress_username: Optional[str] = None
    wordpress_application_password: Optional[str] = None
    google_ads_customer_id: Optional[str] = None

    def find_asset(self, asset_id: str, *, asset_type: Optional[str] = None) -> Optional[Asset]:
        for asset in self.assets:
            if asset.asset_id == asset_id and (asset_type is None or asset.type == asset_type):
                return asset
        return None


class ToolInvocation(BaseSchema):
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class TextResult(BaseSchema):
    text: str


class StepOutcome(BaseSchema):
    """Payload returned to the caller of ``PlanExecutor.advance``.

    Guidance and already-completed outcomes carry only ``message`` and
    ``plan_status``.
    """

    message: str
    current_step: Optional[int] = Field(default=None, alias="currentStep")
    step_description: Optional[str] = Field(default=None, alias="stepDescription")
    plan_status: PlanStatus = Field(alias="planStatus")
