"""
API Schemas.

Request bodies of the PlanCraft-AI server. Responses reuse the domain models
(``Objective``, ``StepOutcome``) directly.
"""

from pydantic import BaseModel, Field


class AdvanceRequest(BaseModel):
    user_input: str = Field(default="", description="Optional message from the user for this step")
