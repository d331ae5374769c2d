"""
Objective Endpoints.

Advance an objective's plan one step and read objectives back. Objective
creation, plan generation and approval happen outside this service.
"""

from fastapi import APIRouter

from plancraft_ai.agent_core.errors import ObjectiveNotFound
from plancraft_ai.agent_core.schemas.domain import Objective, StepOutcome
from plancraft_ai.core.logging_config import get_logger
from plancraft_ai.server.schemas import AdvanceRequest
from plancraft_ai.server.services.deps import EngineDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/{objective_id}/advance",
    response_model=StepOutcome,
    summary="Advance Objective Plan",
    description="Execute the next step of the objective's approved plan.",
    response_description="Outcome of the executed step, or guidance when nothing can run.",
)
async def advance_objective(objective_id: str, body: AdvanceRequest, engine: EngineDep) -> StepOutcome:
    """
    Run exactly one plan step.

    Calls for the same objective are serialized; the plan never advances by
    more than one step per request.
    """
    logger.info(f"Advancing objective {objective_id}")
    return await engine.executor.advance(objective_id, body.user_input)


@router.get(
    "/{objective_id}",
    response_model=Objective,
    summary="Get Objective",
    description="Retrieve an objective with its plan, chat history and assets.",
)
async def get_objective(objective_id: str, engine: EngineDep) -> Objective:
    objective = await engine.objectives.find_by_id(objective_id)
    if objective is None:
        raise ObjectiveNotFound(objective_id)
    return objective
