"""
Tool Catalogue Endpoint.

Lists the tool contracts the language model can choose from.
"""

from typing import Any, Dict, List

from fastapi import APIRouter

from plancraft_ai.server.services.deps import EngineDep

router = APIRouter()


@router.get(
    "",
    summary="List Tools",
    description="Return the JSON schema of every registered tool.",
    response_description="List of {name, description, parameters} objects.",
)
async def list_tools(engine: EngineDep) -> List[Dict[str, Any]]:
    return engine.tools.schemas()
