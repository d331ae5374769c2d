"""
Engine Dependency.

Provides the shared ``EngineService`` to API endpoints.
"""

from typing import Annotated

from fastapi import Depends

from plancraft_ai.server.services.engine import EngineService, get_engine_service

EngineDep = Annotated[EngineService, Depends(get_engine_service)]
