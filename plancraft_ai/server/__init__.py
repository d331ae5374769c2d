"""
PlanCraft-AI Server Package.

A thin FastAPI surface over the plan execution engine.

Subpackages:
    api: FastAPI route definitions.
    core: Configuration, constants and database wiring.
    exception_handlers: Mapping of engine errors to HTTP responses.
    services: Engine wiring shared by the endpoints.
"""
