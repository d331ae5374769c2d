"""PlanCraft-AI.

This package contains the objective plan execution engine used by PlanCraft-AI
to carry an approved marketing plan forward, one step at a time.

High-level architecture
-----------------------

An *objective* carries a *plan*: an ordered list of natural-language steps.
Every call to the engine executes exactly one step:

- **Text steps**: the language model resolves the step directly and its answer
  becomes the step output.
- **Tool steps**: the model asks for a named tool (image generation, social
  posting, asset search, CMS drafts, ...). The tool is validated, executed
  through an integration adapter, and the model summarizes the result for the
  user.

Core subpackages
----------------

- ``plancraft_ai.agent_core``:

  - Domain schemas (objective, plan, chat, assets).
  - The tool registry and the integration adapters behind each tool.
  - The model gateway (Pydantic AI) and the tool dispatcher.
  - The plan executor (LangGraph state machine with per-objective locking).
  - Repository interfaces with in-memory and SQL implementations.

- ``plancraft_ai.server``: a thin FastAPI surface over the executor.

Typical workflow
----------------

Most integrations should use ``plancraft_ai.agent_core.factory``:

1. Build repositories (``repos.memory`` or ``repos.sql``).
2. Build a ``PlanExecutor`` with ``build_plan_executor``.
3. Call ``await executor.advance(objective_id, user_input)`` until the plan
   reports ``completed``.
"""
