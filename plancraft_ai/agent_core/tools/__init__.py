"""Tool catalogue exposed to the language model.

- ``ToolDefinition``: name, description and Pydantic input model of one tool.
- ``ToolRegistry``: immutable name → definition catalogue with argument
  validation; schemas are handed out as deep copies.
- ``BUILTIN_TOOLS``: the tools shipped with PlanCraft-AI.
"""

from .builtin import BUILTIN_TOOLS
from .definitions import ToolDefinition, ToolInput, ToolName
from .registry import ArgumentValidation, ToolRegistry

__all__ = [
    "ArgumentValidation",
    "BUILTIN_TOOLS",
    "ToolDefinition",
    "ToolInput",
    "ToolName",
    "ToolRegistry",
]
