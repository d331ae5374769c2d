from __future__ import annotations

"""Immutable tool registry.

The registry is the catalogue the model chooses from and the authority the
dispatcher validates against. It is built once at deployment time from
``ToolDefinition`` objects; there is no runtime registration.

Callers always receive deep copies of schema data, so no caller can alter
what the next caller (or the model prompt) sees.
"""

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from ..schemas.domain import ToolInvocation
from .definitions import ToolDefinition


@dataclass(frozen=True)
class ArgumentValidation:
    """Outcome of validating a tool invocation.

    ``arguments`` holds the normalized arguments (defaults applied, ``None``
    values dropped) and is only meaningful when ``errors`` is empty.
    """

    arguments: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ToolRegistry:
    """
    Read-only mapping of tool names to definitions.

    Notes:
        - Duplicate names are rejected at construction time.
        - ``get_schema`` and ``schemas`` return deep copies.
        - Unknown names are never an exception here; ``has`` and
          ``get_schema`` report absence so the dispatcher can turn it into a
          typed result.
    """

    def __init__(self, definitions: Iterable[ToolDefinition]) -> None:
        by_name: Dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in by_name:
                raise ValueError(f"duplicate tool name: {definition.name}")
            by_name[definition.name] = definition
        self._definitions: Mapping[str, ToolDefinition] = MappingProxyType(by_name)
        self._schemas: Mapping[str, Dict[str, Any]] = MappingProxyType(
            {name: d.to_schema() for name, d in by_name.items()}
        )

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def has(self, name: str) -> bool:
        return name in self._definitions

    def names(self) -> tuple[str, ...]:
        return tuple(self._definitions)

    def get_schema(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Return a copy of the schema for ``name``.

        Args:
            name: Tool name as requested by the model.

        Returns:
            A deep copy of ``{name, description, parameters}``, or None when unknown.
        """
        schema = self._schemas.get(name)
        return copy.deepcopy(schema) if schema is not None else None

    def schemas(self) -> List[Dict[str, Any]]:
        """Return deep copies of every tool schema in registration order."""
        return [copy.deepcopy(s) for s in self._schemas.values()]

    def validate(self, invocation: ToolInvocation) -> ArgumentValidation:
        """
        Validate invocation arguments against the tool's input model.

        Args:
            invocation: The tool call requested by the model.

        Returns:
            ArgumentValidation with normalized arguments or human-readable errors.

        Raises:
            KeyError: If the tool is unknown; check ``has`` first.
        """
        definition = self._definitions[invocation.name]
        try:
            parsed = definition.input_schema.model_validate(invocation.arguments)
        except ValidationError as exc:
            return ArgumentValidation(errors=[_describe_error(invocation.name, e) for e in exc.errors()])
        return ArgumentValidation(arguments=parsed.model_dump(exclude_none=True))


def _describe_error(tool_name: str, error: Dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc") or ())
    if error.get("type") == "missing":
        return f"Missing required argument '{loc}' for tool {tool_name}."
    message = str(error.get("msg") or "invalid value").removeprefix("Value error, ")
    if not loc:
        return f"Invalid arguments for tool {tool_name}: {message}"
    return f"Invalid argument '{loc}' for tool {tool_name}: {message}"
