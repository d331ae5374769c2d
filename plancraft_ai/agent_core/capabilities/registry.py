from __future__ import annotations

"""Adapter registry.

The registry maps a tool name to the adapter that executes it.

The ``ToolDispatcher`` uses this registry after the ``ToolRegistry`` has
accepted the invocation; a tool with a schema but no adapter is reported as
an execution failure rather than an unknown tool.
"""

from typing import Dict

from .base import Adapter


class AdapterRegistry:
    """
    In-memory mapping of tool names to adapter implementations.

    Notes:
        - ``register`` overwrites any existing mapping for the tool name.
        - ``get`` will raise ``KeyError`` if the adapter is missing.
    """

    def __init__(self) -> None:
        """Initialize an empty adapter registry."""
        self._adapters: Dict[str, Adapter] = {}

    def register(self, adapter: Adapter) -> None:
        """
        Register an adapter implementation.

        Args:
            adapter: The adapter instance to register. Its ``name`` is the tool name.
        """
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter:
        """
        Retrieve a registered adapter by tool name.

        Raises:
            KeyError: If no adapter is registered with the given name.
        """
        return self._adapters[name]

    def has(self, name: str) -> bool:
        return name in self._adapters

    def names(self) -> tuple[str, ...]:
        return tuple(self._adapters)
