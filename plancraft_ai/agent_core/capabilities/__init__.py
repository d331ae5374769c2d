"""Adapter registry and adapter execution pipeline.

An *adapter* is the integration behind one tool name.

- The model emits a ``ToolInvocation`` naming a tool from the ``ToolRegistry``.
- The dispatcher resolves that name through ``AdapterRegistry``.
- The adapter runs with an ``AdapterContext`` holding the project and the
  shared integration clients.

Argument validation and project preconditions are checked by the dispatcher
before an adapter is ever invoked.
"""

from .base import Adapter, AdapterContext, AdapterDeps, AdapterResult
from .builtin import builtin_adapters
from .registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterContext",
    "AdapterDeps",
    "AdapterRegistry",
    "AdapterResult",
    "builtin_adapters",
]
