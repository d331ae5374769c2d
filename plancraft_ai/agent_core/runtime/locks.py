from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict


@dataclass
class _Entry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class ObjectiveLocks:
    """Per-objective mutual exclusion.

    ``hold(objective_id)`` serializes callers for the same id while different
    ids proceed in parallel. An entry is dropped as soon as no caller holds or
    waits on it, so the table only grows with concurrently active objectives.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def is_locked(self, objective_id: str) -> bool:
        entry = self._entries.get(objective_id)
        return entry is not None and entry.lock.locked()

    @asynccontextmanager
    async def hold(self, objective_id: str) -> AsyncIterator[None]:
        entry = self._entries.setdefault(objective_id, _Entry())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._entries.pop(objective_id, None)
