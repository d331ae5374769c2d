from __future__ import annotations

import asyncio
from typing import List

import pytest

from plancraft_ai.agent_core.runtime import ObjectiveLocks


@pytest.mark.asyncio
async def test_same_id_is_mutually_exclusive() -> None:
    locks = ObjectiveLocks()
    order: List[str] = []

    async def worker(name: str) -> None:
        async with locks.hold("o1"):
            order.append(f"{name}:enter")
            await asyncio.sleep(0.01)
            order.append(f"{name}:exit")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a:enter", "a:exit", "b:enter", "b:exit"]
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_entries_are_dropped_when_released() -> None:
    locks = ObjectiveLocks()

    async with locks.hold("o1"):
        assert locks.is_locked("o1")
        assert not locks.is_locked("o2")
        async with locks.hold("o2"):
            assert len(locks) == 2

    assert len(locks) == 0
    assert not locks.is_locked("o1")


@pytest.mark.asyncio
async def test_lock_is_released_on_error() -> None:
    locks = ObjectiveLocks()

    with pytest.raises(RuntimeError):
        async with locks.hold("o1"):
            raise RuntimeError("boom")

    assert len(locks) == 0
    async with locks.hold("o1"):
        assert locks.is_locked("o1")
