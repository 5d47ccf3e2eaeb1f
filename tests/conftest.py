from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

import pytest

from leaselock.core.locks_memory import MemoryLockStore


class RecordingStore(MemoryLockStore):
    """Memory store that remembers every capability call in order."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: List[Tuple[str, str]] = []

    async def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        self.calls.append(("set_if_absent", key))
        return await super().set_if_absent(key, value, ttl_ms)

    async def set_if_present(self, key: str, value: str, ttl_ms: int) -> bool:
        self.calls.append(("set_if_present", key))
        return await super().set_if_present(key, value, ttl_ms)

    async def get(self, key: str) -> Optional[str]:
        self.calls.append(("get", key))
        return await super().get(key)

    async def execute_atomic(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> int:
        self.calls.append(("execute_atomic", keys[0]))
        return await super().execute_atomic(script, keys, args)


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
