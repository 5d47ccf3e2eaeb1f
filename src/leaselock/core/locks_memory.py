"""In-memory lock store for tests and single-process use."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple

from .errors import LockStoreError
from .locks import COMPARE_AND_DELETE_SCRIPT


class MemoryLockStore:
    """Dictionary-backed ``LockStore`` with millisecond expiry on a monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._records: Dict[str, Tuple[str, float]] = {}  # key -> (value, expires_at)
        self._lock = asyncio.Lock()
        self._scripts: Dict[str, Callable[[Sequence[str], Sequence[Any]], Awaitable[int]]] = {
            COMPARE_AND_DELETE_SCRIPT: self._compare_and_delete,
        }

    async def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        async with self._lock:
            if self._live(key) is not None:
                return False
            self._write(key, value, ttl_ms)
            return True

    async def set_if_present(self, key: str, value: str, ttl_ms: int) -> bool:
        async with self._lock:
            if self._live(key) is None:
                return False
            self._write(key, value, ttl_ms)
            return True

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._live(key)

    async def delete(self, key: str) -> int:
        async with self._lock:
            existed = self._live(key) is not None
            self._records.pop(key, None)
            return int(existed)

    async def execute_atomic(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> int:
        handler = self._scripts.get(script)
        if handler is None:
            raise LockStoreError("MemoryLockStore only runs the compare-and-delete script")
        async with self._lock:
            return await handler(keys, args)

    async def pttl(self, key: str) -> int:
        """Remaining TTL in milliseconds, or -2 when the key is missing."""
        async with self._lock:
            if self._live(key) is None:
                return -2
            _, expires_at = self._records[key]
            return max(0, round((expires_at - self._clock()) * 1000))

    async def close(self) -> None:
        self._records.clear()

    async def _compare_and_delete(self, keys: Sequence[str], args: Sequence[Any]) -> int:
        key, token = keys[0], str(args[0])
        if self._live(key) != token:
            return 0
        del self._records[key]
        return 1

    def _live(self, key: str) -> Optional[str]:
        record = self._records.get(key)
        if record is None:
            return None
        value, expires_at = record
        if self._clock() >= expires_at:
            del self._records[key]
            return None
        return value

    def _write(self, key: str, value: str, ttl_ms: int) -> None:
        self._records[key] = (value, self._clock() + ttl_ms / 1000)
