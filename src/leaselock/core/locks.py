"""Abstract interfaces for distributed locks."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from .lease_lock import LeaseLock


# Deletes KEYS[1] only while it still holds ARGV[1]; returns the number of keys removed.
COMPARE_AND_DELETE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
else
    return 0
end
"""


class LockStore(Protocol):
    """Capabilities a shared key-value store must offer to host lease locks."""

    async def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool: ...

    async def set_if_present(self, key: str, value: str, ttl_ms: int) -> bool: ...

    async def get(self, key: str) -> Optional[str]: ...

    async def delete(self, key: str) -> int: ...

    async def execute_atomic(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> int: ...


class LockManager(abc.ABC):
    @abc.abstractmethod
    def lock(self, key: str, **overrides: Any) -> "LeaseLock":  # pragma: no cover - interface
        """Return a fresh lock bound to ``key``; usable as an async context manager."""
        raise NotImplementedError
