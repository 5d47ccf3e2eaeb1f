"""Lease lock protocol and store adapters."""

from .errors import LockError, LockInterruptedError, LockStoreError
from .lease_lock import (
    DEFAULT_ACQUIRE_TIMEOUT_MS,
    DEFAULT_LEASE_MS,
    DEFAULT_POLL_INTERVAL_MS,
    LeaseLock,
)
from .locks import COMPARE_AND_DELETE_SCRIPT, LockManager, LockStore
from .locks_memory import MemoryLockStore
from .locks_redis import RedisLockManager, RedisLockStore
from .settings import LockSettings

__all__ = [
    "COMPARE_AND_DELETE_SCRIPT",
    "DEFAULT_ACQUIRE_TIMEOUT_MS",
    "DEFAULT_LEASE_MS",
    "DEFAULT_POLL_INTERVAL_MS",
    "LeaseLock",
    "LockError",
    "LockInterruptedError",
    "LockManager",
    "LockSettings",
    "LockStore",
    "LockStoreError",
    "MemoryLockStore",
    "RedisLockManager",
    "RedisLockStore",
]
