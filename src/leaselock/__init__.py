"""Lease-based distributed mutual exclusion over Redis."""

from .core import (
    LeaseLock,
    LockError,
    LockInterruptedError,
    LockSettings,
    LockStoreError,
    MemoryLockStore,
    RedisLockManager,
    RedisLockStore,
)

__all__ = [
    "__version__",
    "LeaseLock",
    "LockError",
    "LockInterruptedError",
    "LockSettings",
    "LockStoreError",
    "MemoryLockStore",
    "RedisLockManager",
    "RedisLockStore",
]

__version__ = "0.1.0"
