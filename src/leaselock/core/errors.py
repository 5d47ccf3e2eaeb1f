"""Errors raised by the lock protocol."""


class LockError(Exception):
    """Base class for lock failures that are not plain contention."""


class LockInterruptedError(LockError):
    """Raised when a stop signal aborts an acquire or renew polling loop."""


class LockStoreError(LockError):
    """Raised when the backing store cannot be reached or rejects a command."""
