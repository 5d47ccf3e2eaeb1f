"""Lease-based mutual exclusion on top of a shared key-value store.

A ``LeaseLock`` writes its ownership token to ``key`` with ``SET NX PX`` style
semantics and keeps polling at a fixed interval until the acquire timeout budget
is spent. The lease expires on the store after ``lease_ms + 1`` milliseconds
unless renewed, so a crashed holder only blocks others until its TTL lapses.

Release goes through a server-side compare-and-delete script, which keeps one
holder from deleting a record that another token has since written.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Optional, Union

from leaselock.utils.logging import get_logger

from .errors import LockInterruptedError
from .locks import COMPARE_AND_DELETE_SCRIPT, LockStore


DEFAULT_LEASE_MS = 60_000
DEFAULT_ACQUIRE_TIMEOUT_MS = 10_000
DEFAULT_POLL_INTERVAL_MS = 100


logger = get_logger("LeaseLock")


class LeaseLock:
    """Single named lock owned by one acquisition attempt.

    Instances are not meant to be reused across unrelated critical sections:
    create one per attempt so each gets a fresh token.
    """

    def __init__(
        self,
        store: LockStore,
        key: str,
        acquire_timeout_ms: int = DEFAULT_ACQUIRE_TIMEOUT_MS,
        lease_ms: int = DEFAULT_LEASE_MS,
        *,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        token: Optional[Union[uuid.UUID, str]] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        if lease_ms < 1:
            raise ValueError("lease_ms must be positive")
        if acquire_timeout_ms < 0:
            raise ValueError("acquire_timeout_ms must not be negative")
        if poll_interval_ms < 1:
            raise ValueError("poll_interval_ms must be positive")
        self._store = store
        self._key = key
        self._acquire_timeout_ms = acquire_timeout_ms
        self._lease_ms = lease_ms
        # one extra millisecond absorbs rounding at the expiry boundary
        self._server_ttl_ms = lease_ms + 1
        self._poll_interval_ms = poll_interval_ms
        self._token = str(token) if token is not None else str(uuid.uuid4())
        self._stop_event = stop_event or asyncio.Event()
        self._mutex = asyncio.Lock()
        self._locked = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def token(self) -> str:
        return self._token

    @property
    def lease_ms(self) -> int:
        return self._lease_ms

    @property
    def acquire_timeout_ms(self) -> int:
        return self._acquire_timeout_ms

    @property
    def poll_interval_ms(self) -> int:
        return self._poll_interval_ms

    def __repr__(self) -> str:
        state = "locked" if self._locked else "unlocked"
        return f"<LeaseLock key={self._key!r} token={self._token} {state}>"

    async def __aenter__(self) -> bool:
        return await self.acquire()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    def is_locked(self) -> bool:
        """Return the local belief of ownership; never touches the store."""
        return self._locked

    def interrupt(self) -> None:
        """Ask a polling ``acquire``/``renew`` to give up at its next sleep boundary."""
        self._stop_event.set()

    async def acquire(self) -> bool:
        """Poll until the key is written with this token or the timeout budget runs out.

        An instance that already holds the lock renews it instead.

        Raises:
            LockInterruptedError: the stop event fired while waiting between polls.
        """
        async with self._mutex:
            if self._locked:
                return await self._renew()
            remaining = self._acquire_timeout_ms
            while remaining >= 0:
                try:
                    written = await self._store.set_if_absent(self._key, self._token, self._server_ttl_ms)
                except BaseException:
                    # the write may have landed before the reply was lost
                    await asyncio.shield(self._discard_unacknowledged_write())
                    raise
                if written:
                    self._locked = True
                    logger.debug("Acquired %s with token %s", self._key, self._token)
                    return True
                remaining -= self._poll_interval_ms
                await self._pause()
            logger.debug("Gave up acquiring %s after %d ms", self._key, self._acquire_timeout_ms)
            return False

    async def renew(self) -> bool:
        """Refresh the lease TTL while this instance still holds the lock.

        A ``False`` result means the lock must be treated as lost; the instance
        drops to the unlocked state and callers should ``acquire`` again.
        """
        async with self._mutex:
            return await self._renew()

    async def release(self) -> None:
        """Delete the record if it still carries this token; no-op when unlocked."""
        async with self._mutex:
            if not self._locked:
                return
            try:
                deleted = await self._store.execute_atomic(
                    COMPARE_AND_DELETE_SCRIPT, [self._key], [self._token]
                )
            finally:
                self._locked = False
            if deleted:
                logger.debug("Released %s", self._key)
            else:
                logger.info("Lease on %s had already passed to another holder", self._key)

    async def is_remote_locked(self) -> bool:
        """Return True when someone else appears to hold the key.

        Any value present counts as contention; the stored token is not compared.
        Always False while this instance holds the lock.
        """
        async with self._mutex:
            if self._locked:
                return False
            return await self._store.get(self._key) is not None

    async def _renew(self) -> bool:
        if not self._locked:
            return False
        try:
            remaining = self._acquire_timeout_ms
            while remaining >= 0:
                if await self._taken_over():
                    logger.info("Lease on %s was taken over by another token", self._key)
                    self._locked = False
                    return False
                if await self._store.set_if_present(self._key, self._token, self._server_ttl_ms):
                    logger.debug("Renewed %s for %d ms", self._key, self._lease_ms)
                    return True
                remaining -= self._poll_interval_ms
                await self._pause()
        except BaseException:
            self._locked = False
            raise
        self._locked = False
        logger.debug("Could not renew %s; lease considered lost", self._key)
        return False

    async def _discard_unacknowledged_write(self) -> None:
        try:
            deleted = await self._store.execute_atomic(
                COMPARE_AND_DELETE_SCRIPT, [self._key], [self._token]
            )
        except Exception as exc:
            logger.warning("Could not clean up interrupted write on %s: %s", self._key, exc)
            return
        if deleted:
            logger.info("Removed record on %s left by an interrupted acquire", self._key)

    async def _taken_over(self) -> bool:
        current = await self._store.get(self._key)
        return current is not None and current != self._token

    async def _pause(self) -> None:
        if self._stop_event.is_set():
            raise self._interrupted()
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self._poll_interval_ms / 1000)
        except asyncio.TimeoutError:
            return
        raise self._interrupted()

    def _interrupted(self) -> LockInterruptedError:
        logger.warning("Interrupted while waiting for %s", self._key)
        return LockInterruptedError(f"Interrupted while waiting for lock {self._key!r}")
