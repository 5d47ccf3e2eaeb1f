"""Redis-backed lock store using SET NX/XX PX semantics."""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from redis.asyncio import Redis, RedisCluster
from redis.exceptions import RedisError

from leaselock.core.settings import LockSettings
from leaselock.utils.logging import get_logger

from .errors import LockStoreError
from .lease_lock import LeaseLock
from .locks import LockManager


RedisClient = Union[Redis, RedisCluster]


class RedisLockStore:
    """Adapts a standalone or cluster ``redis.asyncio`` client to ``LockStore``."""

    def __init__(self, redis: RedisClient) -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, url: str, *, cluster: bool = False) -> "RedisLockStore":
        if cluster:
            return cls(RedisCluster.from_url(url, decode_responses=True))
        return cls(Redis.from_url(url, decode_responses=True))

    async def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        try:
            return bool(await self._redis.set(key, value, px=ttl_ms, nx=True))
        except RedisError as exc:
            raise LockStoreError(f"SET NX failed for {key!r}: {exc}") from exc

    async def set_if_present(self, key: str, value: str, ttl_ms: int) -> bool:
        try:
            return bool(await self._redis.set(key, value, px=ttl_ms, xx=True))
        except RedisError as exc:
            raise LockStoreError(f"SET XX failed for {key!r}: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self._redis.get(key)
        except RedisError as exc:
            raise LockStoreError(f"GET failed for {key!r}: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def delete(self, key: str) -> int:
        try:
            return int(await self._redis.delete(key))
        except RedisError as exc:
            raise LockStoreError(f"DEL failed for {key!r}: {exc}") from exc

    async def execute_atomic(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> int:
        try:
            result = await self._redis.eval(script, len(keys), *keys, *args)
        except RedisError as exc:
            raise LockStoreError(f"EVAL failed for {list(keys)!r}: {exc}") from exc
        return int(result or 0)

    async def pttl(self, key: str) -> int:
        """Remaining TTL in milliseconds (-2 when missing, -1 when persistent)."""
        try:
            return int(await self._redis.pttl(key))
        except RedisError as exc:
            raise LockStoreError(f"PTTL failed for {key!r}: {exc}") from exc

    async def close(self) -> None:
        await self._redis.aclose()


class RedisLockManager(LockManager):
    """Hands out fresh ``LeaseLock`` instances sharing one Redis connection."""

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        settings: Optional[LockSettings] = None,
        store: Optional[RedisLockStore] = None,
    ) -> None:
        self.settings = settings or LockSettings.from_env()
        if url is not None:
            self.settings = self.settings.model_copy(update={"redis_url": url})
        self.logger = get_logger("RedisLockManager")
        if store is None:
            store = RedisLockStore.from_url(self.settings.redis_url, cluster=self.settings.cluster)
            self.logger.debug("Using redis at %s (cluster=%s)", self.settings.redis_url, self.settings.cluster)
        self.store = store

    def lock(self, key: str, **overrides: Any) -> LeaseLock:
        options = {
            "acquire_timeout_ms": self.settings.acquire_timeout_ms,
            "lease_ms": self.settings.lease_ms,
            "poll_interval_ms": self.settings.poll_interval_ms,
        }
        options.update(overrides)
        return LeaseLock(self.store, f"{self.settings.key_prefix}{key}", **options)

    async def close(self) -> None:
        await self.store.close()
