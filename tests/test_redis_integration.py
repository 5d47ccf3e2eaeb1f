"""Runs the lock against a real Redis when LEASELOCK_TEST_REDIS_URL is set."""

from __future__ import annotations

import asyncio
import os
import uuid

import pytest

from leaselock.core.lease_lock import LeaseLock
from leaselock.core.locks_redis import RedisLockStore


REDIS_URL = os.getenv("LEASELOCK_TEST_REDIS_URL")

pytestmark = pytest.mark.skipif(not REDIS_URL, reason="LEASELOCK_TEST_REDIS_URL not set")


@pytest.mark.asyncio
async def test_acquire_renew_release_against_redis():
    store = RedisLockStore.from_url(REDIS_URL)
    key = f"leaselock-test:{uuid.uuid4()}"
    try:
        lock = LeaseLock(store, key, lease_ms=5000)
        assert await lock.acquire() is True
        assert 4900 <= await store.pttl(key) <= 5001

        other = LeaseLock(store, key, 300)
        assert await other.acquire() is False
        assert await other.is_remote_locked() is True

        await asyncio.sleep(0.5)
        assert await lock.renew() is True
        assert await store.pttl(key) > 4900

        await lock.release()
        assert await store.get(key) is None

        other = LeaseLock(store, key, 300)
        assert await other.acquire() is True
        await other.release()
    finally:
        await store.delete(key)
        await store.close()


@pytest.mark.asyncio
async def test_stale_release_keeps_new_holder_against_redis():
    store = RedisLockStore.from_url(REDIS_URL)
    key = f"leaselock-test:{uuid.uuid4()}"
    try:
        first = LeaseLock(store, key, 500, lease_ms=50, poll_interval_ms=10)
        assert await first.acquire() is True
        await asyncio.sleep(0.2)

        second = LeaseLock(store, key, 500, poll_interval_ms=10)
        assert await second.acquire() is True
        await first.release()
        assert await store.get(key) == second.token
        assert await first.renew() is False
    finally:
        await store.delete(key)
        await store.close()
