from __future__ import annotations

import pytest

from leaselock.core.errors import LockStoreError
from leaselock.core.locks import COMPARE_AND_DELETE_SCRIPT
from leaselock.core.locks_memory import MemoryLockStore


@pytest.mark.asyncio
async def test_set_if_absent_only_writes_missing_keys(clock):
    store = MemoryLockStore(clock=clock)
    assert await store.set_if_absent("k", "a", 1000) is True
    assert await store.set_if_absent("k", "b", 1000) is False
    assert await store.get("k") == "a"


@pytest.mark.asyncio
async def test_set_if_present_overwrites_any_holder(clock):
    store = MemoryLockStore(clock=clock)
    assert await store.set_if_present("k", "a", 1000) is False
    assert await store.get("k") is None

    await store.set_if_absent("k", "a", 1000)
    assert await store.set_if_present("k", "b", 1000) is True
    assert await store.get("k") == "b"


@pytest.mark.asyncio
async def test_records_expire_after_ttl(clock):
    store = MemoryLockStore(clock=clock)
    await store.set_if_absent("k", "a", 500)
    clock.advance(0.2)
    assert await store.pttl("k") == 300
    clock.advance(0.4)
    assert await store.get("k") is None
    assert await store.pttl("k") == -2
    assert await store.set_if_absent("k", "b", 500) is True


@pytest.mark.asyncio
async def test_compare_and_delete_checks_token(clock):
    store = MemoryLockStore(clock=clock)
    await store.set_if_absent("k", "owner", 1000)

    assert await store.execute_atomic(COMPARE_AND_DELETE_SCRIPT, ["k"], ["thief"]) == 0
    assert await store.get("k") == "owner"

    assert await store.execute_atomic(COMPARE_AND_DELETE_SCRIPT, ["k"], ["owner"]) == 1
    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_compare_and_delete_ignores_expired_record(clock):
    store = MemoryLockStore(clock=clock)
    await store.set_if_absent("k", "owner", 100)
    clock.advance(1)
    assert await store.execute_atomic(COMPARE_AND_DELETE_SCRIPT, ["k"], ["owner"]) == 0


@pytest.mark.asyncio
async def test_unknown_script_is_rejected():
    store = MemoryLockStore()
    with pytest.raises(LockStoreError):
        await store.execute_atomic("return 1", [], [])


@pytest.mark.asyncio
async def test_delete_reports_removed_count(clock):
    store = MemoryLockStore(clock=clock)
    await store.set_if_absent("k", "a", 1000)
    assert await store.delete("k") == 1
    assert await store.delete("k") == 0
