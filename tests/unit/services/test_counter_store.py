import asyncio
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.memory_counter_store import InMemoryCounterStore
from src.adapter.services.redis_counter_store import RedisCounterStore
from src.app.services.counter_store import (
    ip_attempts_key,
    ip_blacklist_key,
    user_attempts_key,
)
from tests.fixtures.fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryCounterStore(clock=clock)


def test_key_conventions():
    assert ip_attempts_key("1.2.3.4") == "rate-limit:ip:1.2.3.4"
    assert user_attempts_key("User@Example.com") == "rate-limit:user:user@example.com"
    assert ip_blacklist_key("1.2.3.4") == "blacklist:ip:1.2.3.4"


@pytest.mark.asyncio
async def test_increment_counts_within_window(store):
    assert await store.increment("k", 60) == 1
    assert await store.increment("k", 60) == 2
    assert await store.increment("k", 60) == 3
    assert await store.get("k") == 3


@pytest.mark.asyncio
async def test_concurrent_increments_are_not_lost(store):
    counts = await asyncio.gather(*(store.increment("k", 60) for _ in range(200)))

    assert sorted(counts) == list(range(1, 201))
    assert await store.get("k") == 200


def test_increments_from_worker_threads_are_not_lost(store):
    def increment(_):
        return asyncio.run(store.increment("k", 60))

    with ThreadPoolExecutor(max_workers=16) as pool:
        counts = list(pool.map(increment, range(200)))

    assert sorted(counts) == list(range(1, 201))
    assert asyncio.run(store.get("k")) == 200


@pytest.mark.asyncio
async def test_increment_keeps_original_expiry(store, clock):
    await store.increment("k", 60)
    clock.advance(50)
    await store.increment("k", 60)

    # The second increment must not extend the window
    clock.advance(11)
    assert await store.get("k") == 0


@pytest.mark.asyncio
async def test_increment_after_expiry_resets_to_one(store, clock):
    for _ in range(4):
        await store.increment("k", 60)

    clock.advance(60)

    assert await store.get("k") == 0
    assert await store.increment("k", 60) == 1

    # Fresh TTL from the reset
    clock.advance(59)
    assert await store.get("k") == 1


@pytest.mark.asyncio
async def test_get_missing_key_is_zero(store):
    assert await store.get("missing") == 0


@pytest.mark.asyncio
async def test_flags_expire(store, clock):
    await store.set_flag("blacklist:ip:1.2.3.4", 3600)
    assert await store.has_flag("blacklist:ip:1.2.3.4") is True

    clock.advance(3599)
    assert await store.has_flag("blacklist:ip:1.2.3.4") is True

    clock.advance(1)
    assert await store.has_flag("blacklist:ip:1.2.3.4") is False


@pytest.mark.asyncio
async def test_delete(store):
    await store.increment("k", 60)
    await store.delete("k")
    await store.delete("never-existed")

    assert await store.get("k") == 0


@pytest.mark.asyncio
async def test_purge_expired(store, clock):
    await store.increment("short", 10)
    await store.increment("long", 100)
    clock.advance(10)

    assert store.purge_expired() == 1
    assert len(store) == 1
    assert await store.get("long") == 1


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.script = AsyncMock(return_value=3)
    client.register_script = MagicMock(return_value=client.script)
    client.get = AsyncMock()
    client.set = AsyncMock()
    client.exists = AsyncMock()
    client.delete = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_redis_increment_runs_script(redis_client):
    store = RedisCounterStore(redis_client)

    count = await store.increment("rate-limit:ip:1.2.3.4", 3600)

    assert count == 3
    redis_client.script.assert_awaited_once_with(
        keys=["rate-limit:ip:1.2.3.4"], args=[3600]
    )


@pytest.mark.asyncio
async def test_redis_get_decodes_bytes(redis_client):
    store = RedisCounterStore(redis_client)

    redis_client.get.return_value = b"4"
    assert await store.get("k") == 4

    redis_client.get.return_value = None
    assert await store.get("k") == 0


@pytest.mark.asyncio
async def test_redis_flags(redis_client):
    store = RedisCounterStore(redis_client)

    await store.set_flag("blacklist:ip:1.2.3.4", 3600)
    redis_client.set.assert_awaited_once_with("blacklist:ip:1.2.3.4", "1", ex=3600)

    redis_client.exists.return_value = 1
    assert await store.has_flag("blacklist:ip:1.2.3.4") is True
    redis_client.exists.return_value = 0
    assert await store.has_flag("blacklist:ip:1.2.3.4") is False

    await store.delete("blacklist:ip:1.2.3.4")
    redis_client.delete.assert_awaited_once_with("blacklist:ip:1.2.3.4")
