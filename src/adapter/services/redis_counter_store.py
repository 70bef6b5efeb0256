from redis.asyncio import Redis

from src.app.services.counter_store import ICounterStore

# INCR and the first EXPIRE run as one server-side step, so concurrent
# increments never lose counts and later increments keep the original TTL.
_INCREMENT_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
if redis.call('TTL', KEYS[1]) < 0 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return count
"""


class RedisCounterStore(ICounterStore):
    """Counter store backed by Redis key expiry"""

    def __init__(self, redis_client: Redis):
        self.redis = redis_client
        self._increment = self.redis.register_script(_INCREMENT_SCRIPT)

    async def increment(self, key: str, window_seconds: int) -> int:
        count = await self._increment(keys=[key], args=[int(window_seconds)])
        return int(count)

    async def get(self, key: str) -> int:
        value = await self.redis.get(key)
        if value is None:
            return 0
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return int(value)

    async def set_flag(self, key: str, ttl_seconds: int) -> None:
        await self.redis.set(key, "1", ex=int(ttl_seconds))

    async def has_flag(self, key: str) -> bool:
        return bool(await self.redis.exists(key))

    async def delete(self, key: str) -> None:
        await self.redis.delete(key)

    async def close(self) -> None:
        await self.redis.aclose()
