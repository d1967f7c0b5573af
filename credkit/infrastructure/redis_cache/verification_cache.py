from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from credkit.domain.errors import CacheUnavailable
from credkit.domain.ports.verification_cache import VerificationCachePort


_LUA_DELETE_IF_EQUALS = """
-- KEYS[1]: verification key
-- ARGV[1]: expected value
local cur = redis.call('GET', KEYS[1])
if not cur then
  return 0
end
if cur ~= ARGV[1] then
  return 0
end
redis.call('DEL', KEYS[1])
return 1
"""


class RedisVerificationCache(VerificationCachePort):
    """
    Redis-backed cache store. Expiry is Redis' own (SET ... EX).

    Every RedisError is re-raised as CacheUnavailable so callers only deal
    with domain errors.
    """

    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise CacheUnavailable(f"GET {key} failed: {e}") from e

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheUnavailable(f"SET {key} failed: {e}") from e

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            stored = await self._redis.set(key, value, ex=ttl_seconds, nx=True)
        except RedisError as e:
            raise CacheUnavailable(f"SET NX {key} failed: {e}") from e
        return bool(stored)

    async def exists(self, key: str) -> bool:
        try:
            return int(await self._redis.exists(key)) == 1
        except RedisError as e:
            raise CacheUnavailable(f"EXISTS {key} failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise CacheUnavailable(f"DEL {key} failed: {e}") from e

    async def delete_if_equals(self, key: str, value: str) -> bool:
        try:
            res = await self._redis.eval(_LUA_DELETE_IF_EQUALS, 1, key, value)
        except RedisError as e:
            raise CacheUnavailable(f"compare-and-delete {key} failed: {e}") from e
        return int(res) == 1
