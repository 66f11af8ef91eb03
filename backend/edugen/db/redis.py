"""
Redis Access

One lazily created connection pool for the process, plus ``RedisCache``: a
string key-value store with per-entry expiry. Both the exercise cache and the
exercise store sit on top of it.

Key layout (prefixes from config/default.yaml):
    ex:{fingerprint}              cached generation result (no prefix)
    exercise:{exerciseId}         served exercise, for grading/hints/solution
    progress:{userId}:{exerciseId} graded submission

Usage:
    from edugen.db.redis import RedisCache

    store = RedisCache(prefix="exercise")
    await store.put("mat-alg-lq2x9k1c-3f9a0b", payload_json, ttl_seconds=604800)
    payload_json = await store.get("mat-alg-lq2x9k1c-3f9a0b")
"""

from typing import Any, Optional

import redis.asyncio as redis

from edugen.config import settings, yaml_config

redis_config: dict[str, Any] = yaml_config.get("redis", {})
MAX_CONNECTIONS: int = redis_config.get("max_connections", 10)
STORE_PREFIX: str = redis_config.get("store_prefix", "exercise")
PROGRESS_PREFIX: str = redis_config.get("progress_prefix", "progress")

_redis_pool: Optional[redis.ConnectionPool] = None


async def get_redis_pool() -> redis.ConnectionPool:
    """Return the process-wide pool, creating it on first use."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=MAX_CONNECTIONS,
            decode_responses=True,
        )
    return _redis_pool


async def get_redis() -> redis.Redis:
    """Client bound to the shared pool. Cheap; create one per operation."""
    return redis.Redis(connection_pool=await get_redis_pool())


async def close_redis_pool() -> None:
    """Disconnect the pool (application shutdown)."""
    global _redis_pool
    if _redis_pool is None:
        return
    await _redis_pool.disconnect()
    _redis_pool = None


class RedisCache:
    """
    String values under an optional key prefix, always written with a TTL.

    Callers serialize their own values. Redis errors propagate; whether a
    failure is fatal is the caller's decision (the exercise cache swallows
    them, the exercise store does not).
    """

    def __init__(self, prefix: Optional[str] = None) -> None:
        self.prefix = prefix

    def _make_key(self, key: str) -> str:
        if not self.prefix:
            return key
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[str]:
        """Value for key, or None if absent or expired."""
        client = await get_redis()
        return await client.get(self._make_key(key))

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        client = await get_redis()
        await client.setex(self._make_key(key), ttl_seconds, value)

    async def delete(self, key: str) -> None:
        client = await get_redis()
        await client.delete(self._make_key(key))
