"""Redis-backed storage: connection pool, exercise cache and exercise store."""

from edugen.db.redis import RedisCache, close_redis_pool, get_redis

__all__ = ["RedisCache", "close_redis_pool", "get_redis"]
