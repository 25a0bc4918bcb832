"""
Redis caching layer.

Used for read-mostly reference data such as the rendered quiz schema. The
cache fails open: when Redis is disabled, not initialized or erroring, the
wrapped function runs as if there were no cache.

Usage:
    from core.cache import cache

    @cache(ttl=300, key_builder=lambda func, db, language: f"quiz_schema:{language}")
    async def get_quiz_schema(db, language):
        ...
"""

import json
import logging
import functools
from typing import Any, Callable, Optional
from datetime import datetime, date
from uuid import UUID

from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError
from core.config import settings

logger = logging.getLogger(__name__)


class RedisCache:
    _instance = None
    _redis: Optional[Redis] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(RedisCache, cls).__new__(cls)
        return cls._instance

    @property
    def is_ready(self) -> bool:
        return self._redis is not None

    async def init(self, url: str | None = None):
        """Initialize Redis connection."""
        if not self._redis:
            self._redis = from_url(
                url or settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("Redis cache initialized")

    async def close(self):
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis cache closed")

    @property
    def redis(self) -> Redis:
        if not self._redis:
            raise RuntimeError("Redis cache not initialized. Call init() first.")
        return self._redis

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        try:
            val = await self.redis.get(key)
            if val:
                return json.loads(val)
        except (RedisError, RuntimeError, ValueError) as e:
            logger.warning(f"Cache get error for {key}: {e}")
        return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set value in cache."""
        try:
            serialized = json.dumps(value, default=self._json_serializer)
            await self.redis.set(key, serialized, ex=ttl)
            return True
        except (RedisError, RuntimeError, TypeError) as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern."""
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern)]
            if keys:
                await self.redis.delete(*keys)
            return len(keys)
        except (RedisError, RuntimeError) as e:
            logger.warning(f"Cache delete pattern error for {pattern}: {e}")
            return 0

    @staticmethod
    def _json_serializer(obj):
        """JSON serializer for datetimes and UUIDs."""
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, UUID):
            return str(obj)
        raise TypeError(f"Type {type(obj)} not serializable")


# Global instance
redis_cache = RedisCache()


def cache(
    ttl: int = 60,
    key_prefix: str | None = None,
    key_builder: Callable | None = None,
):
    """
    Async decorator for caching function results in Redis.

    Args:
        ttl: Time to live in seconds
        key_prefix: Prefix for cache key
        key_builder: Function building the cache key. Receives func, args, kwargs.
                     Required when arguments (like a DB session) have no stable repr.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if not settings.cache_enabled or not redis_cache.is_ready:
                return await func(*args, **kwargs)

            if key_builder:
                key = key_builder(func, *args, **kwargs)
            else:
                prefix = key_prefix or func.__module__
                key = f"{prefix}:{func.__name__}:{args}:{sorted(kwargs.items())}"

            cached_val = await redis_cache.get(key)
            if cached_val is not None:
                logger.debug(f"Cache hit: {key}")
                return cached_val

            result = await func(*args, **kwargs)

            if result is not None:
                await redis_cache.set(key, result, ttl)

            return result
        return wrapper
    return decorator
