"""Tests for the Redis cache decorator and client wrapper."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
import json
import uuid

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from core.cache import RedisCache, cache, redis_cache


@pytest.fixture
def fake_redis():
    """Attach a mocked Redis client to the cache singleton."""
    client = AsyncMock()
    redis_cache._redis = client
    with patch("core.cache.settings.cache_enabled", True):
        yield client
    redis_cache._redis = None


def counting(key_builder=None):
    calls = []

    @cache(ttl=30, key_builder=key_builder)
    async def load(language):
        calls.append(language)
        return [{"question_id": "stress_level", "language": language}]

    return load, calls


class TestCacheDecorator:

    @pytest.mark.asyncio
    async def test_bypassed_when_not_initialized(self):
        assert not redis_cache.is_ready
        load, calls = counting()
        with patch("core.cache.settings.cache_enabled", True):
            await load("en")
            await load("en")
        assert calls == ["en", "en"]

    @pytest.mark.asyncio
    async def test_bypassed_when_disabled(self, fake_redis):
        load, calls = counting()
        with patch("core.cache.settings.cache_enabled", False):
            await load("en")
        assert calls == ["en"]
        fake_redis.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_miss_then_store(self, fake_redis):
        fake_redis.get.return_value = None
        load, calls = counting(key_builder=lambda func, language: f"quiz_schema:{language}")

        result = await load("hi")

        assert calls == ["hi"]
        fake_redis.get.assert_awaited_once_with("quiz_schema:hi")
        key, payload = fake_redis.set.await_args.args
        assert key == "quiz_schema:hi"
        assert json.loads(payload) == result
        assert fake_redis.set.await_args.kwargs == {"ex": 30}

    @pytest.mark.asyncio
    async def test_hit_skips_function(self, fake_redis):
        fake_redis.get.return_value = json.dumps([{"question_id": "cached"}])
        load, calls = counting(key_builder=lambda func, language: f"quiz_schema:{language}")

        assert await load("en") == [{"question_id": "cached"}]
        assert calls == []

    @pytest.mark.asyncio
    async def test_redis_errors_fail_open(self, fake_redis):
        fake_redis.get.side_effect = RedisConnectionError("refused")
        fake_redis.set.side_effect = RedisConnectionError("refused")
        load, calls = counting()

        assert await load("en") == [{"question_id": "stress_level", "language": "en"}]
        assert calls == ["en"]


class TestRedisCache:

    def test_singleton(self):
        assert RedisCache() is redis_cache

    def test_redis_property_requires_init(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            redis_cache.redis

    @pytest.mark.asyncio
    async def test_set_serializes_uuid_and_datetime(self, fake_redis):
        value = {"id": uuid.UUID(int=1), "at": datetime(2025, 3, 10, tzinfo=timezone.utc)}
        assert await redis_cache.set("k", value, 10) is True
        payload = fake_redis.set.await_args.args[1]
        assert json.loads(payload) == {
            "id": "00000000-0000-0000-0000-000000000001",
            "at": "2025-03-10T00:00:00+00:00",
        }

    @pytest.mark.asyncio
    async def test_delete_pattern(self, fake_redis):
        async def scan_iter(match):
            for key in ("quiz_schema:en", "quiz_schema:hi"):
                yield key

        fake_redis.scan_iter = scan_iter
        assert await redis_cache.delete_pattern("quiz_schema:*") == 2
        fake_redis.delete.assert_awaited_once_with("quiz_schema:en", "quiz_schema:hi")

    @pytest.mark.asyncio
    async def test_close(self, fake_redis):
        await redis_cache.close()
        fake_redis.aclose.assert_awaited_once()
        assert not redis_cache.is_ready
