"""Tests for the key-value store implementations."""

from unittest.mock import AsyncMock, patch

import pytest
import redis.asyncio as redis

from reddit_cache.config import RedisConfig
from reddit_cache.storage.memory_store import MemoryStore
from reddit_cache.storage.redis_store import RedisStore


class TestMemoryStore:

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await MemoryStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_set_without_expiry(self):
        store = MemoryStore()
        await store.set("k", "v")

        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=10 ** 9):
            assert await store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_set_with_expiry_expires(self):
        store = MemoryStore()
        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=1000.0):
            await store.set_with_expiry("k", "v", 60)

        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=1059.0):
            assert await store.get("k") == "v"
        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=1060.0):
            assert await store.get("k") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_overwrite_resets_expiry(self):
        store = MemoryStore()
        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=0.0):
            await store.set_with_expiry("k", "old", 10)
        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=5.0):
            await store.set_with_expiry("k", "new", 10)
        with patch("reddit_cache.storage.memory_store.time.monotonic", return_value=12.0):
            assert await store.get("k") == "new"

    @pytest.mark.asyncio
    async def test_close_clears(self):
        store = MemoryStore()
        await store.set("k", "v")
        await store.close()
        assert await store.get("k") is None


class TestRedisStore:

    @pytest.fixture
    def mock_redis(self):
        with patch("reddit_cache.storage.redis_store.redis.Redis") as mock_cls:
            client = mock_cls.return_value
            client.ping = AsyncMock(return_value=True)
            client.get = AsyncMock(return_value="value")
            client.set = AsyncMock()
            client.setex = AsyncMock()
            client.aclose = AsyncMock()
            yield mock_cls

    @pytest.mark.asyncio
    async def test_connect_uses_config(self, mock_redis):
        store = RedisStore(RedisConfig(host="cache", port=6380, password="pw", db=2))

        await store.connect()

        kwargs = mock_redis.call_args.kwargs
        assert kwargs["host"] == "cache"
        assert kwargs["port"] == 6380
        assert kwargs["password"] == "pw"
        assert kwargs["db"] == 2
        assert kwargs["decode_responses"] is True
        mock_redis.return_value.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_failure_raises_and_resets(self, mock_redis):
        mock_redis.return_value.ping.side_effect = redis.ConnectionError("refused")
        store = RedisStore(RedisConfig())

        with pytest.raises(redis.ConnectionError):
            await store.connect()

        mock_redis.return_value.aclose.assert_awaited_once()
        with pytest.raises(RuntimeError):
            await store.get("k")

    @pytest.mark.asyncio
    async def test_operations_delegate(self, mock_redis):
        store = RedisStore(RedisConfig())
        await store.connect()

        assert await store.get("k") == "value"
        await store.set("k", "v")
        await store.set_with_expiry("k", "v", 3600)

        client = mock_redis.return_value
        client.get.assert_awaited_once_with("k")
        client.set.assert_awaited_once_with("k", "v")
        client.setex.assert_awaited_once_with("k", 3600, "v")

    @pytest.mark.asyncio
    async def test_close(self, mock_redis):
        store = RedisStore(RedisConfig())
        await store.connect()
        await store.close()
        await store.close()

        mock_redis.return_value.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_use_before_connect(self):
        with pytest.raises(RuntimeError):
            await RedisStore(RedisConfig()).set_with_expiry("k", "v", 1)
