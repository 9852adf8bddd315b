"""Redis-backed key-value store."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from reddit_cache.config import RedisConfig

logger = logging.getLogger(__name__)


class RedisStore:
    """Key-value store over a single long-lived Redis connection pool."""

    def __init__(self, config: RedisConfig):
        self.config = config
        self._client: Optional[Redis] = None

    async def connect(self) -> None:
        """
        Connect to Redis and verify the connection.

        Raises:
            redis.RedisError: If the server cannot be reached
        """
        if self._client is not None:
            return

        self._client = redis.Redis(
            host=self.config.host,
            port=self.config.port,
            password=self.config.password,
            db=self.config.db,
            socket_timeout=self.config.socket_timeout_sec,
            decode_responses=True,
        )
        try:
            await self._client.ping()
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis at {self.config.host}:{self.config.port}: {e}")
            await self._client.aclose()
            self._client = None
            raise
        logger.info(f"Connected to Redis at {self.config.host}:{self.config.port}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from Redis")

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis store not connected")
        return self._client

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        await self.client.setex(key, ttl_seconds, value)
