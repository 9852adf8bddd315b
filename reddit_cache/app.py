"""Wires the store, Reddit client and cache together and owns their lifecycle."""

import logging
from typing import Optional

from reddit_cache.cache.paginated_cache import PaginatedCache
from reddit_cache.cache.redis_cache import RedditCacheStore
from reddit_cache.client.rate_limiter import RateLimiter
from reddit_cache.client.reddit_client import RedditClient
from reddit_cache.config import Config
from reddit_cache.monitoring.metrics import PrometheusExporter
from reddit_cache.storage.base_store import KeyValueStore
from reddit_cache.storage.redis_store import RedisStore

logger = logging.getLogger(__name__)


class RedditCacheApp:
    """
    Process-wide container for the long-lived connections.

    Call start() once at startup and stop() at shutdown, or use it as an
    async context manager.
    """

    def __init__(self, config: Config, store: Optional[KeyValueStore] = None):
        """
        Args:
            config: Application configuration
            store: Store to use instead of a RedisStore built from config.redis
        """
        self.config = config
        self.prometheus_exporter = (
            PrometheusExporter(config.monitoring.prometheus_port)
            if config.monitoring.enable_prometheus
            else None
        )
        self.store = store if store is not None else RedisStore(config.redis)
        self.cache_store = RedditCacheStore(self.store)
        self.rate_limiter = RateLimiter(config.rate_limit)
        self.client = RedditClient(
            config.reddit,
            rate_limiter=self.rate_limiter,
            retry=config.retry,
            prometheus_exporter=self.prometheus_exporter,
        )
        self.cache = PaginatedCache(
            self.client,
            self.cache_store,
            prometheus_exporter=self.prometheus_exporter,
        )

    async def start(self) -> None:
        logger.info("Starting Reddit cache")
        if isinstance(self.store, RedisStore):
            await self.store.connect()
        try:
            await self.client.initialize()
            if self.prometheus_exporter:
                self.prometheus_exporter.start_server()
        except Exception:
            logger.error("Startup failed, releasing connections")
            try:
                await self.client.close()
            finally:
                await self.store.close()
            raise

    async def stop(self) -> None:
        logger.info("Stopping Reddit cache")
        try:
            await self.client.close()
        finally:
            await self.store.close()

    async def __aenter__(self) -> "RedditCacheApp":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
