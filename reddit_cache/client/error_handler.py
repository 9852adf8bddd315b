"""Retry logic for Reddit API requests."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from aiohttp import ClientError, ClientResponseError

from reddit_cache.client.rate_limiter import RateLimiter
from reddit_cache.config import RetryConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Awaitable[T]]

RETRYABLE_ERRORS = (ClientError, asyncio.TimeoutError)


async def call_with_backoff(
    func: AsyncFunc[T],
    *args: Any,
    retry: Optional[RetryConfig] = None,
    rate_limiter: Optional[RateLimiter] = None,
    prometheus_exporter=None,
    **kwargs: Any,
) -> T:
    """
    Await ``func(*args, **kwargs)``, retrying transient failures.

    5xx responses and transport errors are retried with exponential backoff.
    429 responses wait for the rate limiter and do not use up a retry.
    Other HTTP errors and non-network exceptions are raised immediately.

    Args:
        func: Coroutine function to call
        retry: Backoff settings (defaults to RetryConfig())
        rate_limiter: Limiter used to wait out 429 responses
        prometheus_exporter: Optional exporter for API error metrics

    Returns:
        Whatever ``func`` returns
    """
    retry = retry or RetryConfig()
    retries = 0
    backoff = retry.initial_backoff

    while True:
        try:
            return await func(*args, **kwargs)
        except ClientResponseError as e:
            if e.status == 429 and rate_limiter:
                if prometheus_exporter:
                    prometheus_exporter.record_api_error("429")
                await rate_limiter.handle_429(e.headers.get("Retry-After") if e.headers else None)
                continue

            if not 500 <= e.status < 600:
                if prometheus_exporter:
                    prometheus_exporter.record_api_error("4xx")
                logger.warning(f"Client error {e.status}: {e.message}")
                raise

            if prometheus_exporter:
                prometheus_exporter.record_api_error("5xx")
            if retries >= retry.max_retries:
                logger.error(f"Max retries ({retry.max_retries}) exceeded: {e}")
                raise
            logger.warning(f"Server error {e.status}, retrying in {backoff:.2f}s "
                           f"({retries + 1}/{retry.max_retries})")
        except RETRYABLE_ERRORS as e:
            if prometheus_exporter:
                prometheus_exporter.record_api_error("connection")
            if retries >= retry.max_retries:
                logger.error(f"Max retries ({retry.max_retries}) exceeded: {e!r}")
                raise
            logger.warning(f"Request failed: {e!r}, retrying in {backoff:.2f}s "
                           f"({retries + 1}/{retry.max_retries})")

        await asyncio.sleep(backoff)
        retries += 1
        backoff = min(backoff * retry.backoff_factor, retry.max_backoff)
