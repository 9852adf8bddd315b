"""Client-side rate limiting for Reddit API requests."""

import asyncio
import logging
import time
from typing import Any, Mapping, Optional

from reddit_cache.config import RateLimitConfig

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SEC = 60.0


class RateLimiter:
    """
    Spaces out requests and honours Reddit's X-Ratelimit headers.

    One instance is shared by every request a client makes, so concurrent
    callers queue behind a lock while the limiter decides how long to wait.
    """

    def __init__(self, config: RateLimitConfig):
        self.config = config
        self.remaining_calls: Optional[int] = None
        self.reset_timestamp: Optional[float] = None
        self.last_request_time = 0.0
        self.min_interval = 60.0 / self.config.max_requests_per_minute
        self._lock = asyncio.Lock()

    async def pre_request(self) -> None:
        """Sleep as long as needed before the next request may be sent."""
        async with self._lock:
            elapsed = time.time() - self.last_request_time
            if elapsed < self.min_interval:
                await asyncio.sleep(self.min_interval - elapsed)

            if (self.remaining_calls is not None
                    and self.reset_timestamp is not None
                    and self.remaining_calls < self.config.min_remaining_calls):
                wait_time = self.reset_timestamp - time.time() + self.config.sleep_buffer_sec
                if wait_time > 0:
                    logger.info(f"Only {self.remaining_calls} calls left in window, "
                                f"sleeping {wait_time:.2f}s until reset")
                    await asyncio.sleep(wait_time)
                self._clear_window()

            self.last_request_time = time.time()

    def update_from_headers(self, headers: Mapping[str, Any]) -> None:
        """
        Track the remaining-call budget from response headers.

        Args:
            headers: Response headers of a Reddit API request
        """
        remaining = headers.get("x-ratelimit-remaining")
        if remaining is not None:
            try:
                self.remaining_calls = int(float(remaining))
            except (ValueError, TypeError):
                logger.warning(f"Unparseable x-ratelimit-remaining header: {remaining!r}")

        reset = headers.get("x-ratelimit-reset")
        if reset is not None:
            try:
                self.reset_timestamp = time.time() + float(reset)
            except (ValueError, TypeError):
                logger.warning(f"Unparseable x-ratelimit-reset header: {reset!r}")

    async def handle_429(self, retry_after: Optional[str] = None) -> None:
        """
        Wait out a 429 Too Many Requests response.

        Args:
            retry_after: Value of the Retry-After header, if any
        """
        try:
            wait_seconds = float(retry_after) if retry_after else DEFAULT_RETRY_AFTER_SEC
        except (ValueError, TypeError):
            wait_seconds = DEFAULT_RETRY_AFTER_SEC
        wait_seconds += self.config.sleep_buffer_sec

        logger.warning(f"Rate limited (429), waiting {wait_seconds:.2f}s before retrying")
        await asyncio.sleep(wait_seconds)
        self._clear_window()

    def _clear_window(self) -> None:
        self.remaining_calls = None
        self.reset_timestamp = None
