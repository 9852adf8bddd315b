"""Async client for the public Reddit JSON API."""

import json
import logging
import random
import re
from contextlib import nullcontext
from typing import Any, Dict, Optional

import aiohttp

from reddit_cache.client.error_handler import call_with_backoff
from reddit_cache.client.rate_limiter import RateLimiter
from reddit_cache.config import RedditApiConfig, RetryConfig
from reddit_cache.exceptions import (
    EmptyListingError,
    InvalidModeError,
    InvalidNameError,
    MalformedResponseError,
)
from reddit_cache.models.listing import (
    EmptyListing,
    Listing,
    RedditUser,
    SubredditAbout,
    SubredditMode,
    TIME_WINDOW_MODES,
    decode_listing_response,
    mode_value,
)

logger = logging.getLogger(__name__)

CACHE_PER_PAGE = 20
DELETED_USER = "[deleted]"

# https://www.reddit.com/user/timawesomeness/comments/813jpq/default_reddit_profile_pictures/
DEFAULT_ICON_URL = "https://www.redditstatic.com/avatars/avatar_default_{texture}_{color}.png"
DEFAULT_ICON_COLORS = (
    "A5A4A4", "545452", "A06A42", "C18D42", "FF4500",
    "FF8717", "FFB000", "FFD635", "DDBD37", "D4E815",
    "94E044", "46A508", "46D160", "0DD3BB", "25B79F",
    "008985", "24A0ED", "0079D3", "7193FF", "4856A3",
    "7E53C1", "FF66AC", "DB0064", "EA0027", "FF585B",
)

# Reddit double-encodes some entities in its JSON bodies. &gt; is not in the
# table and stays encoded.
ENTITY_REPLACEMENTS = {
    "&amp;": "&",
    "&quot;": "'",
    "&lt;": "<",
}
_ENTITY_PATTERN = re.compile("|".join(ENTITY_REPLACEMENTS), re.IGNORECASE)

_PLAIN_MODES = frozenset(
    m.value for m in (SubredditMode.NEW, SubredditMode.RANDOM, SubredditMode.RISING)
)


def random_default_user_icon() -> str:
    """Return the URL of one of Reddit's default avatars, chosen at random."""
    texture = f"{random.randint(1, 20):02d}"
    color = random.choice(DEFAULT_ICON_COLORS)
    return DEFAULT_ICON_URL.format(texture=texture, color=color)


def unescape_entities(text: str) -> str:
    return _ENTITY_PATTERN.sub(lambda m: ENTITY_REPLACEMENTS[m.group(0).lower()], text)


def build_listing_params(mode: str, after: Optional[str] = None) -> Dict[str, str]:
    """
    Build the query string for a listing request.

    Args:
        mode: Sort mode (a SubredditMode or its string value)
        after: Continuation cursor from the previous page

    Returns:
        Query parameters for the listing endpoint

    Raises:
        InvalidModeError: If the mode is not recognised
    """
    mode = mode_value(mode)
    params = {
        "count": str(CACHE_PER_PAGE),
        "limit": str(CACHE_PER_PAGE),
        "show": "all",
    }
    if after:
        params["after"] = after

    if mode == SubredditMode.HOT.value:
        params["g"] = "GLOBAL"
    elif mode in TIME_WINDOW_MODES:
        params["t"] = mode
    elif mode not in _PLAIN_MODES:
        raise InvalidModeError(mode)

    return params


class RedditClient:
    """Fetches listings and about records from Reddit without authentication."""

    def __init__(
        self,
        config: RedditApiConfig,
        rate_limiter: Optional[RateLimiter] = None,
        retry: Optional[RetryConfig] = None,
        prometheus_exporter=None,
    ):
        """
        Initialize the client. No connection is made until initialize().

        Args:
            config: Reddit API settings
            rate_limiter: Optional limiter consulted before every request
            retry: Backoff settings for transient failures
            prometheus_exporter: Optional Prometheus exporter for metrics
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.rate_limiter = rate_limiter
        self.retry = retry or RetryConfig()
        self.prometheus_exporter = prometheus_exporter
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Open the HTTP session."""
        if self._session is None:
            logger.info(f"Opening Reddit API session for {self.base_url}")
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.config.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.config.timeout_sec),
            )

    async def close(self) -> None:
        """Close the HTTP session and release resources."""
        if self._session is not None:
            logger.info("Closing Reddit API session")
            await self._session.close()
            self._session = None

    async def _request_text(self, path: str, params: Optional[Dict[str, str]] = None) -> str:
        if self._session is None:
            raise RuntimeError("Reddit client not initialized")

        if self.rate_limiter:
            await self.rate_limiter.pre_request()

        timer = self.prometheus_exporter.time_request() if self.prometheus_exporter else None
        with timer if timer else nullcontext():
            async with self._session.get(f"{self.base_url}{path}", params=params) as response:
                if self.rate_limiter:
                    self.rate_limiter.update_from_headers(response.headers)
                response.raise_for_status()
                return await response.text()

    async def _fetch_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        text = await call_with_backoff(
            self._request_text,
            path,
            params,
            retry=self.retry,
            rate_limiter=self.rate_limiter,
            prometheus_exporter=self.prometheus_exporter,
        )
        return json.loads(unescape_entities(text))

    async def fetch_submissions(self, subreddit: str, mode: str,
                                after: Optional[str] = None) -> Listing:
        """
        Fetch one page of a subreddit feed.

        Args:
            subreddit: Subreddit name
            mode: Sort mode
            after: Continuation cursor from the previous page

        Returns:
            The listing page

        Raises:
            InvalidModeError: If the mode is not recognised
            EmptyListingError: If Reddit returned no listing
        """
        mode = mode_value(mode)
        params = build_listing_params(mode, after)
        logger.debug(f"Fetching r/{subreddit}/{mode} after={after}")

        if self.prometheus_exporter:
            self.prometheus_exporter.record_fetch_operation("listing")

        decoded = decode_listing_response(await self._fetch_json(f"/r/{subreddit}/{mode}", params))
        if isinstance(decoded, EmptyListing):
            logger.warning(f"Empty listing for r/{subreddit}/{mode}: {decoded.reason}")
            raise EmptyListingError(subreddit, mode, after)
        return decoded.listing

    async def fetch_user(self, user_name: str) -> RedditUser:
        """
        Fetch a user's about record.

        Raises:
            InvalidNameError: For an empty or deleted user name
            MalformedResponseError: If the response carries no user name
        """
        if not user_name or user_name == DELETED_USER:
            raise InvalidNameError(user_name)

        if self.prometheus_exporter:
            self.prometheus_exporter.record_fetch_operation("user")

        res = await self._fetch_json(f"/user/{user_name}/about")
        return self._about_data(res, "user", user_name)

    async def fetch_subreddit(self, subreddit_name: str) -> SubredditAbout:
        """Fetch a subreddit's about record."""
        if self.prometheus_exporter:
            self.prometheus_exporter.record_fetch_operation("subreddit")

        res = await self._fetch_json(f"/r/{subreddit_name}/about")
        return self._about_data(res, "subreddit", subreddit_name)

    @staticmethod
    def _about_data(res: Any, kind: str, name: str) -> Any:
        data = res.get("data") if isinstance(res, dict) else None
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise MalformedResponseError(kind, name)
        return data
