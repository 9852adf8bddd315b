"""Shared fixtures for the reddit_cache test-suite."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from reddit_cache.cache.paginated_cache import PaginatedCache
from reddit_cache.cache.redis_cache import RedditCacheStore
from reddit_cache.client.reddit_client import RedditClient
from reddit_cache.storage.memory_store import MemoryStore


def build_submission(n: int, subreddit: str = "test") -> dict:
    return {
        "author": f"user{n}",
        "selftext": f"body {n}",
        "created": 1700000000.0 + n,
        "title": f"Post {n}",
        "url": f"https://example.com/{n}",
        "subreddit": subreddit,
        "over_18": False,
        "spoiler": False,
        "permalink": f"/r/{subreddit}/comments/{n}/post_{n}/",
    }


def build_listing(start: int, count: int, after=None) -> dict:
    """Listing holding submissions numbered start .. start+count-1."""
    return {
        "after": after,
        "before": None,
        "limit": 20,
        "count": 20,
        "show": "all",
        "children": [
            {"kind": "t3", "data": build_submission(n)} for n in range(start, start + count)
        ],
    }


@pytest.fixture
def make_listing():
    return build_listing


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def cache_store(memory_store):
    return RedditCacheStore(memory_store)


@pytest.fixture
def mock_client():
    client = MagicMock(spec=RedditClient)
    client.fetch_submissions = AsyncMock()
    client.fetch_user = AsyncMock()
    client.fetch_subreddit = AsyncMock()
    return client


@pytest.fixture
def paginated_cache(mock_client, cache_store):
    return PaginatedCache(mock_client, cache_store)
