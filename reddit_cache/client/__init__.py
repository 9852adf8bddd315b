from reddit_cache.client.rate_limiter import RateLimiter
from reddit_cache.client.reddit_client import (
    CACHE_PER_PAGE,
    RedditClient,
    random_default_user_icon,
)

__all__ = [
    "CACHE_PER_PAGE",
    "RateLimiter",
    "RedditClient",
    "random_default_user_icon",
]
