from reddit_cache.cache.paginated_cache import PaginatedCache
from reddit_cache.cache.redis_cache import RedditCacheStore, ttl_for_mode

__all__ = ["PaginatedCache", "RedditCacheStore", "ttl_for_mode"]
