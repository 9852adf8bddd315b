from reddit_cache.storage.base_store import KeyValueStore
from reddit_cache.storage.memory_store import MemoryStore
from reddit_cache.storage.redis_store import RedisStore

__all__ = ["KeyValueStore", "MemoryStore", "RedisStore"]
