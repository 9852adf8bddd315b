"""In-process key-value store for local development and tests."""

import time
from typing import Dict, Optional, Tuple


class MemoryStore:
    """Dict-backed store with lazy expiry.

    Not shared between processes; use RedisStore for anything beyond a single
    interpreter.
    """

    def __init__(self):
        # key -> (value, absolute expiry on the monotonic clock or None)
        self._entries: Dict[str, Tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str) -> None:
        self._entries[key] = (value, None)

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, time.monotonic() + ttl_seconds)

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
