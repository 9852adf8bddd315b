"""Defines the protocol for key-value cache stores."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """
    A protocol for string key-value stores with per-key expiry.

    Expiry is enforced by the store itself; callers never delete keys.
    """

    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent or expired."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key without expiry."""
        ...

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, expiring after ttl_seconds."""
        ...

    async def close(self) -> None:
        """Release the store's connection."""
        ...
