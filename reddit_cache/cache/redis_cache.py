"""Typed cache records on top of a key-value store.

Key layout::

    reddit:{subreddit}:{mode}:{page}           listing page (JSON)
    user:{name}:icon                           user icon URL
    reddit:{subreddit}:icon                    subreddit icon URL
    url:{url}                                  unpacked URL
    channel:{channel}:{subreddit}:{mode}:index last index shown in a channel
    channel:{channel}:{user}:prev              previous input of a user
"""

import json
import logging
from typing import Optional

from reddit_cache.models.listing import Listing, SubredditMode, mode_value
from reddit_cache.storage.base_store import KeyValueStore

logger = logging.getLogger(__name__)

HOUR = 60 * 60
DAY = 24 * HOUR

EXPIRE_USER_ICON = HOUR
EXPIRE_SUBREDDIT_ICON = HOUR
EXPIRE_URL = HOUR
EXPIRE_CHANNEL_INDEX = HOUR
EXPIRE_USER_INPUT = HOUR

# Modes without a time window (hot, new, ...) change quickly.
DEFAULT_LISTING_TTL = 16 * HOUR

_LISTING_TTLS = {
    SubredditMode.HOUR.value: HOUR,
    SubredditMode.DAY.value: DAY,
    SubredditMode.WEEK.value: 7 * DAY,
    SubredditMode.MONTH.value: 30 * DAY,
    SubredditMode.YEAR.value: 90 * DAY,
    SubredditMode.ALL.value: 90 * DAY,
}


def ttl_for_mode(mode: str) -> int:
    """Return how long, in seconds, a listing page for ``mode`` stays cached."""
    return _LISTING_TTLS.get(mode_value(mode), DEFAULT_LISTING_TTL)


def listing_key(subreddit: str, mode: str, page: int) -> str:
    return f"reddit:{subreddit}:{mode_value(mode)}:{page}"


def user_icon_key(user_name: str) -> str:
    return f"user:{user_name}:icon"


def subreddit_icon_key(subreddit_name: str) -> str:
    return f"reddit:{subreddit_name}:icon"


def packed_url_key(url: str) -> str:
    return f"url:{url}"


def channel_index_key(channel_id: str, subreddit: str, mode: str) -> str:
    return f"channel:{channel_id}:{subreddit}:{mode_value(mode)}:index"


def previous_input_key(channel_id: str, user_id: str) -> str:
    return f"channel:{channel_id}:{user_id}:prev"


class RedditCacheStore:
    """Reads and writes every record kind the cache keeps."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def store_listing(self, subreddit: str, mode: str, page: int, listing: Listing) -> None:
        await self.store.set_with_expiry(
            listing_key(subreddit, mode, page),
            json.dumps(listing),
            ttl_for_mode(mode),
        )

    async def get_listing(self, subreddit: str, mode: str, page: int) -> Optional[Listing]:
        raw = await self.store.get(listing_key(subreddit, mode, page))
        if raw is None:
            return None
        return json.loads(raw)

    async def get_user_icon(self, user_name: str) -> Optional[str]:
        return await self.store.get(user_icon_key(user_name))

    async def store_user_icon(self, user_name: str, icon: str) -> None:
        await self.store.set_with_expiry(user_icon_key(user_name), icon, EXPIRE_USER_ICON)

    async def get_subreddit_icon(self, subreddit_name: str) -> Optional[str]:
        return await self.store.get(subreddit_icon_key(subreddit_name))

    async def store_subreddit_icon(self, subreddit_name: str, icon: str) -> None:
        await self.store.set_with_expiry(subreddit_icon_key(subreddit_name), icon, EXPIRE_SUBREDDIT_ICON)

    async def get_cached_packed_url(self, url: str) -> Optional[str]:
        return await self.store.get(packed_url_key(url))

    async def store_cached_packed_url(self, url: str, unpacked_url: str) -> None:
        await self.store.set_with_expiry(packed_url_key(url), unpacked_url, EXPIRE_URL)

    async def get_channel_index(self, channel_id: str, subreddit: str, mode: str) -> int:
        """Return the last index shown for a subreddit/mode in a channel, 0 if unknown."""
        raw = await self.store.get(channel_index_key(channel_id, subreddit, mode))
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Discarding non-integer channel index {raw!r} for {channel_id}")
            return 0

    async def store_channel_index(self, channel_id: str, subreddit: str, mode: str, index: int) -> None:
        await self.store.set_with_expiry(
            channel_index_key(channel_id, subreddit, mode), str(index), EXPIRE_CHANNEL_INDEX
        )

    async def get_previous_input(self, channel_id: str, user_id: str) -> Optional[str]:
        return await self.store.get(previous_input_key(channel_id, user_id))

    async def store_previous_input(self, channel_id: str, user_id: str, user_input: str) -> None:
        await self.store.set_with_expiry(
            previous_input_key(channel_id, user_id), user_input, EXPIRE_USER_INPUT
        )
