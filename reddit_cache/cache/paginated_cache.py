"""Index-addressable access to subreddit feeds, backed by the cache."""

import logging
from typing import Optional

from reddit_cache.cache.redis_cache import RedditCacheStore
from reddit_cache.client.reddit_client import CACHE_PER_PAGE, RedditClient
from reddit_cache.models.listing import Listing, Submission, mode_value

logger = logging.getLogger(__name__)


class PaginatedCache:
    """
    Read-through cache over the Reddit client.

    A flat index is split into (page, offset). Reddit paginates with opaque
    ``after`` cursors, so page N can only be fetched precisely when page N-1
    is still cached. When it is not, the page is fetched from the start of the
    feed instead; the submission returned may then differ from a straight walk
    of the feed. Concurrent misses on the same page each fetch and overwrite
    the same key.
    """

    def __init__(
        self,
        client: RedditClient,
        cache_store: RedditCacheStore,
        prometheus_exporter=None,
    ):
        """
        Args:
            client: Initialized Reddit client
            cache_store: Cache records over the shared store
            prometheus_exporter: Optional Prometheus exporter for metrics
        """
        self.client = client
        self.cache_store = cache_store
        self.prometheus_exporter = prometheus_exporter

    def _item_from_page(self, listing: Listing, offset: int, subreddit: str,
                        mode: str, page: int) -> Optional[Submission]:
        children = listing.get("children") or []
        if offset >= len(children):
            logger.info(f"r/{subreddit}/{mode} page {page} has {len(children)} submissions, "
                        f"offset {offset} is past the end of the feed")
            if self.prometheus_exporter:
                self.prometheus_exporter.record_end_of_feed()
            return None
        return children[offset]["data"]

    async def get_item_at_index(self, subreddit: str, mode: str, index: int) -> Optional[Submission]:
        """
        Return the submission at ``index`` of a subreddit feed.

        Args:
            subreddit: Subreddit name
            mode: Sort mode (a SubredditMode or its string value)
            index: Zero-based position in the feed

        Returns:
            The submission, or None when the feed ends before ``index``

        Raises:
            ValueError: If index is negative
            InvalidModeError, EmptyListingError: From the upstream fetch
        """
        if index < 0:
            raise ValueError(f"index must be non-negative, got {index}")

        mode = mode_value(mode)
        page, offset = divmod(index, CACHE_PER_PAGE)

        cached = await self.cache_store.get_listing(subreddit, mode, page)
        if cached is not None:
            logger.debug(f"r/{subreddit}/{mode} page {page} from cache "
                         f"({len(cached.get('children') or [])} submissions)")
            if self.prometheus_exporter:
                self.prometheus_exporter.record_cache_hit("listing")
            return self._item_from_page(cached, offset, subreddit, mode, page)

        if self.prometheus_exporter:
            self.prometheus_exporter.record_cache_miss("listing")

        after = None
        if page > 0:
            previous = await self.cache_store.get_listing(subreddit, mode, page - 1)
            if previous is None:
                logger.warning(f"r/{subreddit}/{mode} page {page - 1} not cached, "
                               f"fetching page {page} from the start of the feed")
            elif not previous.get("after"):
                logger.info(f"r/{subreddit}/{mode} ends at page {page - 1}")
                if self.prometheus_exporter:
                    self.prometheus_exporter.record_end_of_feed()
                return None
            else:
                after = previous["after"]

        listing = await self.client.fetch_submissions(subreddit, mode, after)
        logger.debug(f"Storing r/{subreddit}/{mode} page {page} "
                     f"({len(listing['children'])} submissions)")
        await self.cache_store.store_listing(subreddit, mode, page, listing)
        return self._item_from_page(listing, offset, subreddit, mode, page)

    async def get_author_icon(self, user_name: str, cache_only: bool = False) -> Optional[str]:
        """
        Return a user's icon URL, or None if it cannot be found.

        Args:
            user_name: Reddit user name
            cache_only: Never call Reddit; only return a cached icon
        """
        icon = await self.cache_store.get_user_icon(user_name)
        if icon is not None:
            if self.prometheus_exporter:
                self.prometheus_exporter.record_cache_hit("user_icon")
            return icon
        if self.prometheus_exporter:
            self.prometheus_exporter.record_cache_miss("user_icon")
        if cache_only:
            return None

        try:
            user = await self.client.fetch_user(user_name)
            await self.cache_store.store_user_icon(user_name, user["icon_img"])
            return user["icon_img"]
        except Exception as e:
            logger.warning(f"Could not get user icon for '{user_name}': {e}")
            if self.prometheus_exporter:
                self.prometheus_exporter.record_icon_failure("user")
            return None

    async def get_subreddit_icon(self, subreddit_name: str, cache_only: bool = False) -> Optional[str]:
        """Return a subreddit's icon URL, or None if it cannot be found."""
        icon = await self.cache_store.get_subreddit_icon(subreddit_name)
        if icon is not None:
            if self.prometheus_exporter:
                self.prometheus_exporter.record_cache_hit("subreddit_icon")
            return icon
        if self.prometheus_exporter:
            self.prometheus_exporter.record_cache_miss("subreddit_icon")
        if cache_only:
            return None

        try:
            subreddit = await self.client.fetch_subreddit(subreddit_name)
            await self.cache_store.store_subreddit_icon(subreddit_name, subreddit["icon_img"])
            return subreddit["icon_img"]
        except Exception as e:
            logger.warning(f"Could not get subreddit icon for '{subreddit_name}': {e}")
            if self.prometheus_exporter:
                self.prometheus_exporter.record_icon_failure("subreddit")
            return None
