"""Exceptions raised by the Reddit client and cache layers."""

from typing import Optional


class RedditCacheError(Exception):
    """Base class for all reddit_cache errors."""
    pass


class InvalidModeError(RedditCacheError):
    def __init__(self, mode: str):
        self.mode = mode
        self.message = f"Invalid mode '{mode}' was passed to fetch_submissions"
        super().__init__(self.message)


class EmptyListingError(RedditCacheError):
    """Reddit returned no usable listing for a subreddit/mode/cursor."""

    def __init__(self, subreddit: str, mode: str, after: Optional[str] = None):
        self.subreddit = subreddit
        self.mode = mode
        self.after = after
        self.message = f"No listing was returned for r/{subreddit}/{mode} after={after or '<null>'}"
        super().__init__(self.message)


class InvalidNameError(RedditCacheError):
    def __init__(self, name: Optional[str]):
        self.name = name
        self.message = f"Empty name '{name or ''}' was given to fetch_user"
        super().__init__(self.message)


class MalformedResponseError(RedditCacheError):
    """An about endpoint answered without a well-formed ``data.name``."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        self.message = f"Invalid {kind} response for '{name}'"
        super().__init__(self.message)
