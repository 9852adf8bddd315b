"""Data models for Reddit listings, submissions and about records."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, TypedDict, Union


class SubredditMode(str, Enum):
    """Sort modes accepted by the listing endpoint.

    ``hour`` through ``all`` are time windows of the "top" sort.
    """

    HOT = "hot"
    NEW = "new"
    RANDOM = "random"
    RISING = "rising"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    def __str__(self) -> str:
        return self.value

    def __format__(self, format_spec: str) -> str:
        return format(self.value, format_spec)


TIME_WINDOW_MODES = frozenset(
    m.value
    for m in (
        SubredditMode.HOUR,
        SubredditMode.DAY,
        SubredditMode.WEEK,
        SubredditMode.MONTH,
        SubredditMode.YEAR,
        SubredditMode.ALL,
    )
)



def mode_value(mode: Union[str, SubredditMode]) -> str:
    """Return the plain string form of a sort mode, as used in URLs and cache keys."""
    return mode.value if isinstance(mode, SubredditMode) else mode

class Submission(TypedDict):
    """A single post as returned inside a listing. Passed through untouched."""
    author: str
    selftext: str
    created: float
    title: str
    url: str
    subreddit: str
    over_18: bool
    spoiler: bool
    permalink: str


class ListingChild(TypedDict):
    kind: str
    data: Submission


class Listing(TypedDict):
    """One page of a subreddit feed plus the cursor for the next page."""
    after: Optional[str]
    before: Optional[str]
    limit: int
    count: int
    show: str
    children: List[ListingChild]


class RedditUser(TypedDict):
    name: str
    icon_img: str


class SubredditAbout(TypedDict):
    name: str
    icon_img: str


@dataclass(frozen=True)
class WrappedListing:
    """Listing delivered inside a one-element list (``[{"data": {...}}]``)."""
    listing: Listing


@dataclass(frozen=True)
class DirectListing:
    """Listing delivered as a plain ``{"data": {...}}`` object."""
    listing: Listing


@dataclass(frozen=True)
class EmptyListing:
    """No usable listing in the response."""
    reason: str


ListingResponse = Union[WrappedListing, DirectListing, EmptyListing]


def _listing_from_container(container: Any) -> Optional[Listing]:
    if not isinstance(container, dict):
        return None
    data = container.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("children"), list):
        return None
    return data


def decode_listing_response(payload: Any) -> ListingResponse:
    """
    Classify a decoded listing response body.

    Reddit sometimes answers a listing request with an array wrapping the
    listing object instead of the object itself.

    Args:
        payload: JSON-decoded response body

    Returns:
        WrappedListing, DirectListing or EmptyListing
    """
    if isinstance(payload, list):
        if not payload:
            return EmptyListing("empty wrapper list")
        listing = _listing_from_container(payload[0])
        if listing is None:
            return EmptyListing("wrapped element has no listing data")
        return WrappedListing(listing)

    listing = _listing_from_container(payload)
    if listing is None:
        return EmptyListing("response has no listing data")
    return DirectListing(listing)
