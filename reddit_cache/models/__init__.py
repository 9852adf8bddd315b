from reddit_cache.models.listing import (
    DirectListing,
    EmptyListing,
    Listing,
    ListingChild,
    ListingResponse,
    RedditUser,
    Submission,
    SubredditAbout,
    SubredditMode,
    TIME_WINDOW_MODES,
    WrappedListing,
    decode_listing_response,
    mode_value,
)

__all__ = [
    "DirectListing",
    "EmptyListing",
    "Listing",
    "ListingChild",
    "ListingResponse",
    "RedditUser",
    "Submission",
    "SubredditAbout",
    "SubredditMode",
    "TIME_WINDOW_MODES",
    "WrappedListing",
    "decode_listing_response",
    "mode_value",
]
