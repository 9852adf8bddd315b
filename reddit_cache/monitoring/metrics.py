"""Prometheus metrics for monitoring the Reddit cache."""

import logging

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

CACHE_HITS = Counter(
    "reddit_cache_hits_total",
    "Number of lookups answered from the cache",
    ["kind"],
)

CACHE_MISSES = Counter(
    "reddit_cache_misses_total",
    "Number of lookups not found in the cache",
    ["kind"],
)

FETCH_OPERATIONS = Counter(
    "reddit_cache_fetch_operations_total",
    "Number of upstream fetches performed",
    ["operation_type"],
)

API_ERRORS = Counter(
    "reddit_cache_api_errors_total",
    "Number of upstream API errors encountered",
    ["error_type"],
)

ICON_FAILURES = Counter(
    "reddit_cache_icon_failures_total",
    "Number of icon lookups that fell back to None",
    ["kind"],
)

END_OF_FEED = Counter(
    "reddit_cache_end_of_feed_total",
    "Number of index lookups past the end of a feed",
)

REQUEST_DURATION = Histogram(
    "reddit_cache_request_duration_seconds",
    "Duration of upstream API requests in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)


class PrometheusExporter:
    """Prometheus metrics exporter for the Reddit cache."""

    def __init__(self, port: int = 8000):
        self.port = port
        self.server_started = False

    def start_server(self) -> None:
        """Start the Prometheus metrics server."""
        if not self.server_started:
            try:
                start_http_server(self.port)
                self.server_started = True
                logger.info(f"Started Prometheus metrics server on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus metrics server: {e}")

    def record_cache_hit(self, kind: str) -> None:
        """
        Record a cache hit.

        Args:
            kind: Record kind ('listing', 'user_icon', 'subreddit_icon')
        """
        CACHE_HITS.labels(kind=kind).inc()

    def record_cache_miss(self, kind: str) -> None:
        CACHE_MISSES.labels(kind=kind).inc()

    def record_fetch_operation(self, operation_type: str) -> None:
        """
        Record an upstream fetch.

        Args:
            operation_type: 'listing', 'user' or 'subreddit'
        """
        FETCH_OPERATIONS.labels(operation_type=operation_type).inc()

    def record_api_error(self, error_type: str) -> None:
        """
        Record an API error.

        Args:
            error_type: Type of API error (e.g., '5xx', '429', 'connection')
        """
        API_ERRORS.labels(error_type=error_type).inc()

    def record_icon_failure(self, kind: str) -> None:
        ICON_FAILURES.labels(kind=kind).inc()

    def record_end_of_feed(self) -> None:
        END_OF_FEED.inc()

    def time_request(self):
        """Context manager timing one upstream request."""
        return REQUEST_DURATION.time()
