"""Tests for the rate limiter module."""

from unittest.mock import AsyncMock, patch

import pytest

from reddit_cache.client.rate_limiter import RateLimiter
from reddit_cache.config import RateLimitConfig


@pytest.fixture
def rate_limiter():
    return RateLimiter(RateLimitConfig(
        max_requests_per_minute=60,  # 1 request per second
        min_remaining_calls=5,
        sleep_buffer_sec=1,
    ))


@pytest.mark.asyncio
async def test_pre_request_enforces_min_interval(rate_limiter):
    rate_limiter.last_request_time = 100.0
    with patch("reddit_cache.client.rate_limiter.time.time", return_value=100.25), \
         patch("reddit_cache.client.rate_limiter.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await rate_limiter.pre_request()

    mock_sleep.assert_awaited_once_with(0.75)


@pytest.mark.asyncio
async def test_pre_request_no_sleep_needed(rate_limiter):
    rate_limiter.last_request_time = 100.0
    with patch("reddit_cache.client.rate_limiter.time.time", return_value=101.5), \
         patch("reddit_cache.client.rate_limiter.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await rate_limiter.pre_request()

    mock_sleep.assert_not_awaited()
    assert rate_limiter.last_request_time == 101.5


@pytest.mark.asyncio
async def test_pre_request_waits_for_window_reset(rate_limiter):
    rate_limiter.last_request_time = 0.0
    rate_limiter.remaining_calls = 3
    rate_limiter.reset_timestamp = 110.0
    with patch("reddit_cache.client.rate_limiter.time.time", return_value=100.0), \
         patch("reddit_cache.client.rate_limiter.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await rate_limiter.pre_request()

    # 10s until reset + 1s buffer
    mock_sleep.assert_awaited_once_with(11.0)
    assert rate_limiter.remaining_calls is None
    assert rate_limiter.reset_timestamp is None


def test_update_from_headers(rate_limiter):
    with patch("reddit_cache.client.rate_limiter.time.time", return_value=100.0):
        rate_limiter.update_from_headers({"x-ratelimit-remaining": "42.0", "x-ratelimit-reset": "30"})

    assert rate_limiter.remaining_calls == 42
    assert rate_limiter.reset_timestamp == 130.0


def test_update_from_headers_invalid_values(rate_limiter):
    rate_limiter.update_from_headers({"x-ratelimit-remaining": "invalid", "x-ratelimit-reset": "also-invalid"})

    assert rate_limiter.remaining_calls is None
    assert rate_limiter.reset_timestamp is None


def test_update_from_headers_missing(rate_limiter):
    rate_limiter.update_from_headers({})

    assert rate_limiter.remaining_calls is None


@pytest.mark.asyncio
@pytest.mark.parametrize("retry_after, expected", [("60", 61.0), ("2.5", 3.5), (None, 61.0), ("soon", 61.0)])
async def test_handle_429(rate_limiter, retry_after, expected):
    rate_limiter.remaining_calls = 0
    rate_limiter.reset_timestamp = 500.0
    with patch("reddit_cache.client.rate_limiter.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await rate_limiter.handle_429(retry_after)

    mock_sleep.assert_awaited_once_with(expected)
    assert rate_limiter.remaining_calls is None
    assert rate_limiter.reset_timestamp is None
