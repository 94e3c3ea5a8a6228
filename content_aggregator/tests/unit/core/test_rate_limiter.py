"""Tests for the request throttle and header rotation."""

import asyncio
import time
from unittest.mock import AsyncMock, patch

import pytest

from content_aggregator.config.settings import ThrottleConfig
from content_aggregator.core.rate_limiter import (
    BASE_HEADERS,
    USER_AGENTS,
    RequestThrottle,
    build_request_headers,
)


class TestBuildRequestHeaders:

    def test_user_agent_from_pool(self):
        headers = build_request_headers()
        assert headers["User-Agent"] in USER_AGENTS
        for key, value in BASE_HEADERS.items():
            assert headers[key] == value

    def test_returns_fresh_dict_each_call(self):
        first = build_request_headers()
        first["X-Extra"] = "leak"
        second = build_request_headers()
        assert "X-Extra" not in second
        assert "X-Extra" not in BASE_HEADERS

    def test_custom_pool(self):
        headers = build_request_headers(("only-agent",))
        assert headers["User-Agent"] == "only-agent"


class TestRequestThrottle:

    def setup_method(self):
        self.config = ThrottleConfig(min_interval_sec=2.0, max_interval_sec=3.0)
        self.throttle = RequestThrottle(self.config)

    def test_next_interval_within_window(self):
        for _ in range(50):
            interval = self.throttle.next_interval()
            assert 2.0 <= interval <= 3.0

    @pytest.mark.asyncio
    @patch("asyncio.sleep", new_callable=AsyncMock)
    async def test_pre_request_waits_for_remaining_floor(self, mock_sleep):
        """A request right after another one waits out the drawn interval."""
        self.throttle.last_request_time = time.time()

        with patch("content_aggregator.core.rate_limiter.random.uniform", return_value=2.5):
            await self.throttle.pre_request()

        mock_sleep.assert_awaited_once()
        waited = mock_sleep.await_args.args[0]
        assert 2.0 < waited <= 2.5

    @pytest.mark.asyncio
    @patch("asyncio.sleep", new_callable=AsyncMock)
    async def test_pre_request_no_sleep_when_interval_elapsed(self, mock_sleep):
        self.throttle.last_request_time = time.time() - 10.0

        await self.throttle.pre_request()

        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    @patch("asyncio.sleep", new_callable=AsyncMock)
    async def test_pre_request_records_dispatch_time(self, mock_sleep):
        before = time.time()
        await self.throttle.pre_request()
        assert self.throttle.last_request_time >= before

    def test_refresh_restarts_window(self):
        self.throttle.last_request_time = 0.0
        self.throttle.refresh()
        assert self.throttle.last_request_time == pytest.approx(time.time(), abs=1.0)


@pytest.mark.asyncio
async def test_cancelled_wait_records_no_dispatch():
    """Cancelling a caller blocked on the spacing delay leaves the throttle untouched."""
    throttle = RequestThrottle(ThrottleConfig(min_interval_sec=60.0, max_interval_sec=60.0))
    throttle.last_request_time = time.time()
    previous_dispatch = throttle.last_request_time

    waiter = asyncio.create_task(throttle.pre_request())
    await asyncio.sleep(0.01)
    assert throttle._lock.locked()

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    assert throttle.last_request_time == previous_dispatch
    assert not throttle._lock.locked()
