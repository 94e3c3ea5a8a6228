"""Tests for the expiring cache."""

from unittest.mock import AsyncMock

import pytest

from content_aggregator.core.cache import ExpiringCache, build_cache_key


class TestBuildCacheKey:

    def test_joins_operation_and_params(self):
        assert build_cache_key("media_posts", "pics", 25, "week") == "media_posts:pics:25:week"

    def test_none_param(self):
        assert build_cache_key("op", None, 1) == "op::1"


class TestExpiringCache:

    def test_get_before_and_after_expiry(self, fake_clock):
        cache = ExpiringCache(clock=fake_clock)
        cache.set("k", ["value"], ttl=60)

        fake_clock.advance(59)
        assert cache.get("k") == ["value"]

        fake_clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_hits_and_misses(self, fake_clock):
        cache = ExpiringCache(clock=fake_clock)
        cache.get("missing")
        cache.set("k", 1, ttl=10)
        cache.get("k")

        assert cache.hits == 1
        assert cache.misses == 1

    def test_invalidate_and_clear(self, fake_clock):
        cache = ExpiringCache(clock=fake_clock)
        cache.set("a", 1, ttl=10)
        cache.set("b", 2, ttl=10)

        cache.invalidate("a")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_get_or_compute_caches_result(self, fake_clock):
        cache = ExpiringCache(clock=fake_clock)
        compute = AsyncMock(return_value=["fresh"])

        first = await cache.get_or_compute("k", 900, compute)
        second = await cache.get_or_compute("k", 900, compute)

        assert first == second == ["fresh"]
        compute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_or_compute_recomputes_after_expiry(self, fake_clock):
        cache = ExpiringCache(clock=fake_clock)
        compute = AsyncMock(side_effect=["old", "new"])

        assert await cache.get_or_compute("k", 900, compute) == "old"
        fake_clock.advance(900)
        assert await cache.get_or_compute("k", 900, compute) == "new"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl", [None, 0])
    async def test_no_ttl_bypasses_cache(self, fake_clock, ttl):
        cache = ExpiringCache(clock=fake_clock)
        compute = AsyncMock(return_value="value")

        await cache.get_or_compute("k", ttl, compute)
        await cache.get_or_compute("k", ttl, compute)

        assert compute.await_count == 2
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_failure_not_cached(self, fake_clock):
        cache = ExpiringCache(clock=fake_clock)
        compute = AsyncMock(side_effect=[RuntimeError("boom"), "ok"])

        with pytest.raises(RuntimeError):
            await cache.get_or_compute("k", 60, compute)

        assert await cache.get_or_compute("k", 60, compute) == "ok"
