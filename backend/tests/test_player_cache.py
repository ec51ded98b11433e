"""
Tests for the player directory TTL cache
"""
import asyncio
from unittest.mock import AsyncMock

from gamewatch.services.player_cache import PlayerDirectoryCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestPlayerDirectoryCache:
    def test_first_read_fetches(self):
        cache = PlayerDirectoryCache(ttl_seconds=3600, clock=FakeClock())
        fetcher = AsyncMock(return_value={"1": {"team": "KC"}})

        result = asyncio.run(cache.get_or_refresh(fetcher))

        assert result == {"1": {"team": "KC"}}
        assert fetcher.await_count == 1
        assert cache.fetched_at == 1000.0

    def test_warm_cache_does_not_refetch(self):
        clock = FakeClock()
        cache = PlayerDirectoryCache(ttl_seconds=3600, clock=clock)
        fetcher = AsyncMock(return_value={"1": {"team": "KC"}})

        asyncio.run(cache.get_or_refresh(fetcher))
        clock.now += 3599
        asyncio.run(cache.get_or_refresh(fetcher))

        assert fetcher.await_count == 1
        assert cache.is_fresh()

    def test_expired_cache_refreshes(self):
        clock = FakeClock()
        cache = PlayerDirectoryCache(ttl_seconds=3600, clock=clock)
        fetcher = AsyncMock(side_effect=[{"1": {"team": "KC"}}, {"1": {"team": "BUF"}}])

        asyncio.run(cache.get_or_refresh(fetcher))
        clock.now += 3600
        result = asyncio.run(cache.get_or_refresh(fetcher))

        assert fetcher.await_count == 2
        assert result == {"1": {"team": "BUF"}}
        assert cache.fetched_at == 4600.0

    def test_failed_refresh_returns_empty_and_retries_next_time(self):
        clock = FakeClock()
        cache = PlayerDirectoryCache(ttl_seconds=3600, clock=clock)
        fetcher = AsyncMock(side_effect=[{"1": {"team": "KC"}}, RuntimeError("boom"), {"2": {}}])

        asyncio.run(cache.get_or_refresh(fetcher))
        clock.now += 7200

        assert asyncio.run(cache.get_or_refresh(fetcher)) == {}
        assert cache.value == {"1": {"team": "KC"}}
        assert asyncio.run(cache.get_or_refresh(fetcher)) == {"2": {}}

    def test_empty_refresh_is_not_cached(self):
        cache = PlayerDirectoryCache(ttl_seconds=3600, clock=FakeClock())
        fetcher = AsyncMock(return_value={})

        asyncio.run(cache.get_or_refresh(fetcher))
        asyncio.run(cache.get_or_refresh(fetcher))

        assert fetcher.await_count == 2
        assert not cache.is_fresh()

    def test_invalidate_and_stats(self):
        clock = FakeClock()
        cache = PlayerDirectoryCache(ttl_seconds=60, clock=clock)
        asyncio.run(cache.get_or_refresh(AsyncMock(return_value={"1": {}, "2": {}})))
        clock.now += 10

        stats = cache.get_stats()
        assert stats["players"] == 2
        assert stats["age_seconds"] == 10
        assert stats["fresh"] is True

        cache.invalidate()
        assert cache.get_stats()["players"] == 0
        assert cache.get_stats()["age_seconds"] is None
