"""
Process-wide cache for the Sleeper bulk player directory.

The directory is a multi-megabyte JSON object keyed by player id, shared by
every league and every request, so it is fetched at most once per TTL.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)

PlayerDirectory = Dict[str, Dict[str, Any]]


class PlayerDirectoryCache:
    """
    Single-entry TTL cache holding (value, fetched_at).

    A fresh entry is served without touching the network. A stale or empty
    entry is refreshed synchronously through the fetcher passed to
    get_or_refresh(). Concurrent refreshes are not coalesced: the last
    completed fetch wins.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.value: PlayerDirectory = {}
        self.fetched_at: Optional[float] = None

    def is_fresh(self) -> bool:
        if not self.value or self.fetched_at is None:
            return False
        return (self._clock() - self.fetched_at) < self.ttl_seconds

    async def get_or_refresh(
        self, fetcher: Callable[[], Awaitable[PlayerDirectory]]
    ) -> PlayerDirectory:
        """Return the cached directory, refreshing it first when stale"""
        if self.is_fresh():
            return self.value

        started = self._clock()
        try:
            directory = await fetcher()
        except Exception as e:
            logger.error(f"Failed to refresh player directory: {e}")
            return {}

        if not directory:
            logger.warning("Player directory refresh returned no players")
            return {}

        self.value = directory
        self.fetched_at = started
        logger.info(f"Player directory refreshed: {len(directory)} players")
        return self.value

    def invalidate(self):
        self.value = {}
        self.fetched_at = None

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        age = None
        if self.fetched_at is not None:
            age = self._clock() - self.fetched_at
        return {
            "players": len(self.value),
            "age_seconds": age,
            "ttl_seconds": self.ttl_seconds,
            "fresh": self.is_fresh(),
            "cache_type": "in_memory",
        }
