"""
Sleeper Fantasy API gateway

Read-only, unauthenticated access to users, leagues, rosters, matchups,
the NFL state and the bulk player directory. List calls degrade to an
empty list and single-entity lookups to None when the upstream fails;
callers decide whether absence is fatal.
"""
import logging
from typing import Any, List, Optional

import httpx

from gamewatch.core.config import settings
from gamewatch.models.sleeper_models import (
    FantasyLeague,
    Matchup,
    NFLState,
    Roster,
    SleeperUser,
)
from gamewatch.services.player_cache import PlayerDirectory, PlayerDirectoryCache

logger = logging.getLogger(__name__)

UNOWNED_ROSTER_NAME = "Unowned roster"

# Process-wide so every service instance shares one copy of the directory
players_cache = PlayerDirectoryCache(ttl_seconds=settings.PLAYERS_CACHE_TTL_SECONDS)


class SleeperAPIService:
    """Sleeper API integration service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        player_cache: Optional[PlayerDirectoryCache] = None,
    ):
        self.base_url = (base_url or settings.SLEEPER_API_BASE).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport
        self.player_cache = player_cache or players_cache

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout or self.timeout, transport=self._transport
        )

    async def _get_json(self, path: str, timeout: Optional[float] = None) -> Any:
        async with self._client(timeout) as client:
            response = await client.get(f"{self.base_url}{path}")
            response.raise_for_status()
            return response.json()

    async def get_user(self, username_or_id: str) -> Optional[SleeperUser]:
        """Look up a user by username or user id; None when it does not exist"""
        try:
            data = await self._get_json(f"/user/{username_or_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.info(f"Sleeper user '{username_or_id}' not found")
            else:
                logger.error(f"Failed to look up Sleeper user '{username_or_id}': {e}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error looking up Sleeper user '{username_or_id}': {e}")
            return None

        # Sleeper answers unknown users with a 200 and a null body
        if not data:
            logger.info(f"Sleeper user '{username_or_id}' not found")
            return None

        try:
            return SleeperUser.model_validate(data)
        except ValueError as e:
            logger.error(f"Malformed Sleeper user payload for '{username_or_id}': {e}")
            return None

    async def get_user_display_name(self, owner_id: Optional[str]) -> str:
        """Username for a roster owner, then their display name, then the id"""
        if not owner_id:
            return UNOWNED_ROSTER_NAME
        user = await self.get_user(owner_id)
        if user:
            name = user.username or user.display_name
            if name:
                return name
        return f"Owner {owner_id}"

    async def get_user_leagues(self, user_id: str, season: int) -> List[FantasyLeague]:
        """Get all NFL leagues for a user in a season"""
        try:
            data = await self._get_json(f"/user/{user_id}/leagues/nfl/{season}")
            return [FantasyLeague.model_validate(league) for league in data or []]
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error(f"Failed to get Sleeper leagues for user {user_id}: {e}")
            return []

    async def get_league_rosters(self, league_id: str) -> List[Roster]:
        """Get every roster in a league"""
        try:
            data = await self._get_json(f"/league/{league_id}/rosters")
            return [
                Roster.model_validate(roster) for roster in data or [] if roster
            ]
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error(f"Failed to get rosters for league {league_id}: {e}")
            return []

    async def get_league_matchups(self, league_id: str, week: int) -> List[Matchup]:
        """Get matchup entries (one per roster) for a week"""
        try:
            data = await self._get_json(f"/league/{league_id}/matchups/{week}")
            return [
                Matchup.model_validate(matchup) for matchup in data or [] if matchup
            ]
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.warning(
                f"Error fetching matchups for league {league_id} week {week}: {e}"
            )
            return []

    async def get_nfl_state(self) -> Optional[NFLState]:
        """Get current NFL week and season as Sleeper sees them"""
        try:
            data = await self._get_json("/state/nfl")
            return NFLState.model_validate(data)
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error(f"Failed to get NFL state: {e}")
            return None

    async def get_all_players(self) -> PlayerDirectory:
        """Get the bulk NFL player directory, served from cache when fresh"""
        return await self.player_cache.get_or_refresh(self._fetch_all_players)

    async def _fetch_all_players(self) -> PlayerDirectory:
        data = await self._get_json(
            "/players/nfl", timeout=settings.PLAYERS_HTTP_TIMEOUT_SECONDS
        )
        if not isinstance(data, dict):
            raise ValueError("player directory is not an object")
        return data
