"""
ESPN Schedule Service - Fetches the NFL regular-season schedule for a week
from ESPN's core API.

The week listing only carries $ref links, so each event's detail record is
fetched separately; those fetches run concurrently.
"""

import asyncio
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from gamewatch.core.config import settings
from gamewatch.models.sleeper_models import NFLGame
from gamewatch.services.espn_teams import espn_team_abbr

logger = logging.getLogger(__name__)

EVENT_ID_PATTERN = re.compile(r"events/(\d+)")
REGULAR_SEASON = 2


def parse_kickoff(date_str: Optional[str]) -> int:
    """ESPN ISO date to epoch milliseconds, 0 when missing or unparseable"""
    if not date_str:
        return 0
    try:
        kickoff = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable ESPN event date: {date_str}")
        return 0
    return int(kickoff.timestamp() * 1000)


def parse_event(event: Dict[str, Any], season: int, week: int) -> Optional[NFLGame]:
    """Build an NFLGame from an ESPN event detail record"""
    competitions = event.get("competitions") or []
    if not competitions:
        return None

    competition = competitions[0]
    home_team = ""
    away_team = ""
    for competitor in competition.get("competitors") or []:
        abbr = espn_team_abbr(competitor.get("id"))
        if competitor.get("homeAway") == "home":
            home_team = abbr
        elif competitor.get("homeAway") == "away":
            away_team = abbr

    if not home_team or not away_team:
        logger.debug(
            f"ESPN event {event.get('id')} has an unmapped team id "
            f"(away={away_team!r}, home={home_team!r})"
        )

    status = "scheduled"
    status_data = competition.get("status")
    if isinstance(status_data, dict):
        status_type = status_data.get("type")
        if isinstance(status_type, dict):
            status = status_type.get("name") or status
        elif isinstance(status_type, str):
            status = status_type

    return NFLGame(
        week=week,
        season=season,
        away_team=away_team,
        home_team=home_team,
        kickoff=parse_kickoff(event.get("date")),
        status=status,
        name=event.get("name") or f"{away_team} @ {home_team}",
    )


class ESPNScheduleService:
    """Service to fetch weekly NFL games from the ESPN core API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.ESPN_CORE_API_BASE).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def get_week_games(self, season: int, week: int) -> List[NFLGame]:
        """
        Fetch all regular-season games for a season/week.

        Returns:
            List of NFLGame, empty if the listing is unavailable. Events whose
            detail fetch fails are dropped.
        """
        url = (
            f"{self.base_url}/seasons/{season}/types/{REGULAR_SEASON}"
            f"/weeks/{week}/events"
        )

        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                items = response.json().get("items") or []

                event_ids = []
                for item in items:
                    ref = item.get("$ref") if isinstance(item, dict) else None
                    match = EVENT_ID_PATTERN.search(ref or "")
                    if match:
                        event_ids.append(match.group(1))

                if not event_ids:
                    logger.info(f"No ESPN events listed for {season} week {week}")
                    return []

                events = await asyncio.gather(
                    *(self._fetch_event(client, event_id) for event_id in event_ids)
                )
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Error fetching NFL schedule from ESPN for week {week}: {e}")
            return []

        games = []
        for event in events:
            if event is None:
                continue
            try:
                game = parse_event(event, season, week)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed ESPN event for week {week}: {e}")
                continue
            if game is not None:
                games.append(game)

        logger.info(f"ESPN {season} week {week}: {len(games)} games")
        return games

    async def _fetch_event(
        self, client: httpx.AsyncClient, event_id: str
    ) -> Optional[Dict[str, Any]]:
        try:
            response = await client.get(f"{self.base_url}/events/{event_id}")
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to fetch ESPN event {event_id}: {e}")
            return None
