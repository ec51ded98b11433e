"""
Game Recommendation Service

Ranks the week's NFL games by how many of a Sleeper user's fantasy players
take part in them:

1. Resolve the NFL state and the week to look at
2. Scan every league the user is in, tallying their rostered players per
   NFL team (each player counted once across leagues) and, optionally,
   their head-to-head opponents' players
3. Find the ESPN schedule week whose games are actually happening around now
4. Score each game from the tallies of its two teams, rank, and package the
   top N with player detail
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set, Tuple

from gamewatch.core.config import settings
from gamewatch.models.sleeper_models import (
    GameRecommendation,
    NFLGame,
    NFLState,
    PlayerInfo,
    SleeperUser,
)
from gamewatch.services.espn_schedule_service import ESPNScheduleService
from gamewatch.services.league_scanner import LeagueScan, LeagueScanner
from gamewatch.services.player_cache import PlayerDirectory
from gamewatch.services.player_resolver import ResolvedPlayer, resolve_player
from gamewatch.services.sleeper_api_service import SleeperAPIService
from gamewatch.services.week_probe import first_matching_week

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = "User not found. Please check your Sleeper username."
OWN_PLAYER_OWNER = "You"
DAY_MS = 24 * 60 * 60 * 1000


class SleeperUserNotFoundError(ValueError):
    """The Sleeper username (or id) does not resolve to a user"""

    def __init__(self, username: str):
        super().__init__(USER_NOT_FOUND_MESSAGE)
        self.username = username


class TeamPlayerTally:
    """
    Per-NFL-team player detail gathered across all of a user's leagues.

    Both mappings keep teams in first-seen order and players in the order
    they were added. `counted_ids` only tracks the user's own players:
    opponents are checked against it but never added to it.
    """

    def __init__(self):
        self.counted_ids: Set[str] = set()
        self.own: Dict[str, List[PlayerInfo]] = {}
        self.opponents: Dict[str, List[PlayerInfo]] = {}

    def add_own(
        self, player: ResolvedPlayer, league_name: str, is_starter: bool
    ) -> bool:
        """Count one of the user's players; False if already counted or teamless"""
        if player.player_id in self.counted_ids:
            return False
        self.counted_ids.add(player.player_id)
        if not player.team:
            return False
        self.own.setdefault(player.team, []).append(
            PlayerInfo(
                name=player.name,
                position=player.position,
                league=league_name,
                is_starter=is_starter,
                is_opponent=False,
                owner_name=OWN_PLAYER_OWNER,
            )
        )
        return True

    def add_opponent(
        self,
        player: ResolvedPlayer,
        league_name: str,
        is_starter: bool,
        owner_name: str,
    ) -> bool:
        if player.player_id in self.counted_ids or not player.team:
            return False
        self.opponents.setdefault(player.team, []).append(
            PlayerInfo(
                name=player.name,
                position=player.position,
                league=league_name,
                is_starter=is_starter,
                is_opponent=True,
                owner_name=owner_name,
            )
        )
        return True

    def own_count(self, team: str) -> int:
        return len(self.own.get(team, []))

    def opponent_count(self, team: str) -> int:
        return len(self.opponents.get(team, []))

    def starter_count(self, team: str, include_opponents: bool) -> int:
        players = self.players_for(team, include_opponents)
        return sum(1 for p in players if p.is_starter)

    def players_for(self, team: str, include_opponents: bool) -> List[PlayerInfo]:
        players = list(self.own.get(team, []))
        if include_opponents:
            players.extend(self.opponents.get(team, []))
        return players

    def team_counts(self) -> Dict[str, int]:
        return {team: len(players) for team, players in self.own.items()}


@dataclass
class RankedGame:
    game: NFLGame
    own_count: int
    display_count: int
    starter_count: int
    teams: List[str] = field(default_factory=list)

    def player_count(self, only_starters: bool) -> int:
        return self.starter_count if only_starters else self.display_count


def rank_games(
    games: List[NFLGame],
    tally: TeamPlayerTally,
    only_starters: bool = False,
    include_opponents: bool = False,
) -> List[RankedGame]:
    """
    Score and order games. A game qualifies only through the user's own
    players; opponents add to the displayed count but never qualify a game.
    Equal scores keep schedule order.
    """
    ranked = []
    for game in games:
        teams = [t for t in dict.fromkeys((game.away_team, game.home_team)) if t]
        own_count = sum(tally.own_count(t) for t in teams)
        if own_count == 0:
            continue

        display_count = own_count
        if include_opponents:
            display_count += sum(tally.opponent_count(t) for t in teams)

        starter_count = 0
        if only_starters:
            starter_count = sum(
                tally.starter_count(t, include_opponents) for t in teams
            )

        ranked.append(
            RankedGame(
                game=game,
                own_count=own_count,
                display_count=display_count,
                starter_count=starter_count,
                teams=[
                    t
                    for t in teams
                    if tally.own_count(t)
                    or (include_opponents and tally.opponent_count(t))
                ],
            )
        )

    ranked.sort(key=lambda g: g.player_count(only_starters), reverse=True)
    return ranked


def assemble_recommendations(
    ranked: List[RankedGame],
    tally: TeamPlayerTally,
    number_of_games: int,
    only_starters: bool = False,
    include_opponents: bool = False,
) -> List[GameRecommendation]:
    """Top `number_of_games` ranked games with their players flattened per team"""
    recommendations = []
    for entry in ranked[: max(number_of_games, 0)]:
        players: List[PlayerInfo] = []
        for team in entry.teams:
            players.extend(tally.players_for(team, include_opponents))
        recommendations.append(
            GameRecommendation(
                game=entry.game,
                player_count=entry.player_count(only_starters),
                players=players,
            )
        )
    return recommendations


class GameRecommendationService:
    """Recommends NFL games to watch for a Sleeper user"""

    def __init__(
        self,
        sleeper: Optional[SleeperAPIService] = None,
        schedule: Optional[ESPNScheduleService] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.sleeper = sleeper or SleeperAPIService()
        self.schedule = schedule or ESPNScheduleService()
        self.scanner = LeagueScanner(self.sleeper)
        self._clock = clock

    async def resolve_user(self, username: str) -> SleeperUser:
        """Resolve a Sleeper username; raises SleeperUserNotFoundError"""
        username = (username or "").strip()
        if not username:
            raise SleeperUserNotFoundError(username)
        user = await self.sleeper.get_user(username)
        if user is None:
            raise SleeperUserNotFoundError(username)
        return user

    async def get_current_league_state(self) -> NFLState:
        """
        Current NFL week/season. display_week is the week to pre-select:
        weeks past the regular season (off-season) map to week 1.
        """
        state = await self.sleeper.get_nfl_state()
        if state is None:
            year = datetime.fromtimestamp(self._clock(), tz=timezone.utc).year
            logger.warning(f"NFL state unavailable, assuming season {year} week 1")
            return NFLState(week=1, season=year, display_week=1)

        state.display_week = self._clamp_week(state.week)
        return state

    def _clamp_week(self, week: int) -> int:
        if week > settings.REGULAR_SEASON_WEEKS or week < 1:
            logger.info(f"Off-season week {week} detected, adjusted week to 1")
            return 1
        return week

    async def recommend_for_username(
        self,
        username: str,
        number_of_games: int = 1,
        only_starters: bool = False,
        include_opponents: bool = False,
        selected_week: Optional[int] = None,
    ) -> List[GameRecommendation]:
        user = await self.resolve_user(username)
        return await self.compute_recommendations(
            user.user_id,
            number_of_games=number_of_games,
            only_starters=only_starters,
            include_opponents=include_opponents,
            selected_week=selected_week,
        )

    async def get_recommended_game(self, user_id: str) -> Optional[GameRecommendation]:
        """Single best game by starters, or None"""
        recommendations = await self.compute_recommendations(
            user_id, number_of_games=1, only_starters=True
        )
        return recommendations[0] if recommendations else None

    async def compute_recommendations(
        self,
        user_id: str,
        number_of_games: int = 1,
        only_starters: bool = False,
        include_opponents: bool = False,
        selected_week: Optional[int] = None,
    ) -> List[GameRecommendation]:
        """
        Rank this week's games for a user.

        Returns an empty list when the user has no leagues or no game involves
        any of their players; only a failed user lookup upstream of this call
        is an error.
        """
        state = await self.get_current_league_state()
        season = state.season
        week = self._clamp_week(selected_week) if selected_week else state.display_week
        logger.debug(f"NFL season {season}, starting week {week}")

        leagues = await self.sleeper.get_user_leagues(user_id, season)
        logger.info(f"Leagues found for user {user_id}: {len(leagues)}")
        if not leagues:
            logger.warning(f"No leagues found for user {user_id}")
            return []

        directory = await self.sleeper.get_all_players()
        tally = TeamPlayerTally()

        for league in leagues:
            try:
                scan = await self.scanner.scan(
                    league, user_id, week, include_opponents=include_opponents
                )
                if scan is not None:
                    await self._collect_league(scan, directory, tally, include_opponents)
            except Exception as e:
                logger.error(f"Error processing league {league.league_id}: {e}")
                continue

        if not tally.own:
            logger.warning(f"No rostered players on NFL teams for user {user_id}")
            return []
        logger.debug(f"Player counts by team: {tally.team_counts()}")

        schedule_week, games = await self.resolve_schedule_week(season, week)
        if schedule_week is None:
            logger.warning(
                f"No NFL games near the current date in weeks {week}-"
                f"{week + settings.SCHEDULE_WEEK_ATTEMPTS - 1}"
            )
            return []

        ranked = rank_games(games, tally, only_starters, include_opponents)
        for idx, entry in enumerate(ranked, start=1):
            logger.debug(
                f"  {idx}. {entry.game.away_team} @ {entry.game.home_team} "
                f"({entry.player_count(only_starters)} players from "
                f"{', '.join(entry.teams)})"
            )

        recommendations = assemble_recommendations(
            ranked, tally, number_of_games, only_starters, include_opponents
        )
        if not recommendations:
            logger.warning(
                "No games found with any of your players in the current timeframe"
            )
        return recommendations

    async def _collect_league(
        self,
        scan: LeagueScan,
        directory: PlayerDirectory,
        tally: TeamPlayerTally,
        include_opponents: bool,
    ):
        league_name = scan.league.display_name
        roster = scan.user_roster
        starters = set(roster.starters)
        added = 0
        for player_id in roster.players:
            if tally.add_own(
                resolve_player(player_id, directory),
                league_name,
                player_id in starters,
            ):
                added += 1
        logger.info(
            f"League {scan.league.league_id} ({league_name}) - "
            f"{len(roster.players)} players, {len(starters)} starters, {added} counted"
        )

        opponent = scan.opponent_roster
        if not include_opponents or opponent is None or not opponent.players:
            return

        owner_name = await self.sleeper.get_user_display_name(opponent.owner_id)
        opponent_starters = set(opponent.starters)
        for player_id in opponent.players:
            tally.add_opponent(
                resolve_player(player_id, directory),
                league_name,
                player_id in opponent_starters,
                owner_name,
            )

    async def resolve_schedule_week(
        self, season: int, start_week: int
    ) -> Tuple[Optional[int], List[NFLGame]]:
        """
        First week from start_week whose games include a kickoff between
        7 days ago and 28 days from now, with that week's games.
        """
        now_ms = int(self._clock() * 1000)
        window_start = now_ms - settings.SCHEDULE_WINDOW_PAST_DAYS * DAY_MS
        window_end = now_ms + settings.SCHEDULE_WINDOW_FUTURE_DAYS * DAY_MS

        def in_window(games: List[NFLGame]) -> bool:
            return any(window_start <= g.kickoff <= window_end for g in games)

        week, games = await first_matching_week(
            start_week,
            settings.SCHEDULE_WEEK_ATTEMPTS,
            lambda w: self.schedule.get_week_games(season, w),
            in_window,
        )
        if week is not None:
            logger.info(f"Using NFL schedule week {week} ({len(games)} games)")
        return week, games or []


game_recommendation_service = GameRecommendationService()
