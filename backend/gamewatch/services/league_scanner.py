"""
League Scanner - finds the active matchup week for one league, the user's
roster in it, and (optionally) the head-to-head opponent's roster.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from gamewatch.core.config import settings
from gamewatch.models.sleeper_models import FantasyLeague, Matchup, Roster
from gamewatch.services.sleeper_api_service import SleeperAPIService
from gamewatch.services.week_probe import first_matching_week

logger = logging.getLogger(__name__)


class OpponentStatus(str, Enum):
    """Outcome of looking for the user's opponent in a week"""

    FOUND = "found"
    NO_OPPONENT = "no_opponent"  # bye week or best-ball
    NON_STANDARD = "non_standard"  # more than one other roster in the matchup
    NOT_IN_MATCHUP = "not_in_matchup"


@dataclass
class OpponentLookup:
    status: OpponentStatus
    roster_id: Optional[int] = None


@dataclass
class LeagueScan:
    league: FantasyLeague
    week: int
    user_roster: Roster
    opponent: OpponentLookup
    opponent_roster: Optional[Roster] = None


def is_valid_matchup_week(matchups: List[Matchup]) -> bool:
    """A week counts only if at least one roster is actually scheduled"""
    return bool(matchups) and any(m.roster_id is not None for m in matchups)


def find_user_roster(rosters: List[Roster], user_id: str) -> Optional[Roster]:
    for roster in rosters:
        if roster.owner_id == user_id:
            return roster
    return None


def find_opponent(matchups: List[Matchup], roster_id: int) -> OpponentLookup:
    """
    Identify the single roster sharing the user's matchup_id.

    Anything other than exactly one other roster means there is no usable
    head-to-head opponent this week.
    """
    user_matchup = next((m for m in matchups if m.roster_id == roster_id), None)
    if user_matchup is None:
        return OpponentLookup(OpponentStatus.NOT_IN_MATCHUP)
    if user_matchup.matchup_id is None:
        return OpponentLookup(OpponentStatus.NO_OPPONENT)

    others = [
        m
        for m in matchups
        if m.roster_id != roster_id and m.matchup_id == user_matchup.matchup_id
    ]
    if len(others) == 1:
        return OpponentLookup(OpponentStatus.FOUND, others[0].roster_id)
    if not others:
        return OpponentLookup(OpponentStatus.NO_OPPONENT)
    return OpponentLookup(OpponentStatus.NON_STANDARD)


class LeagueScanner:
    """Per-league lookups, strictly sequential"""

    def __init__(self, sleeper: SleeperAPIService, lookahead: Optional[int] = None):
        self.sleeper = sleeper
        self.lookahead = (
            settings.MATCHUP_WEEK_LOOKAHEAD if lookahead is None else lookahead
        )

    async def find_matchup_week(
        self, league_id: str, start_week: int
    ) -> Tuple[Optional[int], List[Matchup]]:
        """Probe start_week..start_week+lookahead for the first week with matchups"""
        week, matchups = await first_matching_week(
            start_week,
            self.lookahead + 1,
            lambda w: self.sleeper.get_league_matchups(league_id, w),
            is_valid_matchup_week,
        )
        return week, matchups or []

    async def scan(
        self,
        league: FantasyLeague,
        user_id: str,
        start_week: int,
        include_opponents: bool = False,
    ) -> Optional[LeagueScan]:
        """
        Scan one league. Returns None when the league contributes nothing:
        no valid matchup week, no roster owned by the user, or an empty roster.
        """
        league_id = league.league_id
        week, matchups = await self.find_matchup_week(league_id, start_week)
        if week is None:
            logger.warning(
                f"League {league_id} ({league.display_name}) - No valid matchups "
                f"found in weeks {start_week}-{start_week + self.lookahead}, skipping"
            )
            return None
        logger.info(
            f"League {league_id} ({league.display_name}) - Found matchups for week {week}"
        )

        rosters = await self.sleeper.get_league_rosters(league_id)
        user_roster = find_user_roster(rosters, user_id)
        if user_roster is None:
            logger.warning(f"No roster found for user {user_id} in league {league_id}")
            return None
        if not user_roster.players:
            logger.info(f"League {league_id} - Skipping (no players)")
            return None

        scan = LeagueScan(
            league=league,
            week=week,
            user_roster=user_roster,
            opponent=OpponentLookup(OpponentStatus.NO_OPPONENT),
        )
        if not include_opponents:
            return scan

        scan.opponent = find_opponent(matchups, user_roster.roster_id)
        if scan.opponent.status == OpponentStatus.FOUND:
            scan.opponent_roster = next(
                (r for r in rosters if r.roster_id == scan.opponent.roster_id), None
            )
            if scan.opponent_roster is None:
                logger.warning(
                    f"League {league_id} - Opponent roster {scan.opponent.roster_id} "
                    f"missing from roster list"
                )
        elif scan.opponent.status == OpponentStatus.NON_STANDARD:
            logger.warning(
                f"League {league_id} ({league.display_name}) - Multiple opponents "
                f"found in same matchup (not a 1v1 league), skipping opponent inclusion"
            )
        else:
            logger.info(
                f"League {league_id} ({league.display_name}) - No opponent found "
                f"for week {week} ({scan.opponent.status.value})"
            )
        return scan
