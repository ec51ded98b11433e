"""
Pydantic models for Sleeper fantasy data, ESPN schedule data and the
recommendations built from them.

Upstream payloads carry many more fields than we use; extra keys are
ignored so a Sleeper or ESPN schema addition never breaks parsing.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class SleeperModel(BaseModel):
    """Base for upstream records"""

    model_config = ConfigDict(extra="ignore")


class SleeperUser(SleeperModel):
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar: Optional[str] = None


class FantasyLeague(SleeperModel):
    league_id: str
    name: Optional[str] = None
    season: Optional[str] = None
    sport: str = "nfl"
    status: Optional[str] = None

    @field_validator("season", mode="before")
    @classmethod
    def _season_as_str(cls, value):
        return None if value is None else str(value)

    @property
    def display_name(self) -> str:
        return self.name or f"League {self.league_id}"


class Roster(SleeperModel):
    roster_id: int
    owner_id: Optional[str] = None
    league_id: Optional[str] = None
    players: List[str] = []
    starters: List[str] = []

    @field_validator("players", "starters", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []


class Matchup(SleeperModel):
    roster_id: Optional[int] = None
    matchup_id: Optional[int] = None
    points: Optional[float] = None
    starters: List[str] = []

    @field_validator("starters", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []


class PlayerRecord(SleeperModel):
    player_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    position: Optional[str] = None
    team: Optional[str] = None
    status: Optional[str] = None


class NFLState(SleeperModel):
    week: int
    season: int
    season_type: Optional[str] = None
    # Week to pre-select in the UI; Sleeper reports >18 in the off-season
    display_week: int = 1


class NFLGame(BaseModel):
    week: int
    season: int
    away_team: str
    home_team: str
    kickoff: int = 0  # epoch milliseconds, 0 when unknown
    status: str = "scheduled"
    name: str


class PlayerInfo(BaseModel):
    name: str
    position: str
    league: str
    is_starter: bool
    is_opponent: bool = False
    owner_name: Optional[str] = None


class GameRecommendation(BaseModel):
    game: NFLGame
    player_count: int
    players: List[PlayerInfo]
