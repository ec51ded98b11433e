"""
Resolve Sleeper player ids against the bulk player directory
"""
import logging
from dataclasses import dataclass
from typing import Optional

from gamewatch.models.sleeper_models import PlayerRecord
from gamewatch.services.player_cache import PlayerDirectory

logger = logging.getLogger(__name__)

UNKNOWN_POSITION = "N/A"


@dataclass(frozen=True)
class ResolvedPlayer:
    player_id: str
    name: str
    position: str
    team: Optional[str]


def display_name(player_id: str, record: Optional[PlayerRecord]) -> str:
    """First + last name, then full name, then the raw id"""
    if record is None:
        return player_id
    if record.first_name and record.last_name:
        return f"{record.first_name} {record.last_name}"
    return record.full_name or player_id


def resolve_player(player_id: str, directory: PlayerDirectory) -> ResolvedPlayer:
    """
    Look a player up in the directory.

    `team` is None for free agents, retired players and ids missing from the
    directory; such players cannot be matched to a game.
    """
    raw = directory.get(player_id)
    record = None
    if isinstance(raw, dict):
        try:
            record = PlayerRecord.model_validate(raw)
        except ValueError as e:
            logger.warning(f"Malformed directory entry for player {player_id}: {e}")

    if record is None:
        return ResolvedPlayer(player_id, player_id, UNKNOWN_POSITION, None)

    return ResolvedPlayer(
        player_id=player_id,
        name=display_name(player_id, record),
        position=record.position or UNKNOWN_POSITION,
        team=record.team or None,
    )
