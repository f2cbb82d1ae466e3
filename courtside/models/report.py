"""Dataclasses representing court-time summaries for the Courtside rotation tracker."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PlayerTimeRow:
    """Aggregated court time for a single player."""

    player_id: str
    name: str
    total_seconds: int
    position_seconds: Dict[str, int] = field(default_factory=dict)


@dataclass
class MatchTimeReport:
    """Full-match planned court time for every player on the match roster."""

    match_id: str
    name: Optional[str]
    game_format_name: str
    rows: List[PlayerTimeRow] = field(default_factory=list)


@dataclass
class TournamentReport:
    """Tournament-wide totals plus the per-match tables they were summed from."""

    tournament_id: str
    name: str
    positions: List[str] = field(default_factory=list)
    rows: List[PlayerTimeRow] = field(default_factory=list)
    matches: List[MatchTimeReport] = field(default_factory=list)
