"""Match, match plan and tournament models for the Courtside rotation tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PlayerPosition:
    """One planned (position, player) pair inside a period plan record."""
    position: str
    player_id: str

    def to_record(self) -> Dict[str, str]:
        return {"position": self.position, "playerId": self.player_id}

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> PlayerPosition:
        return cls(position=data["position"], player_id=str(data["playerId"]))


@dataclass
class MatchPlanRecord:
    """Persisted plan for a single period (quarter) of a match."""
    id: str
    quarter: int
    match_id: Optional[str] = None
    player_positions: List[PlayerPosition] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "matchId": self.match_id,
            "quarter": self.quarter,
            "playerPositions": [pp.to_record() for pp in self.player_positions],
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> MatchPlanRecord:
        positions = []
        for entry in data.get("playerPositions") or []:
            if entry.get("position") and entry.get("playerId"):
                positions.append(PlayerPosition.from_record(entry))
        return cls(
            id=str(data["id"]),
            quarter=int(data.get("quarter") or 0),
            match_id=data.get("matchId"),
            player_positions=positions,
        )


@dataclass
class Match:
    """A game between a roster and an opponent, played under one game format."""
    id: str
    game_format_id: str
    team1_roster_id: str
    name: Optional[str] = None
    start_time: Optional[str] = None
    tournament_id: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        record = {
            "id": self.id,
            "gameFormatId": self.game_format_id,
            "team1RosterId": self.team1_roster_id,
            "name": self.name,
            "startTime": self.start_time,
        }
        if self.tournament_id is not None:
            record["tournamentId"] = self.tournament_id
        return record

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> Match:
        return cls(
            id=str(data["id"]),
            game_format_id=str(data.get("gameFormatId", "")),
            team1_roster_id=str(data.get("team1RosterId", "")),
            name=data.get("name"),
            start_time=data.get("startTime"),
            tournament_id=data.get("tournamentId"),
        )


@dataclass
class Tournament:
    """A named group of matches whose court time is aggregated."""
    id: str
    name: str
    match_ids: List[str] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "matchIds": list(self.match_ids)}

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> Tournament:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            match_ids=list(data.get("matchIds") or []),
        )
