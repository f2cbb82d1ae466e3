"""
Roster models for the Courtside rotation tracker.

Players belong to exactly one roster. The engines only read them; creation
and deletion happen through roster management in the repository.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..utils import DEFAULT_PLAYER_POSITION


@dataclass
class Player:
    """A player on a roster."""
    id: str
    name: str
    position: str = DEFAULT_PLAYER_POSITION
    roster_id: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "rosterId": self.roster_id,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Player":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            position=data.get("position") or DEFAULT_PLAYER_POSITION,
            roster_id=data.get("rosterId"),
        )


@dataclass
class Roster:
    """A named list of players usable across matches."""
    id: str
    name: str
    description: str = ""
    player_ids: List[str] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "playerIds": list(self.player_ids),
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Roster":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description") or "",
            player_ids=list(data.get("playerIds") or []),
        )
