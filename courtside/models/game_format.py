"""Game format and position models for the Courtside rotation tracker."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..utils import DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_DURATION_MIN, DEFAULT_POSITION_ICON


def _int_field(data: Dict[str, Any], key: str, default: int) -> int:
    """Read a stored integer, falling back to ``default`` when it is null or malformed."""
    value = data.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Position:
    """A named slot on court, identified within its format by abbreviation."""
    id: str
    name: str
    abbreviation: str
    icon: str = DEFAULT_POSITION_ICON

    def to_record(self, game_format_id: Optional[str] = None) -> Dict[str, Any]:
        """Convert to the persisted position document."""
        record = {
            "id": self.id,
            "name": self.name,
            "abbreviation": self.abbreviation,
            "icon": self.icon,
        }
        if game_format_id is not None:
            record["gameFormatId"] = game_format_id
        return record

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> Position:
        """Create from a persisted position document."""
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            abbreviation=data["abbreviation"],
            icon=data.get("icon") or DEFAULT_POSITION_ICON,
        )


@dataclass
class GameFormat:
    """
    Reusable template defining the position set, period count and duration.

    Attributes:
        id: Document identifier
        name: Display name
        team_size: Number of players on court
        number_of_periods: How many periods a match has (>= 1)
        period_duration: Length of one period in minutes (>= 1)
        is_temporary: True for per-match clones with overridden timing
        positions: Positions on court, in display order
    """
    id: str
    name: str = ""
    team_size: int = 0
    number_of_periods: int = DEFAULT_PERIOD_COUNT
    period_duration: int = DEFAULT_PERIOD_DURATION_MIN
    is_temporary: bool = False
    positions: List[Position] = field(default_factory=list)

    @property
    def period_duration_seconds(self) -> int:
        return int(self.period_duration) * 60

    @property
    def abbreviations(self) -> List[str]:
        return [pos.abbreviation for pos in self.positions]

    def clone_temporary(self, number_of_periods: int, period_duration: int) -> GameFormat:
        """
        Clone this format for a single match with overridden timing.

        The clone keeps the same positions but gets a fresh id and is
        flagged temporary so format pickers can hide it.
        """
        return GameFormat(
            id=str(uuid.uuid4()),
            name=f"{self.name} (Custom)",
            team_size=self.team_size,
            number_of_periods=int(number_of_periods),
            period_duration=int(period_duration),
            is_temporary=True,
            positions=list(self.positions),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to the persisted format document (positions live in a sub-collection)."""
        return {
            "id": self.id,
            "name": self.name,
            "teamSize": self.team_size,
            "numberOfPeriods": self.number_of_periods,
            "periodDuration": self.period_duration,
            "isTemporary": self.is_temporary,
        }

    @classmethod
    def from_record(
        cls, data: Dict[str, Any], positions: Optional[List[Position]] = None
    ) -> GameFormat:
        """Create from a persisted format document and its position documents."""
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            team_size=_int_field(data, "teamSize", 0),
            number_of_periods=max(1, _int_field(data, "numberOfPeriods", DEFAULT_PERIOD_COUNT)),
            period_duration=max(1, _int_field(data, "periodDuration", DEFAULT_PERIOD_DURATION_MIN)),
            is_temporary=bool(data.get("isTemporary", False)),
            positions=list(positions or []),
        )
