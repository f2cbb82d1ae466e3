"""
Court occupancy and accrued time models for the Courtside rotation tracker.

An occupancy map assigns players to on-court positions, keyed by position
abbreviation. The functions here never mutate their input; they return a new
map so callers can compare before and after states. A player id appears in
at most one slot of a map.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

OccupancyMap = Dict[str, Optional[str]]


def empty_occupancy(abbreviations: Iterable[str]) -> OccupancyMap:
    """Build a map with every position unassigned."""
    return {abbr: None for abbr in abbreviations}


def position_of(occupancy: Mapping[str, Optional[str]], player_id: str) -> Optional[str]:
    """Return the slot currently held by ``player_id``, if any."""
    for abbr, occupant in occupancy.items():
        if occupant == player_id:
            return abbr
    return None


def on_court_player_ids(occupancy: Mapping[str, Optional[str]]) -> List[str]:
    return [pid for pid in occupancy.values() if pid]


def benched_player_ids(
    occupancy: Mapping[str, Optional[str]], player_ids: Iterable[str]
) -> List[str]:
    on_court = set(on_court_player_ids(occupancy))
    return [pid for pid in player_ids if pid not in on_court]


def assign_player(
    occupancy: Mapping[str, Optional[str]], position: str, player_id: str
) -> OccupancyMap:
    """
    Place ``player_id`` in ``position``.

    If the player already holds another slot, the target slot's previous
    occupant (possibly nobody) moves into that slot, i.e. a two-player swap.
    Unknown positions leave the map unchanged.

    Example:
        >>> assign_player({"GS": "A", "GA": "B"}, "GS", "B")
        {'GS': 'B', 'GA': 'A'}
    """
    updated = dict(occupancy)
    if position not in updated or not player_id:
        return updated

    current_occupant = updated[position]
    previous_slot = position_of(updated, player_id)
    if previous_slot is not None:
        updated[previous_slot] = current_occupant
    updated[position] = player_id
    return updated


def unassign_player(occupancy: Mapping[str, Optional[str]], player_id: str) -> OccupancyMap:
    """Send ``player_id`` to the bench; no-op when not on court."""
    updated = dict(occupancy)
    slot = position_of(updated, player_id)
    if slot is not None:
        updated[slot] = None
    return updated


@dataclass(frozen=True)
class PlayerTime:
    """
    Time credited to one player.

    ``total_seconds`` always equals the sum of ``positions``; the only way to
    add time is :meth:`credit`, which updates both in the same step.
    """
    total_seconds: int = 0
    positions: Mapping[str, int] = field(default_factory=dict)

    def credit(self, position: str, seconds: int) -> PlayerTime:
        """Return a copy with ``seconds`` added to ``position`` and the total."""
        if seconds <= 0:
            return self
        positions = dict(self.positions)
        positions[position] = positions.get(position, 0) + seconds
        return PlayerTime(total_seconds=self.total_seconds + seconds, positions=positions)

    def merge(self, other: PlayerTime) -> PlayerTime:
        """Return the bucket-wise sum of two time records."""
        result = self
        for position, seconds in other.positions.items():
            result = result.credit(position, seconds)
        return result

    def seconds_in(self, position: str) -> int:
        return self.positions.get(position, 0)

    def to_dict(self) -> Dict[str, object]:
        return {"total": self.total_seconds, "positions": dict(self.positions)}


TimeTable = Dict[str, PlayerTime]


def zero_time_table(player_ids: Iterable[str], abbreviations: Iterable[str] = ()) -> TimeTable:
    """Build an all-zero table, optionally pre-seeding every position bucket."""
    seeded = {abbr: 0 for abbr in abbreviations}
    return {pid: PlayerTime(0, dict(seeded)) for pid in player_ids}


def credit_occupants(
    table: Mapping[str, PlayerTime],
    occupancy: Mapping[str, Optional[str]],
    seconds: int,
) -> TimeTable:
    """
    Credit ``seconds`` to every occupied slot's player.

    Players missing from ``table`` are not added; the table's key set is the
    roster the caller cares about.
    """
    updated = dict(table)
    if seconds <= 0:
        return updated
    for position, player_id in occupancy.items():
        if player_id and player_id in updated:
            updated[player_id] = updated[player_id].credit(position, seconds)
    return updated
