"""
Models package for the Courtside rotation tracker.

This package contains the core data models used throughout the application.
"""
from .game_format import GameFormat, Position
from .roster import Player, Roster
from .match import Match, MatchPlanRecord, PlayerPosition, Tournament
from .court import (
    OccupancyMap, PlayerTime, TimeTable, assign_player, unassign_player,
    empty_occupancy, position_of, on_court_player_ids, benched_player_ids,
    zero_time_table, credit_occupants
)
from .live_game import LiveGameState
from .report import MatchTimeReport, PlayerTimeRow, TournamentReport

__all__ = [
    "GameFormat", "Position", "Player", "Roster",
    "Match", "MatchPlanRecord", "PlayerPosition", "Tournament",
    "OccupancyMap", "PlayerTime", "TimeTable", "assign_player", "unassign_player",
    "empty_occupancy", "position_of", "on_court_player_ids", "benched_player_ids",
    "zero_time_table", "credit_occupants",
    "LiveGameState", "MatchTimeReport", "PlayerTimeRow", "TournamentReport"
]
