"""
LiveGameState model for the Courtside rotation tracker.

This module contains the immutable state of one live-tracking session: the
countdown clock, the current period, the court occupancy and the time each
player has accrued. Transitions live in
:mod:`courtside.services.accrual_engine`.
"""
from dataclasses import dataclass, field
from typing import Optional

from .court import OccupancyMap, TimeTable


@dataclass(frozen=True)
class LiveGameState:
    """
    Represents the complete state of a live-tracking session.

    Attributes:
        number_of_periods: Periods in the match
        period_duration_seconds: Length of each period
        current_period: Active period number (1-based)
        remaining_seconds: Countdown clock value, never negative
        running: Whether the clock is advancing
        last_tick_ts: Epoch seconds up to which time has been attributed
        occupancy: Position abbreviation -> player id (or None)
        times: Player id -> accrued time
    """
    number_of_periods: int
    period_duration_seconds: int
    current_period: int = 1
    remaining_seconds: int = 0
    running: bool = False
    last_tick_ts: Optional[float] = None
    occupancy: OccupancyMap = field(default_factory=dict)
    times: TimeTable = field(default_factory=dict)

    @property
    def is_final_period(self) -> bool:
        return self.current_period >= self.number_of_periods
