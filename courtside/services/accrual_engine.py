"""Clock-driven accrual engine for the Courtside rotation tracker.

The module is split in two layers. Pure transition functions take a
:class:`LiveGameState` and the current epoch time and return the next state;
:class:`LiveGameEngine` holds one state and feeds the transitions with
``now_ts()`` so callers never handle timestamps themselves.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List

from ..models import (
    GameFormat, LiveGameState, Player, PlayerTime,
    assign_player, unassign_player, credit_occupants, empty_occupancy,
    zero_time_table, on_court_player_ids
)
from ..utils import fmt_mmss, now_ts

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Pure transitions
# ----------------------------------------------------------------------
def initial_state(game_format: GameFormat, players: Iterable[Player]) -> LiveGameState:
    """Build a stopped, all-zero session for ``game_format`` and ``players``."""
    abbreviations = game_format.abbreviations
    return LiveGameState(
        number_of_periods=game_format.number_of_periods,
        period_duration_seconds=game_format.period_duration_seconds,
        current_period=1,
        remaining_seconds=game_format.period_duration_seconds,
        occupancy=empty_occupancy(abbreviations),
        times=zero_time_table([p.id for p in players], abbreviations),
    )


def tick(state: LiveGameState, now: float, *, settle: bool = False) -> LiveGameState:
    """Attribute wall-clock time elapsed since the last tick.

    Whole seconds are credited and the fractional remainder carries over to
    the next tick. With ``settle`` the remainder is rounded instead, which is
    what stopping the clock wants. Credit never exceeds the remaining clock;
    reaching zero stops the clock.
    """
    if not state.running or state.last_tick_ts is None:
        return state

    raw_elapsed = now - state.last_tick_ts
    elapsed = int(round(raw_elapsed)) if settle else int(raw_elapsed)
    if elapsed <= 0:
        return state

    credited = min(elapsed, state.remaining_seconds)
    remaining = state.remaining_seconds - credited
    times = credit_occupants(state.times, state.occupancy, credited)

    if remaining == 0:
        return replace(state, remaining_seconds=0, times=times, running=False, last_tick_ts=None)
    return replace(
        state,
        remaining_seconds=remaining,
        times=times,
        last_tick_ts=state.last_tick_ts + elapsed,
    )


def start(state: LiveGameState, now: float) -> LiveGameState:
    """Begin ticking; no-op when already running or the clock is at zero."""
    if state.running or state.remaining_seconds <= 0:
        return state
    return replace(state, running=True, last_tick_ts=now)


def pause(state: LiveGameState, now: float) -> LiveGameState:
    flushed = tick(state, now, settle=True)
    return replace(flushed, running=False, last_tick_ts=None)


def reset(state: LiveGameState, now: float) -> LiveGameState:
    """Stop and restore the countdown. Accrued time is kept."""
    flushed = pause(state, now)
    return replace(flushed, remaining_seconds=flushed.period_duration_seconds)


def advance_period(state: LiveGameState, now: float) -> LiveGameState:
    """Move to the next period with a full clock; no-op at the final period."""
    if state.is_final_period:
        return state
    flushed = pause(state, now)
    return replace(
        flushed,
        current_period=flushed.current_period + 1,
        remaining_seconds=flushed.period_duration_seconds,
    )


def assign(state: LiveGameState, position: str, player_id: str, now: float) -> LiveGameState:
    """Put a player in a slot, crediting pending time to the previous occupants first.

    Unknown positions or players are ignored after the flush.
    """
    flushed = tick(state, now)
    if position not in flushed.occupancy or player_id not in flushed.times:
        logger.debug("Ignoring assignment of %r to %r", player_id, position)
        return flushed
    return replace(flushed, occupancy=assign_player(flushed.occupancy, position, player_id))


def unassign(state: LiveGameState, player_id: str, now: float) -> LiveGameState:
    flushed = tick(state, now)
    return replace(flushed, occupancy=unassign_player(flushed.occupancy, player_id))


# ----------------------------------------------------------------------
# Stateful wrapper
# ----------------------------------------------------------------------
class LiveGameEngine:
    """Owns the state of one live-tracking session."""

    def __init__(self, game_format: GameFormat, players: Iterable[Player]):
        self.game_format = game_format
        self.players: List[Player] = list(players)
        self._state = initial_state(game_format, self.players)

    @property
    def state(self) -> LiveGameState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state.running

    def start(self) -> None:
        """Start or resume the clock."""
        self._state = start(self._state, now_ts())

    def pause(self) -> None:
        """Stop the clock, crediting any elapsed time."""
        self._state = pause(self._state, now_ts())

    def reset(self) -> None:
        """Stop the clock and restore the full period length."""
        self._state = reset(self._state, now_ts())

    def advance_period(self) -> bool:
        """Move to the next period. Returns False at the final period."""
        if self._state.is_final_period:
            return False
        self._state = advance_period(self._state, now_ts())
        logger.info("Advanced to period %d", self._state.current_period)
        return True

    def tick(self) -> bool:
        """Attribute elapsed time. Returns True while the clock keeps running."""
        was_running = self._state.running
        self._state = tick(self._state, now_ts())
        if was_running and not self._state.running:
            logger.info("Period %d clock expired", self._state.current_period)
        return self._state.running

    def assign(self, position: str, player_id: str) -> None:
        self._state = assign(self._state, position, player_id, now_ts())

    def unassign(self, player_id: str) -> None:
        self._state = unassign(self._state, player_id, now_ts())

    def player_time(self, player_id: str) -> PlayerTime:
        return self._state.times.get(player_id, PlayerTime())

    def snapshot(self) -> Dict[str, object]:
        """Build a JSON-ready view of the clock, the board and player cards."""
        state = self._state
        on_court = set(on_court_player_ids(state.occupancy))
        players = []
        for player in self.players:
            time_info = state.times.get(player.id, PlayerTime())
            players.append({
                "id": player.id,
                "name": player.name,
                "on_court": player.id in on_court,
                "total_seconds": time_info.total_seconds,
                "total_display": fmt_mmss(time_info.total_seconds),
                "positions": {
                    abbr: secs for abbr, secs in time_info.positions.items() if secs > 0
                },
            })
        return {
            "running": state.running,
            "remaining_seconds": state.remaining_seconds,
            "clock_display": fmt_mmss(state.remaining_seconds),
            "current_period": state.current_period,
            "number_of_periods": state.number_of_periods,
            "can_advance": not state.is_final_period,
            "occupancy": dict(state.occupancy),
            "bench": [p.id for p in self.players if p.id not in on_court],
            "players": players,
        }


