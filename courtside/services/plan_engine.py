"""Substitution plan engine for the Courtside rotation tracker.

A plan assigns players to positions for every period ahead of time. Court
time is derived from the assignment table alone: each period credits its
full duration to whoever holds each position, and the per-period tables are
running (prefix) sums.

Mutations return a :class:`PersistPeriodPlan` command instead of writing to
storage themselves; :class:`PlanPersistenceService` executes the command.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import (
    GameFormat, MatchPlanRecord, OccupancyMap, Player, PlayerPosition, PlayerTime, TimeTable,
    assign_player, unassign_player, empty_occupancy, benched_player_ids, on_court_player_ids
)
from ..utils import fmt_minutes
from .document_store import DocumentStoreError
from .notifications import Notifier, error, success
from .repository import CourtsideRepository

logger = logging.getLogger(__name__)

PeriodPlan = Dict[int, OccupancyMap]


def build_plan(
    number_of_periods: int,
    abbreviations: Sequence[str],
    records: Iterable[MatchPlanRecord] = (),
) -> PeriodPlan:
    """
    Build one occupancy map per period, overlaying persisted assignments.

    Records for periods outside ``1..number_of_periods`` and pairs naming a
    position the format does not have are skipped. A player listed twice in
    one record keeps only the last position.
    """
    plan: PeriodPlan = {
        period: empty_occupancy(abbreviations) for period in range(1, number_of_periods + 1)
    }
    for record in records:
        if record.quarter not in plan:
            continue
        for pair in record.player_positions:
            if pair.position in plan[record.quarter]:
                plan[record.quarter] = assign_player(plan[record.quarter], pair.position, pair.player_id)
    return plan


def serialize_period(occupancy: OccupancyMap) -> Tuple[PlayerPosition, ...]:
    """Non-empty assignments of one period as (position, player) pairs."""
    return tuple(
        PlayerPosition(position=position, player_id=player_id)
        for position, player_id in occupancy.items()
        if player_id
    )


def derive_period_times(
    plan: PeriodPlan,
    number_of_periods: int,
    period_duration_seconds: int,
    player_ids: Optional[Iterable[str]] = None,
) -> Dict[int, TimeTable]:
    """
    Cumulative court time per player at the end of every period.

    Period ``i``'s table is period ``i-1``'s table plus the full period
    duration for each assigned position in period ``i``. Every call walks
    all periods from 1. When ``player_ids`` is given only those players are
    tracked (each gets a row, even if never assigned); otherwise any player
    appearing in the plan is.
    """
    known = list(player_ids) if player_ids is not None else None
    running: TimeTable = {pid: PlayerTime() for pid in known} if known is not None else {}
    tables: Dict[int, TimeTable] = {}

    for period in range(1, number_of_periods + 1):
        running = dict(running)
        for position, player_id in plan.get(period, {}).items():
            if not player_id:
                continue
            if player_id not in running:
                if known is not None:
                    continue
                running[player_id] = PlayerTime()
            running[player_id] = running[player_id].credit(position, period_duration_seconds)
        tables[period] = running
    return tables


@dataclass(frozen=True)
class PersistPeriodPlan:
    """Instruction to write one period's assignments to its plan record."""
    period: int
    plan_id: Optional[str]
    player_positions: Tuple[PlayerPosition, ...]

    @property
    def description(self) -> str:
        return f"Persist period {self.period} plan"


class SubstitutionPlanEngine:
    """Working copy of a match's period plan."""

    def __init__(
        self,
        game_format: GameFormat,
        players: Iterable[Player],
        records: Iterable[MatchPlanRecord] = (),
    ):
        self.game_format = game_format
        self.players: List[Player] = list(players)
        records = list(records)
        self._plan_ids: Dict[int, str] = {}
        for record in records:
            if 1 <= record.quarter <= game_format.number_of_periods:
                self._plan_ids.setdefault(record.quarter, record.id)
        self._plan = build_plan(game_format.number_of_periods, game_format.abbreviations, records)

    @property
    def number_of_periods(self) -> int:
        return self.game_format.number_of_periods

    @property
    def plan(self) -> PeriodPlan:
        return copy.deepcopy(self._plan)

    def plan_id_for(self, period: int) -> Optional[str]:
        return self._plan_ids.get(period)

    def _player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def _command_for(self, period: int) -> PersistPeriodPlan:
        return PersistPeriodPlan(
            period=period,
            plan_id=self.plan_id_for(period),
            player_positions=serialize_period(self._plan[period]),
        )

    def assign(self, period: int, position: str, player_id: str) -> Optional[PersistPeriodPlan]:
        """
        Place a player in one period's slot with swap semantics.

        Returns:
            The command persisting that period, or None when the period,
            position or player is unknown (nothing changes then).
        """
        occupancy = self._plan.get(period)
        if occupancy is None or position not in occupancy or player_id not in self._player_ids():
            logger.debug("Ignoring plan assignment %r -> %r in period %r", player_id, position, period)
            return None
        self._plan[period] = assign_player(occupancy, position, player_id)
        return self._command_for(period)

    def unassign(self, period: int, player_id: str) -> Optional[PersistPeriodPlan]:
        """Bench a player for one period. Returns None for an unknown period or player."""
        occupancy = self._plan.get(period)
        if occupancy is None or player_id not in self._player_ids():
            return None
        self._plan[period] = unassign_player(occupancy, player_id)
        return self._command_for(period)

    def reload_period(self, record: MatchPlanRecord) -> None:
        """Replace one period with the stored record's assignments."""
        if record.quarter not in self._plan:
            return
        reloaded = build_plan(self.number_of_periods, self.game_format.abbreviations, [record])
        self._plan[record.quarter] = reloaded[record.quarter]
        self._plan_ids[record.quarter] = record.id

    def period_times(self) -> Dict[int, TimeTable]:
        return derive_period_times(
            self._plan,
            self.number_of_periods,
            self.game_format.period_duration_seconds,
            self._player_ids(),
        )

    def final_totals(self) -> TimeTable:
        """Full-match planned time per player."""
        return self.period_times()[self.number_of_periods]

    def snapshot(self) -> Dict[str, object]:
        """Describe every period: board, bench and cumulative player cards."""
        tables = self.period_times()
        names = {p.id: p.name for p in self.players}
        periods = []
        for period in range(1, self.number_of_periods + 1):
            occupancy = self._plan[period]
            cards = {}
            for player_id, time_info in tables[period].items():
                cards[player_id] = {
                    "name": names.get(player_id, ""),
                    "total_seconds": time_info.total_seconds,
                    "total_display": fmt_minutes(time_info.total_seconds),
                    "positions": {
                        abbr: secs for abbr, secs in time_info.positions.items() if secs > 0
                    },
                }
            periods.append({
                "period": period,
                "plan_id": self._plan_ids.get(period),
                "occupancy": dict(occupancy),
                "on_court_count": len(on_court_player_ids(occupancy)),
                "bench": benched_player_ids(occupancy, self._player_ids()),
                "players": cards,
            })
        return {
            "number_of_periods": self.number_of_periods,
            "period_duration_seconds": self.game_format.period_duration_seconds,
            "positions": self.game_format.abbreviations,
            "periods": periods,
        }


class PlanPersistenceService:
    """
    Executes :class:`PersistPeriodPlan` commands against the repository.

    The engine's copy is updated before the write. When a write fails the
    user is told, and the stored record for that period is re-read so the
    working copy matches storage again; if that read fails too the local
    copy is kept.
    """

    def __init__(self, repository: CourtsideRepository, notifier: Notifier):
        self.repository = repository
        self.notifier = notifier

    def execute(
        self,
        match_id: str,
        command: PersistPeriodPlan,
        engine: Optional[SubstitutionPlanEngine] = None,
    ) -> bool:
        """Write the period record. Returns True on success."""
        if command.plan_id is None:
            logger.error("Match plan for period %d not found in match %s", command.period, match_id)
            self.notifier.notify(error("Error", f"Could not find plan for period {command.period}."))
            return False

        try:
            self.repository.update_match_plan_positions(
                match_id, command.plan_id, command.player_positions
            )
        except DocumentStoreError as exc:
            logger.warning("Saving period %d plan for match %s failed: %s",
                           command.period, match_id, exc)
            self.notifier.notify(
                error("Uh oh! Something went wrong.", f"Could not save period {command.period} plan.")
            )
            if engine is not None:
                self._reconcile(match_id, command, engine)
            return False

        self.notifier.notify(success(f"Period {command.period} plan updated."))
        return True

    def _reconcile(
        self, match_id: str, command: PersistPeriodPlan, engine: SubstitutionPlanEngine
    ) -> None:
        try:
            record = self.repository.get_match_plan(match_id, command.plan_id)
        except DocumentStoreError as exc:
            logger.warning("Could not re-read period %d plan; keeping local copy: %s",
                           command.period, exc)
            return
        if record is not None:
            engine.reload_period(record)
            logger.info("Reloaded period %d plan for match %s from storage", command.period, match_id)
