"""Tournament aggregation and report export for the Courtside rotation tracker."""

from __future__ import annotations

import csv
import io
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from ..models import (
    GameFormat, MatchPlanRecord, MatchTimeReport, PlayerTime, PlayerTimeRow, TimeTable,
    TournamentReport
)
from ..utils import fmt_minutes
from .plan_engine import build_plan, derive_period_times
from .repository import CourtsideRepository

logger = logging.getLogger(__name__)


def calculate_match_times(
    game_format: Optional[GameFormat],
    records: Iterable[MatchPlanRecord],
    player_ids: Iterable[str],
) -> TimeTable:
    """
    Full-match planned time for each roster player.

    This is the final period of the derived period table. A missing format
    yields an all-zero table.
    """
    player_ids = list(player_ids)
    if game_format is None:
        return {pid: PlayerTime() for pid in player_ids}
    plan = build_plan(game_format.number_of_periods, game_format.abbreviations, records)
    tables = derive_period_times(
        plan, game_format.number_of_periods, game_format.period_duration_seconds, player_ids
    )
    return tables[game_format.number_of_periods]


def aggregate_match_times(tables: Iterable[Mapping[str, PlayerTime]]) -> TimeTable:
    """Sum per-player totals and per-position buckets across matches."""
    totals: TimeTable = {}
    for table in tables:
        for player_id, time_info in table.items():
            totals[player_id] = totals.get(player_id, PlayerTime()).merge(time_info)
    return totals


def _rows_for(table: Mapping[str, PlayerTime], names: Mapping[str, str]) -> List[PlayerTimeRow]:
    return [
        PlayerTimeRow(
            player_id=player_id,
            name=names.get(player_id, ""),
            total_seconds=table[player_id].total_seconds,
            position_seconds=dict(table[player_id].positions),
        )
        for player_id in names
        if player_id in table
    ]


class TournamentService:
    """Builds tournament court-time reports from stored matches and plans."""

    def __init__(self, repository: CourtsideRepository):
        self.repository = repository

    def build_report(self, tournament_id: str) -> Optional[TournamentReport]:
        """
        Load every match of a tournament and sum planned court time.

        Returns:
            The report, or None when the tournament does not exist. Matches
            that no longer exist are skipped.
        """
        tournament = self.repository.get_tournament(tournament_id)
        if tournament is None:
            return None

        names: Dict[str, str] = {}
        positions: List[str] = []
        match_tables: List[TimeTable] = []
        match_reports: List[MatchTimeReport] = []

        for match_id in tournament.match_ids:
            match = self.repository.get_match(match_id)
            if match is None:
                logger.warning("Tournament %s references missing match %s", tournament_id, match_id)
                continue

            game_format = self.repository.get_game_format(match.game_format_id)
            if game_format is None:
                logger.warning("Match %s references missing format %s", match.id, match.game_format_id)
            else:
                positions.extend(a for a in game_format.abbreviations if a not in positions)

            players = self.repository.get_players(match.team1_roster_id)
            match_names = {p.id: p.name for p in players}
            for player_id, name in match_names.items():
                names.setdefault(player_id, name)

            table = calculate_match_times(
                game_format, self.repository.get_match_plans(match.id), match_names
            )
            match_tables.append(table)
            match_reports.append(
                MatchTimeReport(
                    match_id=match.id,
                    name=match.name,
                    game_format_name=game_format.name if game_format else "",
                    rows=_rows_for(table, match_names),
                )
            )

        totals = aggregate_match_times(match_tables)
        return TournamentReport(
            tournament_id=tournament.id,
            name=tournament.name,
            positions=positions,
            rows=_rows_for(totals, names),
            matches=match_reports,
        )


class ExportServiceInterface(Protocol):
    """Interface for report export."""

    def export_to_csv(self, report: TournamentReport) -> str:
        ...


class ReportExporter:
    """Renders a tournament report's summary table as CSV."""

    def export_to_csv(self, report: TournamentReport) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Player", "Total Time", *report.positions])
        for row in report.rows:
            writer.writerow(
                [row.name, fmt_minutes(row.total_seconds)]
                + [fmt_minutes(row.position_seconds.get(abbr, 0)) for abbr in report.positions]
            )
        return buffer.getvalue()


def report_to_dict(report: TournamentReport) -> Dict[str, object]:
    """JSON-ready form of a tournament report."""

    def _row(row: PlayerTimeRow) -> Dict[str, object]:
        return {
            "player_id": row.player_id,
            "name": row.name,
            "total_seconds": row.total_seconds,
            "total_display": fmt_minutes(row.total_seconds),
            "positions": {abbr: row.position_seconds.get(abbr, 0) for abbr in report.positions},
        }

    return {
        "tournament_id": report.tournament_id,
        "name": report.name,
        "positions": list(report.positions),
        "rows": [_row(row) for row in report.rows],
        "matches": [
            {
                "match_id": match.match_id,
                "name": match.name,
                "game_format_name": match.game_format_name,
                "rows": [_row(row) for row in match.rows],
            }
            for match in report.matches
        ],
    }
