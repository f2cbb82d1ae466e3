"""
Repository for the Courtside rotation tracker.

Maps the domain models onto user-scoped document paths::

    users/{uid}/gameFormats/{formatId}[/positions/{positionId}]
    users/{uid}/rosters/{rosterId}[/players/{playerId}]
    users/{uid}/matches/{matchId}[/matchPlans/{planId}]
    users/{uid}/tournaments/{tournamentId}

Reads of missing documents return None or an empty list so views can report
"not found" instead of crashing. Writes are independent; no transactions.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import (
    GameFormat, Match, MatchPlanRecord, Player, PlayerPosition, Position, Roster, Tournament
)
from ..utils import (
    DEFAULT_GAME_FORMATS, DEFAULT_PLAYER_POSITION, DEFAULT_POSITION_ICON, MIN_PERIOD_COUNT,
    MIN_PERIOD_DURATION_MIN, POSITION_ICONS
)
from .document_store import DocumentStore, document_path

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when user input for a roster, format, match or tournament is invalid."""
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_name(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def _validate_timing(number_of_periods: int, period_duration: int) -> Tuple[int, int]:
    try:
        periods = int(number_of_periods)
        duration = int(period_duration)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Periods and period duration must be whole numbers.") from exc
    if periods < MIN_PERIOD_COUNT:
        raise ValidationError("There must be at least one period.")
    if duration < MIN_PERIOD_DURATION_MIN:
        raise ValidationError("Duration must be at least one minute.")
    return periods, duration


class CourtsideRepository:
    """Reads and writes one user's rosters, formats, matches and tournaments."""

    def __init__(self, store: DocumentStore, user_id: str):
        if not user_id:
            raise ValueError("A user id is required")
        # Raises ValueError for ids that are not a single path component
        document_path("users", user_id)
        self.store = store
        self.user_id = user_id

    def _path(self, *segments: str) -> str:
        return document_path("users", self.user_id, *segments)

    # ------------------------------------------------------------------
    # Game formats
    # ------------------------------------------------------------------
    def get_positions(self, format_id: str) -> List[Position]:
        records = self.store.list_collection(self._path("gameFormats", format_id, "positions"))
        records = sorted(records, key=lambda record: record.get("order", 0))
        return [Position.from_record(record) for record in records if record.get("abbreviation")]

    def get_game_format(self, format_id: str) -> Optional[GameFormat]:
        """Load a format with its positions, or None when it does not exist."""
        if not format_id:
            return None
        record = self.store.get_document(self._path("gameFormats", format_id))
        if record is None:
            return None
        return GameFormat.from_record(record, self.get_positions(format_id))

    def list_game_formats(self, include_temporary: bool = False) -> List[GameFormat]:
        formats = []
        for record in self.store.list_collection(self._path("gameFormats")):
            if record.get("isTemporary") and not include_temporary:
                continue
            formats.append(GameFormat.from_record(record, self.get_positions(str(record["id"]))))
        return formats

    def save_game_format(self, game_format: GameFormat) -> None:
        """Write the format document and one document per position."""
        self.store.set_document(self._path("gameFormats", game_format.id), game_format.to_record())
        for order, position in enumerate(game_format.positions):
            record = position.to_record(game_format.id)
            record["order"] = order
            self.store.set_document(
                self._path("gameFormats", game_format.id, "positions", position.id), record
            )

    def create_game_format(
        self,
        name: str,
        number_of_periods: int,
        period_duration: int,
        positions: Sequence[Tuple[str, str, str]],
    ) -> GameFormat:
        """
        Create a reusable format from ``(name, abbreviation, icon)`` tuples.

        Raises:
            ValidationError: On an empty name, invalid timing, no positions or
                duplicate abbreviations.
        """
        name = _require_name(name, "Format name is required.")
        periods, duration = _validate_timing(number_of_periods, period_duration)
        if not positions:
            raise ValidationError("A format needs at least one position.")
        abbreviations = [abbr.strip() for _, abbr, _ in positions]
        if any(not abbr for abbr in abbreviations):
            raise ValidationError("Every position needs an abbreviation.")
        if len(set(abbreviations)) != len(abbreviations):
            raise ValidationError("Position abbreviations must be unique within a format.")

        game_format = GameFormat(
            id=_new_id(),
            name=name,
            team_size=len(positions),
            number_of_periods=periods,
            period_duration=duration,
            positions=[
                Position(
                    id=_new_id(),
                    name=pos_name.strip(),
                    abbreviation=abbr,
                    icon=icon if icon in POSITION_ICONS else DEFAULT_POSITION_ICON,
                )
                for (pos_name, _, icon), abbr in zip(positions, abbreviations)
            ],
        )
        self.save_game_format(game_format)
        return game_format

    def ensure_default_formats(self) -> List[GameFormat]:
        """Create the built-in formats when the user has none; return the user's formats."""
        existing = self.list_game_formats(include_temporary=True)
        if existing:
            return [fmt for fmt in existing if not fmt.is_temporary]

        created = []
        for template in DEFAULT_GAME_FORMATS:
            game_format = GameFormat(
                id=template["id"],
                name=template["name"],
                team_size=template["teamSize"],
                number_of_periods=template["numberOfPeriods"],
                period_duration=template["periodDuration"],
                positions=[
                    Position(id=_new_id(), name=pos_name, abbreviation=abbr, icon=icon)
                    for pos_name, abbr, icon in template["positions"]
                ],
            )
            self.save_game_format(game_format)
            created.append(game_format)
        logger.info("Created %d default game formats for user %s", len(created), self.user_id)
        return created

    # ------------------------------------------------------------------
    # Rosters
    # ------------------------------------------------------------------
    def get_roster(self, roster_id: str) -> Optional[Roster]:
        if not roster_id:
            return None
        record = self.store.get_document(self._path("rosters", roster_id))
        return Roster.from_record(record) if record is not None else None

    def list_rosters(self) -> List[Roster]:
        return [Roster.from_record(r) for r in self.store.list_collection(self._path("rosters"))]

    def get_players(self, roster_id: str) -> List[Player]:
        if not roster_id:
            return []
        records = self.store.list_collection(self._path("rosters", roster_id, "players"))
        players = [Player.from_record(record) for record in records]

        # Keep the order the roster was entered in when it is known
        roster = self.get_roster(roster_id)
        if roster and roster.player_ids:
            order = {pid: idx for idx, pid in enumerate(roster.player_ids)}
            players.sort(key=lambda p: order.get(p.id, len(order)))
        return players

    def create_roster(
        self, name: str, description: str = "", player_names: Iterable[str] = ()
    ) -> Roster:
        """
        Create a roster and one player per non-blank name.

        ``player_names`` may also be a single newline-separated string, the
        way the roster form submits it.
        """
        name = _require_name(name, "Roster name is required.")
        if isinstance(player_names, str):
            player_names = player_names.split("\n")
        names = [n.strip() for n in player_names if n and n.strip()]

        roster = Roster(id=_new_id(), name=name, description=description or "")
        for player_name in names:
            player = Player(
                id=_new_id(), name=player_name, position=DEFAULT_PLAYER_POSITION, roster_id=roster.id
            )
            self.store.set_document(
                self._path("rosters", roster.id, "players", player.id), player.to_record()
            )
            roster.player_ids.append(player.id)

        self.store.set_document(self._path("rosters", roster.id), roster.to_record())
        return roster

    # ------------------------------------------------------------------
    # Matches and plans
    # ------------------------------------------------------------------
    def get_match(self, match_id: str) -> Optional[Match]:
        if not match_id:
            return None
        record = self.store.get_document(self._path("matches", match_id))
        return Match.from_record(record) if record is not None else None

    def list_matches(self) -> List[Match]:
        return [Match.from_record(r) for r in self.store.list_collection(self._path("matches"))]

    def get_match_plans(self, match_id: str) -> List[MatchPlanRecord]:
        records = self.store.list_collection(self._path("matches", match_id, "matchPlans"))
        plans = [MatchPlanRecord.from_record(record) for record in records]
        return sorted(plans, key=lambda plan: plan.quarter)

    def get_match_plan(self, match_id: str, plan_id: str) -> Optional[MatchPlanRecord]:
        record = self.store.get_document(self._path("matches", match_id, "matchPlans", plan_id))
        return MatchPlanRecord.from_record(record) if record is not None else None

    def update_match_plan_positions(
        self, match_id: str, plan_id: str, player_positions: Sequence[PlayerPosition]
    ) -> None:
        """Replace the planned pairs of one period record."""
        self.store.set_document(
            self._path("matches", match_id, "matchPlans", plan_id),
            {"playerPositions": [pp.to_record() for pp in player_positions]},
            merge=True,
        )

    def _create_plan_records(self, match_id: str, number_of_periods: int) -> List[MatchPlanRecord]:
        plans = []
        for quarter in range(1, number_of_periods + 1):
            plan = MatchPlanRecord(id=_new_id(), quarter=quarter, match_id=match_id)
            self.store.set_document(
                self._path("matches", match_id, "matchPlans", plan.id), plan.to_record()
            )
            plans.append(plan)
        return plans

    def create_match(
        self,
        roster_id: str,
        format_id: str,
        number_of_periods: int,
        period_duration: int,
        name: Optional[str] = None,
    ) -> Match:
        """
        Set up a match with per-match timing.

        The chosen format is cloned as a temporary format carrying the
        overridden period count and duration, so the original stays intact.

        Raises:
            ValidationError: If the roster or format is unknown or timing is invalid.
        """
        periods, duration = _validate_timing(number_of_periods, period_duration)
        if self.get_roster(roster_id) is None:
            raise ValidationError("Cannot create a match without a roster.")
        original = self.get_game_format(format_id)
        if original is None:
            raise ValidationError("Selected game format not found.")

        temporary = original.clone_temporary(periods, duration)
        self.save_game_format(temporary)

        match = Match(
            id=_new_id(),
            game_format_id=temporary.id,
            team1_roster_id=roster_id,
            name=name,
            start_time=_now_iso(),
        )
        self.store.set_document(self._path("matches", match.id), match.to_record())
        self._create_plan_records(match.id, periods)
        return match

    def create_planned_match(
        self,
        roster_id: str,
        format_id: str,
        name: Optional[str] = None,
        tournament_id: Optional[str] = None,
    ) -> Match:
        """
        Create a match for planning with one empty plan record per period.

        When ``tournament_id`` is given the match is also added to that tournament.
        """
        roster = self.get_roster(roster_id)
        if roster is None:
            raise ValidationError("Cannot create a match plan without a roster.")
        game_format = self.get_game_format(format_id)
        if game_format is None:
            raise ValidationError("Selected game format not found.")

        tournament = None
        if tournament_id is not None:
            name = _require_name(name, "Please give this match a name.")
            tournament = self.get_tournament(tournament_id)
            if tournament is None:
                raise ValidationError("Tournament not found.")

        match = Match(
            id=_new_id(),
            game_format_id=game_format.id,
            team1_roster_id=roster.id,
            name=name or f"Plan for {roster.name}",
            start_time=_now_iso(),
            tournament_id=tournament_id,
        )
        self.store.set_document(self._path("matches", match.id), match.to_record())
        self._create_plan_records(match.id, game_format.number_of_periods)

        if tournament is not None:
            self.add_match_to_tournament(tournament, match.id)
        return match

    # ------------------------------------------------------------------
    # Tournaments
    # ------------------------------------------------------------------
    def get_tournament(self, tournament_id: str) -> Optional[Tournament]:
        if not tournament_id:
            return None
        record = self.store.get_document(self._path("tournaments", tournament_id))
        return Tournament.from_record(record) if record is not None else None

    def list_tournaments(self) -> List[Tournament]:
        return [
            Tournament.from_record(r) for r in self.store.list_collection(self._path("tournaments"))
        ]

    def create_tournament(self, name: str) -> Tournament:
        name = _require_name(name, "Tournament name is required.")
        tournament = Tournament(id=_new_id(), name=name)
        self.store.set_document(self._path("tournaments", tournament.id), tournament.to_record())
        return tournament

    def add_match_to_tournament(self, tournament: Tournament, match_id: str) -> None:
        if match_id in tournament.match_ids:
            return
        tournament.match_ids.append(match_id)
        self.store.set_document(
            self._path("tournaments", tournament.id),
            {"matchIds": list(tournament.match_ids)},
            merge=True,
        )
