"""
Web application module for the Courtside rotation tracker.

This module contains the Flask application exposing JSON endpoints for
rosters, game formats, matches, the live court board, the period planner
and tournament summaries.
"""
import logging
import threading
from collections import OrderedDict
from typing import Optional, Tuple

from flask import Flask, Response, g, jsonify, request

from ..config import AppConfig, configure_logging
from ..models import GameFormat, Match
from ..services import (
    CollectingNotifier, DocumentStoreError, LiveSessionRegistry, ServiceFactory,
    SubstitutionPlanEngine, ValidationError
)
from ..services.tournament_service import report_to_dict
from ..utils import APP_TITLE

logger = logging.getLogger(__name__)

MAX_CACHED_PLANS = 256


class PlanWorkspace:
    """A cached plan engine plus the lock that serializes edits to it."""

    def __init__(self, engine: SubstitutionPlanEngine):
        self.engine = engine
        self.lock = threading.RLock()


class WebAppState:
    """
    State holder for one Flask application instance.

    Owns the service factory, the live sessions and the plan engines'
    working copies, which are loaded from storage on first use. At most
    ``max_plans`` working copies are kept; the least recently used go first.
    """

    def __init__(self, factory: ServiceFactory, tick_interval: float,
                 max_plans: int = MAX_CACHED_PLANS):
        self.factory = factory
        self.sessions = LiveSessionRegistry(tick_interval=tick_interval)
        self.max_plans = max_plans
        self._plans: "OrderedDict[Tuple[str, str], PlanWorkspace]" = OrderedDict()
        self._plans_lock = threading.Lock()

    def plan_workspace(self, user_id: str, match_id: str,
                       refresh: bool = False) -> Optional[PlanWorkspace]:
        """Return the cached workspace for a match, loading the plan when needed."""
        key = (user_id, match_id)
        with self._plans_lock:
            workspace = self._plans.get(key)
            if workspace is not None:
                self._plans.move_to_end(key)
        if workspace is not None and not refresh:
            return workspace

        engine = self._load_engine(user_id, match_id)
        if engine is None:
            return None
        if workspace is not None:
            with workspace.lock:
                workspace.engine = engine
            return workspace

        with self._plans_lock:
            workspace = self._plans.setdefault(key, PlanWorkspace(engine))
            self._plans.move_to_end(key)
            while len(self._plans) > self.max_plans:
                self._plans.popitem(last=False)
        return workspace

    def _load_engine(self, user_id: str, match_id: str) -> Optional[SubstitutionPlanEngine]:
        repository = self.factory.create_repository(user_id)
        context = load_match_context(repository, match_id)
        if context is None:
            return None
        _, game_format, players = context
        return SubstitutionPlanEngine(game_format, players, repository.get_match_plans(match_id))


def load_match_context(repository, match_id: str) -> Optional[Tuple[Match, GameFormat, list]]:
    """Load a match with its format (and positions) and roster players, or None."""
    match = repository.get_match(match_id)
    if match is None:
        return None
    game_format = repository.get_game_format(match.game_format_id)
    if game_format is None or not game_format.positions:
        return None
    players = repository.get_players(match.team1_roster_id)
    return match, game_format, players


def _format_to_dict(game_format: GameFormat) -> dict:
    data = game_format.to_record()
    data["positions"] = [pos.to_record() for pos in game_format.positions]
    return data


def _players_to_list(players) -> list:
    return [player.to_record() for player in players]


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


def _not_found(message: str):
    return jsonify({"success": False, "error": message}), 404


def create_app(
    config: Optional[AppConfig] = None,
    factory: Optional[ServiceFactory] = None,
) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        config: Application configuration; read from the environment when omitted
        factory: Service factory; built from ``config`` when omitted

    Returns:
        Configured Flask application instance
    """
    config = config or AppConfig.from_env()
    factory = factory or ServiceFactory.from_config(config)
    state = WebAppState(factory, config.tick_interval)

    app = Flask(__name__)
    app.extensions["courtside"] = state

    @app.before_request
    def resolve_user():
        g.user_id = factory.identity.current_user_id(request.headers)
        g.notifier = CollectingNotifier()

    def _user_id() -> str:
        if not g.user_id:
            raise PermissionError("No user identity supplied")
        return g.user_id

    def _repository():
        return factory.create_repository(_user_id())

    def _ok(payload: Optional[dict] = None, status: int = 200):
        body = {"success": True}
        body.update(payload or {})
        body["notifications"] = [n.to_dict() for n in g.notifier.drain()]
        return jsonify(body), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return jsonify({"success": False, "error": str(exc)}), 400

    @app.errorhandler(ValueError)
    def handle_bad_identifier(exc):
        logger.warning("Rejected request: %s", exc)
        return jsonify({"success": False, "error": "Invalid identifier."}), 400

    @app.errorhandler(PermissionError)
    def handle_permission_error(exc):
        return jsonify({"success": False, "error": str(exc)}), 401

    @app.errorhandler(DocumentStoreError)
    def handle_store_error(exc):
        logger.error("Document store failure: %s", exc)
        return jsonify({"success": False, "error": "Could not reach the database."}), 502

    @app.route("/")
    def index():
        """Describe the service."""
        return jsonify({"app": APP_TITLE, "success": True})

    # ==================== Formats ==================== #

    @app.route("/api/formats", methods=["GET"])
    def list_formats():
        """List reusable formats, creating the built-in ones for new users."""
        formats = _repository().ensure_default_formats()
        return _ok({"formats": [_format_to_dict(fmt) for fmt in formats]})

    @app.route("/api/formats", methods=["POST"])
    def create_format():
        data = _json_body()
        positions = [
            (p.get("name", ""), p.get("abbreviation", ""), p.get("icon") or "User")
            for p in data.get("positions") or []
        ]
        game_format = _repository().create_game_format(
            data.get("name", ""),
            data.get("numberOfPeriods", 0),
            data.get("periodDuration", 0),
            positions,
        )
        return _ok({"format": _format_to_dict(game_format)}, 201)

    # ==================== Rosters ==================== #

    @app.route("/api/rosters", methods=["GET"])
    def list_rosters():
        return _ok({"rosters": [r.to_record() for r in _repository().list_rosters()]})

    @app.route("/api/rosters", methods=["POST"])
    def create_roster():
        data = _json_body()
        roster = _repository().create_roster(
            data.get("name", ""), data.get("description", ""), data.get("playerNames", "")
        )
        return _ok({"roster": roster.to_record()}, 201)

    @app.route("/api/rosters/<roster_id>", methods=["GET"])
    def get_roster(roster_id):
        repository = _repository()
        roster = repository.get_roster(roster_id)
        if roster is None:
            return _not_found("Roster Not Found")
        return _ok({
            "roster": roster.to_record(),
            "players": _players_to_list(repository.get_players(roster_id)),
        })

    # ==================== Matches ==================== #

    @app.route("/api/matches", methods=["GET"])
    def list_matches():
        return _ok({"matches": [m.to_record() for m in _repository().list_matches()]})

    @app.route("/api/matches", methods=["POST"])
    def create_match():
        """Set up a match with per-match timing (a temporary format clone)."""
        data = _json_body()
        match = _repository().create_match(
            data.get("rosterId", ""),
            data.get("gameFormatId", ""),
            data.get("numberOfPeriods", 0),
            data.get("periodDuration", 0),
            name=data.get("name"),
        )
        return _ok({"match": match.to_record()}, 201)

    @app.route("/api/plans", methods=["POST"])
    def create_planned_match():
        """Create a match for planning, one empty plan record per period."""
        data = _json_body()
        match = _repository().create_planned_match(data.get("rosterId", ""), data.get("gameFormatId", ""))
        return _ok({"match": match.to_record()}, 201)

    @app.route("/api/matches/<match_id>", methods=["GET"])
    def get_match(match_id):
        context = load_match_context(_repository(), match_id)
        if context is None:
            return _not_found("Match Data Not Found")
        match, game_format, players = context
        return _ok({
            "match": match.to_record(),
            "format": _format_to_dict(game_format),
            "players": _players_to_list(players),
        })

    # ==================== Live board ==================== #

    def _live_session(match_id: str, reopen: bool = False):
        key = f"{_user_id()}:{match_id}"
        session = None if reopen else state.sessions.get(key)
        if session is not None:
            return session
        context = load_match_context(_repository(), match_id)
        if context is None:
            return None
        _, game_format, players = context
        return state.sessions.open(key, game_format, players)

    @app.route("/api/matches/<match_id>/live", methods=["GET", "POST"])
    def live_state(match_id):
        """Get the live board; POST re-initializes it from scratch."""
        session = _live_session(match_id, reopen=request.method == "POST")
        if session is None:
            return _not_found("Match Data Not Found")
        return _ok({"live": session.snapshot()})

    @app.route("/api/matches/<match_id>/live", methods=["DELETE"])
    def close_live(match_id):
        closed = state.sessions.close(f"{_user_id()}:{match_id}")
        return _ok({"closed": closed})

    @app.route("/api/matches/<match_id>/live/<action>", methods=["POST"])
    def live_action(match_id, action):
        """Apply a clock or board event: start, pause, toggle, reset, advance, assign, unassign."""
        session = _live_session(match_id)
        if session is None:
            return _not_found("Match Data Not Found")

        data = _json_body()
        if action == "start":
            session.start()
        elif action == "pause":
            session.pause()
        elif action == "toggle":
            session.toggle()
        elif action == "reset":
            session.reset()
        elif action == "advance":
            if not session.advance_period():
                return jsonify({"success": False, "error": "Already in the final period"}), 400
        elif action == "assign":
            session.assign(str(data.get("position", "")), str(data.get("playerId", "")))
        elif action == "unassign":
            session.unassign(str(data.get("playerId", "")))
        else:
            return _not_found(f"Unknown action: {action}")
        return _ok({"live": session.snapshot()})

    # ==================== Match planner ==================== #

    @app.route("/api/matches/<match_id>/plan", methods=["GET"])
    def get_plan(match_id):
        refresh = request.args.get("refresh") in ("1", "true")
        workspace = state.plan_workspace(_user_id(), match_id, refresh=refresh)
        if workspace is None:
            return _not_found("Match Data Not Found")
        with workspace.lock:
            snapshot = workspace.engine.snapshot()
        return _ok({"plan": snapshot})

    @app.route("/api/matches/<match_id>/plan/<action>", methods=["POST"])
    def plan_action(match_id, action):
        """Assign or bench a player for one period and persist that period."""
        if action not in ("assign", "unassign"):
            return _not_found(f"Unknown action: {action}")
        user_id = _user_id()
        workspace = state.plan_workspace(user_id, match_id)
        if workspace is None:
            return _not_found("Match Data Not Found")

        data = _json_body()
        try:
            period = int(data.get("period", 0))
        except (TypeError, ValueError):
            period = 0
        player_id = str(data.get("playerId", ""))
        persistence = factory.create_plan_persistence_service(user_id, g.notifier)

        # One edit at a time per match: change, write, snapshot
        with workspace.lock:
            engine = workspace.engine
            if action == "assign":
                command = engine.assign(period, str(data.get("position", "")), player_id)
            else:
                command = engine.unassign(period, player_id)

            saved = None
            if command is not None:
                saved = persistence.execute(match_id, command, engine)
            snapshot = engine.snapshot()
        return _ok({"plan": snapshot, "saved": saved})

    # ==================== Tournaments ==================== #

    @app.route("/api/tournaments", methods=["GET"])
    def list_tournaments():
        return _ok({"tournaments": [t.to_record() for t in _repository().list_tournaments()]})

    @app.route("/api/tournaments", methods=["POST"])
    def create_tournament():
        tournament = _repository().create_tournament(_json_body().get("name", ""))
        return _ok({"tournament": tournament.to_record()}, 201)

    @app.route("/api/tournaments/<tournament_id>/matches", methods=["POST"])
    def add_tournament_match(tournament_id):
        data = _json_body()
        match = _repository().create_planned_match(
            data.get("rosterId", ""),
            data.get("gameFormatId", ""),
            name=data.get("matchName"),
            tournament_id=tournament_id,
        )
        return _ok({"match": match.to_record()}, 201)

    @app.route("/api/tournaments/<tournament_id>", methods=["GET"])
    def get_tournament(tournament_id):
        report = factory.create_tournament_service(_user_id()).build_report(tournament_id)
        if report is None:
            return _not_found("Tournament Not Found")
        return _ok({"report": report_to_dict(report)})

    @app.route("/api/tournaments/<tournament_id>/export.csv", methods=["GET"])
    def export_tournament(tournament_id):
        report = factory.create_tournament_service(_user_id()).build_report(tournament_id)
        if report is None:
            return _not_found("Tournament Not Found")
        csv_text = factory.get_exporter().export_to_csv(report)
        return Response(
            csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=tournament-{tournament_id}.csv"},
        )

    return app


def run_web_app(config: Optional[AppConfig] = None) -> None:
    """
    Run the Flask web application.

    Args:
        config: Application configuration; read from the environment when omitted
    """
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    app = create_app(config)
    logger.info("Starting %s on http://%s:%d", APP_TITLE, config.host, config.port)
    try:
        app.run(host=config.host, port=config.port)
    finally:
        app.extensions["courtside"].sessions.close_all()
