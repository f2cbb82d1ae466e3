"""
Courtside rotation tracker

Tracks how long each player spends on court, per position, during a live
match and across a planned set of periods, and totals planned court time
over a tournament so coaches can share minutes fairly.
"""
from .config import AppConfig, ConfigurationError
from .models import GameFormat, LiveGameState, Player
from .services import LiveGameEngine, SubstitutionPlanEngine, TournamentService
from .ui import create_app, run_web_app
from .utils import fmt_mmss, fmt_minutes, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "AppConfig", "ConfigurationError", "GameFormat", "LiveGameState", "Player",
    "LiveGameEngine", "SubstitutionPlanEngine", "TournamentService",
    "create_app", "run_web_app", "fmt_mmss", "fmt_minutes", "now_ts", "APP_TITLE"
]
