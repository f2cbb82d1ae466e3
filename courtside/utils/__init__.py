"""
Utilities package for the Courtside rotation tracker.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_mmss, fmt_minutes, now_ts
from .constants import (
    APP_TITLE, DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_DURATION_MIN,
    DEFAULT_GAME_FORMATS, DEFAULT_PLAYER_POSITION, DEFAULT_POSITION_ICON,
    MIN_PERIOD_COUNT, MIN_PERIOD_DURATION_MIN, POSITION_ICONS, TICK_INTERVAL_SECONDS
)

__all__ = [
    "fmt_mmss", "fmt_minutes", "now_ts", "APP_TITLE",
    "DEFAULT_PERIOD_COUNT", "DEFAULT_PERIOD_DURATION_MIN", "DEFAULT_GAME_FORMATS",
    "DEFAULT_PLAYER_POSITION", "DEFAULT_POSITION_ICON", "MIN_PERIOD_COUNT",
    "MIN_PERIOD_DURATION_MIN", "POSITION_ICONS",
    "TICK_INTERVAL_SECONDS"
]
