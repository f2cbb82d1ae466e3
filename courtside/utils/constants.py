"""
Constants for the Courtside rotation tracker.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Courtside"

# Game timing defaults
DEFAULT_PERIOD_COUNT = 4
DEFAULT_PERIOD_DURATION_MIN = 15
MIN_PERIOD_COUNT = 1
MIN_PERIOD_DURATION_MIN = 1

# Live clock wake-up interval in seconds
TICK_INTERVAL_SECONDS = 1.0

# Default position recorded for players created from a name list
DEFAULT_PLAYER_POSITION = "Unknown"

# Icon tags understood by the court board; unknown tags render as "User"
POSITION_ICONS = ["Target", "Feather", "Circle", "Shield", "User", "Users", "Footprints"]
DEFAULT_POSITION_ICON = "User"

# Formats created for a user that has none yet
DEFAULT_GAME_FORMATS = [
    {
        "id": "7-a-side-default",
        "name": "Standard 7-a-side",
        "teamSize": 7,
        "numberOfPeriods": 4,
        "periodDuration": 15,
        "positions": [
            ("Goal Shooter", "GS", "Target"),
            ("Goal Attack", "GA", "Target"),
            ("Wing Attack", "WA", "Feather"),
            ("Centre", "C", "Circle"),
            ("Wing Defence", "WD", "Feather"),
            ("Goal Defence", "GD", "Shield"),
            ("Goal Keeper", "GK", "User"),
        ],
    },
    {
        "id": "6-a-side-default",
        "name": "Fast 6-a-side",
        "teamSize": 6,
        "numberOfPeriods": 4,
        "periodDuration": 8,
        "positions": [
            ("Attack 1", "A1", "Target"),
            ("Attack 2", "A2", "Target"),
            ("Center 1", "C1", "Circle"),
            ("Center 2", "C2", "Circle"),
            ("Defence 1", "D1", "Shield"),
            ("Defence 2", "D2", "Shield"),
        ],
    },
]
