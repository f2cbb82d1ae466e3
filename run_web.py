#!/usr/bin/env python3
"""
Main entry point for the Courtside web application.

Settings come from ``COURTSIDE_*`` environment variables; see courtside/config.py.
"""
import sys

from courtside.config import AppConfig, ConfigurationError
from courtside.ui.web_app import run_web_app

if __name__ == "__main__":
    try:
        config = AppConfig.from_env()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)
    run_web_app(config)
