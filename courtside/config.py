"""
Configuration for the Courtside rotation tracker.

Settings are read from environment variables once at startup and validated.
"""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from .utils import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "json", "http")


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


@dataclass
class AppConfig:
    """Application configuration loaded from the environment."""

    store_backend: str = "json"
    data_dir: str = "data"
    store_url: Optional[str] = None
    store_token: Optional[str] = None
    default_user_id: Optional[str] = "local"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 7122
    tick_interval: float = TICK_INTERVAL_SECONDS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build configuration from ``COURTSIDE_*`` environment variables.

        Raises:
            ConfigurationError: If a value is malformed or the chosen store
                backend is missing its settings.
        """
        env = os.environ if environ is None else environ
        try:
            port = int(env.get("COURTSIDE_PORT", "7122"))
            tick_interval = float(env.get("COURTSIDE_TICK_INTERVAL", str(TICK_INTERVAL_SECONDS)))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        config = cls(
            store_backend=env.get("COURTSIDE_STORE", "json").lower(),
            data_dir=env.get("COURTSIDE_DATA_DIR", "data"),
            store_url=env.get("COURTSIDE_STORE_URL") or None,
            store_token=env.get("COURTSIDE_STORE_TOKEN") or None,
            default_user_id=env.get("COURTSIDE_DEFAULT_USER", "local") or None,
            log_level=env.get("COURTSIDE_LOG_LEVEL", "INFO").upper(),
            host=env.get("COURTSIDE_HOST", "127.0.0.1"),
            port=port,
            tick_interval=tick_interval,
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"COURTSIDE_STORE must be one of {', '.join(STORE_BACKENDS)}, got {self.store_backend!r}"
            )
        if self.store_backend == "http" and not self.store_url:
            raise ConfigurationError("COURTSIDE_STORE_URL is required for the http store")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"COURTSIDE_PORT out of range: {self.port}")
        if self.tick_interval <= 0:
            raise ConfigurationError("COURTSIDE_TICK_INTERVAL must be positive")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout with timestamps."""
    logging.basicConfig(
        stream=sys.stdout,
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
