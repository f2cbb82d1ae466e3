"""Live-tracking session: one accrual engine driven by a clock ticker."""

import logging
import threading
from typing import Dict, Iterable, Optional

from ..models import GameFormat, Player
from ..utils import TICK_INTERVAL_SECONDS
from .accrual_engine import LiveGameEngine
from .ticker import ClockTicker

logger = logging.getLogger(__name__)


class LiveSession:
    """
    Couples a :class:`LiveGameEngine` with its ticker.

    All engine access goes through one lock so ticks and board events are
    applied one at a time. Closing the session cancels the ticker.
    """

    def __init__(
        self,
        match_id: str,
        game_format: GameFormat,
        players: Iterable[Player],
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ):
        self.match_id = match_id
        self.engine = LiveGameEngine(game_format, players)
        self._lock = threading.RLock()
        self.ticker = ClockTicker(self._on_tick, interval=tick_interval)

    def _on_tick(self) -> bool:
        with self._lock:
            return self.engine.tick()

    def start(self) -> None:
        with self._lock:
            self.engine.start()
            if self.engine.running:
                self.ticker.start()

    def pause(self) -> None:
        with self._lock:
            self.ticker.cancel()
            self.engine.pause()

    def toggle(self) -> None:
        """Start when stopped, pause when running."""
        with self._lock:
            if self.engine.running:
                self.pause()
            else:
                self.start()

    def reset(self) -> None:
        with self._lock:
            self.ticker.cancel()
            self.engine.reset()

    def advance_period(self) -> bool:
        with self._lock:
            self.ticker.cancel()
            return self.engine.advance_period()

    def assign(self, position: str, player_id: str) -> None:
        with self._lock:
            self.engine.assign(position, player_id)

    def unassign(self, player_id: str) -> None:
        with self._lock:
            self.engine.unassign(player_id)

    def snapshot(self) -> Dict[str, object]:
        """Bring the clock up to date and describe the session."""
        with self._lock:
            self.engine.tick()
            if not self.engine.running:
                self.ticker.cancel()
            data = self.engine.snapshot()
        data["match_id"] = self.match_id
        return data

    def close(self) -> None:
        with self._lock:
            self.ticker.cancel()
            self.engine.pause()
        logger.info("Closed live session for match %s", self.match_id)


class LiveSessionRegistry:
    """Keeps at most one live session per match."""

    def __init__(self, tick_interval: float = TICK_INTERVAL_SECONDS):
        self.tick_interval = tick_interval
        self._sessions: Dict[str, LiveSession] = {}
        self._lock = threading.Lock()

    def get(self, match_id: str) -> Optional[LiveSession]:
        with self._lock:
            return self._sessions.get(match_id)

    def open(self, match_id: str, game_format: GameFormat, players: Iterable[Player]) -> LiveSession:
        """Create a fresh session, closing any previous one for the match."""
        session = LiveSession(match_id, game_format, players, tick_interval=self.tick_interval)
        with self._lock:
            previous = self._sessions.pop(match_id, None)
            self._sessions[match_id] = session
        if previous is not None:
            previous.close()
        return session

    def close(self, match_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(match_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()
