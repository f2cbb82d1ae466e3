"""Cancellable once-per-second wake-up for the live clock."""

import logging
import threading
from typing import Callable, Optional

from ..utils import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class ClockTicker:
    """
    Calls ``callback`` every ``interval`` seconds until cancelled.

    The callback returns True to keep ticking; returning False (for example
    when the period clock runs out) stops the ticker. After :meth:`cancel`
    no further callback fires.
    """

    def __init__(self, callback: Callable[[], bool], interval: float = TICK_INTERVAL_SECONDS):
        self._callback = callback
        self.interval = interval
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._timer is not None

    def start(self) -> None:
        with self._lock:
            if self._timer is not None:
                return
            self._schedule(self._generation)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self, generation: int) -> None:
        timer = threading.Timer(self.interval, self._fire, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
        try:
            keep_going = self._callback()
        except Exception:
            logger.exception("Clock tick failed; stopping ticker")
            keep_going = False

        with self._lock:
            if generation != self._generation:
                return
            if keep_going:
                self._schedule(generation)
            else:
                self._timer = None
