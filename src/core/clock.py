"""
Time related abstractions.

Puzzle expiry depends on "now" and on a timer. Both are injected so tests can move time by hand.
"""

import logging
import threading
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> float:
        """Seconds since the epoch."""
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback once, roughly `delay` seconds from now. Fire-and-forget."""
        ...


class SystemClock:
    def now(self) -> float:
        return time.time()


class ThreadingScheduler:
    """Schedules callbacks on daemon `threading.Timer`s so they never keep the process alive."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay, self._run, args=(callback,))
        timer.daemon = True
        timer.start()

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback failed")
