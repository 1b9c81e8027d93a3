"""GameClock - background thread driving Pool.tick_all."""

import logging
import threading
import time
from typing import Optional

from teamquiz.engine.pool import Pool

logger = logging.getLogger(__name__)


class GameClock:
    """Calls ``pool.tick_all(dt)`` every ``interval`` seconds.

    ``dt`` is the measured monotonic time since the previous tick, so a
    late wake-up is caught up on the next tick rather than lost.
    """

    def __init__(self, pool: Pool, interval: float = 1.0):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.pool = pool
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="teamquiz-clock", daemon=True)
        self._thread.start()
        logger.info("Clock started (interval %.2fs)", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Clock stopped")

    def _run(self) -> None:
        last = time.monotonic()
        while not self._stop.wait(self.interval):
            now = time.monotonic()
            self.pool.tick_all(now - last)
            last = now
