"""Background sweep that keeps an idle cache from holding expired entries."""

import threading
from typing import Any, Callable, Optional

from logzero import logger as default_logger


class PeriodicJanitor:
    """Calls ``cleanup`` every ``interval_ms`` on a daemon thread until stopped.

    Args:
        cleanup: The eviction pass to run; returns how many entries it removed.
        interval_ms: Delay between sweeps in milliseconds.
        logger: Optional logger; defaults to the logzero logger.
    """

    def __init__(self, cleanup: Callable[[], int], interval_ms: int, logger: Any = None):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.cleanup = cleanup
        self.interval_ms = interval_ms
        self.logger = logger or default_logger
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="jobnextcache-janitor")
        self._thread.start()
        self.logger.debug(f"Cache janitor started, sweeping every {self.interval_ms}ms")

    def stop(self, timeout: float = 2.0) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=timeout)
        self._thread = None
        self.logger.debug("Cache janitor stopped")

    def run_once(self) -> int:
        """Run a single sweep; a failing sweep is logged and reported as zero removals."""
        try:
            return self.cleanup()
        except Exception:
            self.logger.exception("Cache janitor sweep failed")
            return 0

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_ms / 1000):
            self.run_once()
