"""
Periodic work on background threads.

Each task waits its interval after the previous run has finished, so the
effective cadence is interval plus work time rather than a fixed rate.
"""

import logging
import threading
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs a callback repeatedly on a daemon thread until stopped."""

    def __init__(self, name: str, interval_seconds: float, callback: Callable[[], object]):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.name = name
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Started periodic task {self.name} every {self.interval_seconds}s")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

    def run_once(self) -> None:
        """Run the callback a single time, logging instead of raising on failure."""
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Periodic task {self.name} failed: {e}", exc_info=True)

    def _run(self) -> None:
        while not self._stop.wait(timeout=self.interval_seconds):
            self.run_once()
