"""
Simple moving average engine backed by the time-series store.
"""

import logging
import threading
import time
from typing import Callable, Optional, Sequence, Tuple

from ..models import MovingAverageState, PricePoint
from ..scheduler import PeriodicTask
from ..storage import TimeSeriesStore


logger = logging.getLogger(__name__)

SIGNIFICANT_CHANGE_PCT = 1.0


def calculate_average(entries: Sequence[Tuple[int, PricePoint]]) -> Optional[float]:
    """
    Unweighted mean of the price field.

    Args:
        entries: (timestamp, point) pairs, spacing is ignored

    Returns:
        The mean price, or None for an empty window
    """
    if not entries:
        return None
    return sum(point.price for _, point in entries) / len(entries)


class MovingAverageEngine:
    """Keeps the latest simple moving average over a fixed lookback."""

    def __init__(
        self,
        store: TimeSeriesStore,
        window_seconds: int = 300,
        interval_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the engine.

        Args:
            store: Source of price points
            window_seconds: SMA lookback in seconds
            interval_seconds: Recalculation cadence
            clock: Returns the current Unix time in seconds
        """
        self.store = store
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._state = MovingAverageState()
        self._task = PeriodicTask("MovingAverageEngine", interval_seconds, self.recalculate)

    @property
    def state(self) -> MovingAverageState:
        with self._lock:
            return self._state

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.stop()

    def get_current(self) -> Optional[float]:
        """
        Get the cached moving average.

        Returns:
            The last computed average, or None if none has been computed yet
        """
        with self._lock:
            return self._state.current_average

    def recalculate(self) -> MovingAverageState:
        """Recompute the average from the store and cache it."""
        window = self.store.query_window(self.window_seconds)
        new_state = self.handle_window(self.state, window, int(self._clock()))
        with self._lock:
            self._state = new_state
        return new_state

    def handle_window(
        self,
        state: MovingAverageState,
        window: Sequence[Tuple[int, PricePoint]],
        now: int,
    ) -> MovingAverageState:
        """
        Compute the next state from a window of prices.

        An empty window keeps the previous average.
        """
        average = calculate_average(window)
        if average is None:
            logger.warning("No price data available for SMA calculation")
            return state

        self._log_significant_change(state.current_average, average)
        return MovingAverageState(current_average=average, last_computed_at=now)

    def _log_significant_change(self, old: Optional[float], new: float) -> None:
        if not old:
            return

        percent_change = abs((new - old) / old * 100)
        if percent_change > SIGNIFICANT_CHANGE_PCT:
            logger.info(
                f"Significant SMA change detected: {percent_change:.2f}% "
                f"({old:.2f} -> {new:.2f})"
            )
