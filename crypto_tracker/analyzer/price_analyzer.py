"""
Price analyzer raising deviation, extremes and digest notifications.
"""

import logging
import threading
import time
from typing import Callable, Optional, Tuple

from ..config.models import TrackerConfig
from ..exceptions import InsufficientDataError
from ..models import AlertCategory, AlertRecord, AnalyzerState, PricePoint
from ..moving_average import MovingAverageEngine
from ..notifications import AlertDispatcher
from ..scheduler import PeriodicTask
from ..storage import TimeSeriesStore
from . import messages


logger = logging.getLogger(__name__)


def calculate_deviation(price: float, sma: float) -> float:
    """Signed fractional distance of the price from the moving average."""
    return (price - sma) / sma


class PriceAnalyzer:
    """
    Correlates the newest price with the moving average and past alerts.

    Two timers drive it: a fast cycle for deviation and 24h extremes alerts,
    and a slow cycle for digests. Only deviation alerts are deduplicated;
    extremes alerts fire on every cycle their condition holds.
    """

    def __init__(
        self,
        store: TimeSeriesStore,
        moving_average: MovingAverageEngine,
        dispatcher: AlertDispatcher,
        config: Optional[TrackerConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the analyzer.

        Args:
            store: Source of the latest price point
            moving_average: Source of the current SMA
            dispatcher: Receives alerts and digests
            config: Tracker configuration (uses defaults if None)
            clock: Returns the current Unix time in seconds
        """
        self.store = store
        self.moving_average = moving_average
        self.dispatcher = dispatcher
        self.config = config or TrackerConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._state = AnalyzerState()

        self._analysis_task = PeriodicTask(
            "PriceAnalyzer", self.config.analysis_interval_ms / 1000, self.analyze
        )
        self._digest_task = PeriodicTask(
            "PriceDigest", self.config.digest_interval_ms / 1000, self.send_digest
        )

    @property
    def state(self) -> AnalyzerState:
        with self._lock:
            return self._state

    def start(self) -> None:
        self._analysis_task.start()
        self._digest_task.start()

    def stop(self) -> None:
        self._analysis_task.stop()
        self._digest_task.stop()

    def analyze(self) -> AnalyzerState:
        """Run one deviation/extremes cycle and keep the resulting state."""
        new_state = self.handle_analysis(self.state, int(self._clock()))
        with self._lock:
            self._state = new_state
        return new_state

    def handle_analysis(self, state: AnalyzerState, now: int) -> AnalyzerState:
        """
        Check the newest price against the SMA and the 24h extremes.

        Args:
            state: Current dedup state
            now: Current Unix time in seconds

        Returns:
            The updated dedup state
        """
        try:
            point, sma = self._latest_inputs()
        except InsufficientDataError as e:
            logger.warning(f"Skipping price analysis: {e}")
            return state

        state = self._check_deviation(state, point, sma, now)
        self._check_24h_extremes(point)
        return state

    def send_digest(self) -> Optional[str]:
        """
        Dispatch a digest of current market conditions.

        Returns:
            The digest text, or None if there was not enough data
        """
        try:
            point, sma = self._latest_inputs()
        except InsufficientDataError as e:
            logger.warning(f"Skipping price digest: {e}")
            return None

        content = messages.digest_message(
            point, sma, self.config.base_asset, self.config.sma_window_seconds
        )
        self.dispatcher.dispatch(AlertCategory.DIGEST, content)
        return content

    def is_recent_alert(self, state: AnalyzerState, message: str, now: int) -> bool:
        """True if the same message was the last alert and is still cooling down."""
        last = state.last_alert
        if last is None:
            return False
        return last.message == message and now - last.timestamp < self.config.alert_cooldown_seconds

    def _latest_inputs(self) -> Tuple[PricePoint, float]:
        latest = self.store.latest(self.config.latest_lookback_seconds)
        if latest is None:
            raise InsufficientDataError("No recent price data available")

        sma = self.moving_average.get_current()
        if sma is None:
            raise InsufficientDataError("Moving average not available yet")

        return latest[1], sma

    def _check_deviation(self, state: AnalyzerState, point: PricePoint, sma: float, now: int) -> AnalyzerState:
        if sma == 0:
            logger.warning("Skipping deviation check: moving average is zero")
            return state

        deviation = calculate_deviation(point.price, sma)
        if abs(deviation) < self.config.deviation_threshold:
            return state

        alert = messages.deviation_message(self.config.asset_name, point.price, sma, deviation)
        if self.is_recent_alert(state, alert, now):
            logger.debug(f"Suppressing repeated alert: {alert}")
            return state

        self._broadcast_alert(alert)
        return AnalyzerState(last_alert=AlertRecord(message=alert, timestamp=now))

    def _check_24h_extremes(self, point: PricePoint) -> None:
        if point.price >= point.high_24h:
            self._broadcast_alert(messages.new_high_message(self.config.asset_name, point.price))
        elif point.price <= point.low_24h:
            self._broadcast_alert(messages.new_low_message(self.config.asset_name, point.price))

    def _broadcast_alert(self, alert: str) -> None:
        logger.warning(alert)
        self.dispatcher.dispatch(AlertCategory.ALERT, alert)
