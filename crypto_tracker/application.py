"""
Application wiring for the crypto tracker.
"""

import logging
import time
from typing import Callable, Optional

from .analyzer import PriceAnalyzer
from .config.models import TrackerConfig
from .ingest import TickerIngestor
from .moving_average import MovingAverageEngine
from .notifications import AlertDispatcher, AlertSink, LoggingAlertSink, TelegramAlertSink
from .storage import ColdArchive, TimeSeriesStore

logger = logging.getLogger(__name__)


def create_sink(config: TrackerConfig) -> AlertSink:
    """Use Telegram when credentials are configured, otherwise log messages."""
    telegram = config.telegram
    if telegram.enabled:
        return TelegramAlertSink(telegram.bot_token, telegram.chat_id, timeout=telegram.timeout_seconds)

    logger.warning("Telegram is not configured, alerts will only be logged")
    return LoggingAlertSink()


class CryptoTracker:
    """Owns the store, the moving average engine, the analyzer and their timers."""

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        sink: Optional[AlertSink] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Build every component from configuration.

        Args:
            config: Tracker configuration (uses defaults if None)
            sink: Alert sink (derived from configuration if None)
            clock: Returns the current Unix time in seconds
        """
        self.config = config or TrackerConfig()

        self.archive = ColdArchive(str(self.config.get_archive_dir()))
        self.store = TimeSeriesStore(
            archive=self.archive,
            retention_seconds=self.config.hot_retention_seconds,
            rollover_check_interval_seconds=self.config.rollover_check_interval_seconds,
            clock=clock,
        )
        self.moving_average = MovingAverageEngine(
            self.store,
            window_seconds=self.config.sma_window_seconds,
            interval_seconds=self.config.sma_interval_ms / 1000,
            clock=clock,
        )
        self.dispatcher = AlertDispatcher(sink or create_sink(self.config))
        self.analyzer = PriceAnalyzer(
            self.store,
            self.moving_average,
            self.dispatcher,
            config=self.config,
            clock=clock,
        )
        self.ingestor = TickerIngestor(
            self.store,
            save_interval_ms=self.config.save_interval_ms,
            clock=clock,
        )
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the rollover, moving average, analysis and digest timers."""
        if self._running:
            return
        self.store.start()
        self.moving_average.start()
        self.analyzer.start()
        self._running = True
        logger.info(f"Crypto tracker started for {self.config.symbol}")

    def stop(self) -> None:
        if not self._running:
            return
        self.analyzer.stop()
        self.moving_average.stop()
        self.store.stop()
        self.dispatcher.shutdown(wait=True)
        self._running = False
        logger.info("Crypto tracker stopped")

    def __enter__(self) -> "CryptoTracker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
