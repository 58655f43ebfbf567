"""
Binance 24h ticker decoding and throttled insertion.
"""

import json
import logging
import time
from typing import Any, Callable, Iterable, Optional, Union

from ..exceptions import DecodeError
from ..models import PricePoint
from ..storage import TimeSeriesStore


logger = logging.getLogger(__name__)

# Binance @ticker payload keys
TICKER_FIELDS = {
    "price": "c",
    "high_24h": "h",
    "low_24h": "l",
    "volume_24h": "v",
}


def _parse_float(data: dict, key: str) -> float:
    if key not in data:
        raise DecodeError(f"Missing field '{key}' in ticker message")
    value: Any = data[key]
    if isinstance(value, bool):
        raise DecodeError(f"Field '{key}' is not numeric: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Field '{key}' is not numeric: {value!r}") from e


def parse_ticker_message(raw: Union[str, bytes], timestamp: int) -> PricePoint:
    """
    Decode a Binance 24h ticker message.

    Args:
        raw: JSON text of the message
        timestamp: Unix timestamp in seconds to assign to the point

    Returns:
        The decoded price point

    Raises:
        DecodeError: If the message is not a JSON object with numeric fields
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Failed to parse ticker message: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(f"Ticker message is not an object: {type(data).__name__}")

    fields = {name: _parse_float(data, key) for name, key in TICKER_FIELDS.items()}
    return PricePoint(timestamp=timestamp, **fields)


class TickerIngestor:
    """Feeds decoded ticker messages into the store, at most one per interval."""

    def __init__(
        self,
        store: TimeSeriesStore,
        save_interval_ms: int = 1000,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.save_interval_ms = save_interval_ms
        self._clock = clock
        self._last_save_ms: Optional[float] = None
        self.stored = 0
        self.dropped = 0

    def handle_message(self, raw: Union[str, bytes]) -> bool:
        """
        Decode one message and store it unless throttled.

        Returns:
            True if a point was inserted
        """
        now = self._clock()
        try:
            point = parse_ticker_message(raw, int(now))
        except DecodeError as e:
            self.dropped += 1
            logger.error(f"Failed to parse: {e}")
            return False

        now_ms = now * 1000
        if self._last_save_ms is not None and now_ms - self._last_save_ms < self.save_interval_ms:
            return False

        self.store.insert(point.timestamp, point)
        self._last_save_ms = now_ms
        self.stored += 1
        logger.debug(f"Saved price data: {point}")
        return True

    def consume(self, messages: Iterable[Union[str, bytes]]) -> int:
        """
        Handle every non-blank message from an iterable, e.g. lines of a stream.

        Returns:
            Number of points inserted
        """
        inserted = 0
        for raw in messages:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8", errors="replace")
            if not raw.strip():
                continue
            if self.handle_message(raw):
                inserted += 1
        return inserted
