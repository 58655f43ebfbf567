"""
Ticker ingestion module.

Decodes raw exchange ticker messages into price points and stores them in
the time-series store at a throttled rate.
"""

from .ticker_ingestor import TickerIngestor, parse_ticker_message

__all__ = ["TickerIngestor", "parse_ticker_message"]
