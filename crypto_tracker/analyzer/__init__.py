"""
Price analysis module.

Compares the newest price with the moving average and the 24h extremes to
raise alerts, and sends a periodic digest of market conditions.
"""

from .messages import format_price
from .price_analyzer import PriceAnalyzer, calculate_deviation

__all__ = ["PriceAnalyzer", "calculate_deviation", "format_price"]
