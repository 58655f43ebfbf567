"""
Moving average module.

Periodically recomputes the simple moving average of recent prices from the
time-series store and caches it for the analyzer.
"""

from .moving_average import MovingAverageEngine, calculate_average

__all__ = ["MovingAverageEngine", "calculate_average"]
