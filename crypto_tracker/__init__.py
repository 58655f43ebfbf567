"""
Crypto Tracker - moving average alerts for a live price feed.

This package keeps a rolling 24 hour window of price quotes for one
instrument, archives a snapshot of it every UTC day, maintains a short
simple moving average, and raises alerts and periodic digests when the
price strays from the average or reaches new 24h extremes.
"""

__version__ = "0.1.0"
__author__ = "Crypto Tracker Team"

# Lazy imports to avoid dependency issues during package setup
__all__ = [
    "ConfigurationManager",
    "TrackerConfig",
    "PricePoint",
    "TimeSeriesStore",
    "ColdArchive",
    "MovingAverageEngine",
    "PriceAnalyzer",
    "AlertDispatcher",
    "TickerIngestor",
    "CryptoTracker",
]

def __getattr__(name):
    """Lazy import for package components."""
    if name == "ConfigurationManager":
        from .config import ConfigurationManager
        return ConfigurationManager
    elif name == "TrackerConfig":
        from .config import TrackerConfig
        return TrackerConfig
    elif name == "PricePoint":
        from .models import PricePoint
        return PricePoint
    elif name == "TimeSeriesStore":
        from .storage import TimeSeriesStore
        return TimeSeriesStore
    elif name == "ColdArchive":
        from .storage import ColdArchive
        return ColdArchive
    elif name == "MovingAverageEngine":
        from .moving_average import MovingAverageEngine
        return MovingAverageEngine
    elif name == "PriceAnalyzer":
        from .analyzer import PriceAnalyzer
        return PriceAnalyzer
    elif name == "AlertDispatcher":
        from .notifications import AlertDispatcher
        return AlertDispatcher
    elif name == "TickerIngestor":
        from .ingest import TickerIngestor
        return TickerIngestor
    elif name == "CryptoTracker":
        from .application import CryptoTracker
        return CryptoTracker
    else:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
