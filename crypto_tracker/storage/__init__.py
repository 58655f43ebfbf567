"""
Time-series storage for price points.

The store keeps a retention-bounded hot window in memory and writes one
immutable JSON snapshot per UTC day to the cold archive.
"""

from .archive import ArchivedEntry, ArchiveSegment, ColdArchive
from .timeseries_store import TimeSeriesStore

__all__ = ["ArchivedEntry", "ArchiveSegment", "ColdArchive", "TimeSeriesStore"]
