"""
Dual-tier time-series store: an in-memory hot window plus a daily cold archive.
"""

import bisect
import logging
import threading
import time
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from ..exceptions import ArchiveWriteError
from ..models import PricePoint, RolloverState
from ..scheduler import PeriodicTask
from .archive import ArchiveSegment, ColdArchive


logger = logging.getLogger(__name__)

Entry = Tuple[int, PricePoint]


def utc_date(timestamp: float) -> date:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()


class TimeSeriesStore:
    """
    Holds recent price points ordered by timestamp and archives them daily.

    One producer inserts while the moving average engine, the analyzer and
    the rollover timer read concurrently. A single lock guards the sorted key
    list and the key to point mapping so readers never see a partial entry.
    """

    def __init__(
        self,
        archive: Optional[ColdArchive] = None,
        retention_seconds: int = 86400,
        rollover_check_interval_seconds: float = 3600,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the store.

        Args:
            archive: Cold archive for daily snapshots (creates default if None)
            retention_seconds: Age after which points are evicted at rollover
            rollover_check_interval_seconds: Cadence of the date change check
            clock: Returns the current Unix time in seconds
        """
        self.archive = archive or ColdArchive()
        self.retention_seconds = retention_seconds
        self._clock = clock

        self._lock = threading.RLock()
        self._timestamps: List[int] = []
        self._points: Dict[int, PricePoint] = {}
        self._rollover_state = RolloverState(last_archived_date=utc_date(clock()))

        self._rollover_task = PeriodicTask(
            "TimeSeriesStoreRollover",
            rollover_check_interval_seconds,
            self.rollover_check,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._timestamps)

    @property
    def rollover_state(self) -> RolloverState:
        return self._rollover_state

    def start(self) -> None:
        """Start the periodic rollover check."""
        self._rollover_task.start()

    def stop(self) -> None:
        self._rollover_task.stop()

    def insert(self, timestamp: int, point: PricePoint) -> None:
        """
        Insert a price point, replacing any point stored at the same timestamp.

        Args:
            timestamp: Unix timestamp in seconds
            point: Price point to store
        """
        with self._lock:
            if timestamp not in self._points:
                bisect.insort(self._timestamps, timestamp)
            self._points[timestamp] = point

    def query_window(self, duration: float) -> List[Entry]:
        """
        Return every point with timestamp > now - duration.

        Args:
            duration: Lookback in seconds

        Returns:
            List of (timestamp, point) tuples in ascending timestamp order
        """
        cutoff = self._clock() - duration
        with self._lock:
            start = bisect.bisect_right(self._timestamps, cutoff)
            return [(ts, self._points[ts]) for ts in self._timestamps[start:]]

    def latest(self, lookback: float = 60) -> Optional[Entry]:
        """Return the newest point within the lookback, or None."""
        window = self.query_window(lookback)
        if not window:
            return None
        return window[-1]

    def snapshot(self) -> List[Entry]:
        """Return the whole hot window in ascending timestamp order."""
        with self._lock:
            return [(ts, self._points[ts]) for ts in self._timestamps]

    def evict_older_than(self, cutoff: float) -> int:
        """
        Delete every point with timestamp < cutoff.

        Returns:
            Number of evicted points
        """
        with self._lock:
            end = bisect.bisect_left(self._timestamps, cutoff)
            for ts in self._timestamps[:end]:
                del self._points[ts]
            del self._timestamps[:end]
        return end

    def rollover_check(self) -> bool:
        """
        Archive and trim the hot window when the UTC date has changed.

        Returns:
            True if a rollover happened
        """
        new_state = self.handle_rollover(self._rollover_state, self._clock())
        rolled = new_state != self._rollover_state
        self._rollover_state = new_state
        return rolled

    def handle_rollover(self, state: RolloverState, now: float) -> RolloverState:
        """
        Roll the store over to the date of `now` if it differs from the state.

        The snapshot is written for the previously recorded date. On a write
        failure the hot window and the state are left as they were so the
        next check attempts the same rollover again.
        """
        today = utc_date(now)
        if today == state.last_archived_date:
            return state

        archived_date = state.last_archived_date
        try:
            self.archive.write_segment(
                archived_date,
                self.snapshot(),
                archived_at=datetime.fromtimestamp(now, tz=timezone.utc),
            )
        except ArchiveWriteError as e:
            logger.error(f"Failed to archive prices for {archived_date.isoformat()}: {e}")
            return state

        evicted = self.evict_older_than(now - self.retention_seconds)
        logger.info(
            f"Rolled over from {archived_date.isoformat()} to {today.isoformat()}, "
            f"evicted {evicted} points older than {self.retention_seconds}s"
        )
        return RolloverState(last_archived_date=today)

    def load_historical(self, day: date) -> ArchiveSegment:
        """
        Load the archived snapshot for a date. Does not touch the hot window.

        Raises:
            ArchiveLoadError: If the segment is missing or corrupt
        """
        return self.archive.load_segment(day)

    def archived_dates(self) -> List[date]:
        return self.archive.list_dates()
