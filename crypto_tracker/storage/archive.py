"""
Cold archive of daily price snapshots.
"""

import json
import logging
import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ArchiveLoadError, ArchiveWriteError
from ..models import PricePoint


logger = logging.getLogger(__name__)


class ArchivedEntry(BaseModel):
    """A hot window entry, kept under the key it was stored at."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    point: PricePoint


class ArchiveSegment(BaseModel):
    """Snapshot of the hot window taken when the store rolled over to a new day."""

    model_config = ConfigDict(frozen=True)

    date: date
    archived_at: datetime
    records: List[ArchivedEntry] = Field(default_factory=list)

    @classmethod
    def from_entries(
        cls,
        day: date,
        entries: Iterable[Tuple[int, PricePoint]],
        archived_at: Optional[datetime] = None,
    ) -> "ArchiveSegment":
        return cls(
            date=day,
            archived_at=archived_at or datetime.now(timezone.utc),
            records=[ArchivedEntry(timestamp=ts, point=point) for ts, point in entries],
        )

    @property
    def points(self) -> List[PricePoint]:
        return [point for _, point in self.entries()]

    def entries(self) -> List[Tuple[int, PricePoint]]:
        """Return (timestamp, point) pairs in ascending timestamp order."""
        return sorted(((r.timestamp, r.point) for r in self.records), key=lambda entry: entry[0])

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the segment to a DataFrame indexed by UTC time.

        The index comes from the entry keys, not from the point timestamps.

        Returns:
            DataFrame with price, high_24h, low_24h and volume_24h columns
        """
        columns = ["price", "high_24h", "low_24h", "volume_24h"]
        if not self.records:
            return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], tz="UTC", name="time"))

        df = pd.DataFrame([{"key": ts, **point.model_dump()} for ts, point in self.entries()])
        df["time"] = pd.to_datetime(df["key"], unit="s", utc=True)
        return df.set_index("time")[columns]


class ColdArchive:
    """Reads and writes one immutable JSON segment per UTC date."""

    FILE_PREFIX = "prices_"
    FILE_SUFFIX = ".json"

    def __init__(self, archive_dir: Optional[str] = None):
        """
        Initialize the archive.

        Args:
            archive_dir: Directory for segment files. If None, uses default location.
        """
        if archive_dir is None:
            archive_dir = os.path.join(os.path.expanduser("~"), ".crypto_tracker", "price_archives")

        self._archive_dir = Path(archive_dir)
        logger.debug(f"Price archive directory: {self._archive_dir}")

    @property
    def archive_dir(self) -> Path:
        return self._archive_dir

    def get_segment_path(self, day: date) -> Path:
        """Get the segment file path for a date."""
        return self._archive_dir / f"{self.FILE_PREFIX}{day.isoformat()}{self.FILE_SUFFIX}"

    def write_segment(
        self,
        day: date,
        entries: Iterable[Tuple[int, PricePoint]],
        archived_at: Optional[datetime] = None,
    ) -> Path:
        """
        Persist a snapshot for a date.

        An existing segment is left untouched, segments are written once.

        Args:
            day: UTC date the snapshot belongs to
            entries: (timestamp, point) pairs of the hot window
            archived_at: Time of the snapshot (defaults to now)

        Returns:
            Path of the segment file

        Raises:
            ArchiveWriteError: If the segment could not be written
        """
        segment_file = self.get_segment_path(day)
        if segment_file.exists():
            logger.warning(f"Archive segment for {day.isoformat()} already exists, keeping {segment_file}")
            return segment_file

        segment = ArchiveSegment.from_entries(day, entries, archived_at)

        temp_file = segment_file.with_suffix('.tmp')
        try:
            self._archive_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(segment.model_dump(mode='json'), f, indent=2)

            # Atomically publish the segment
            temp_file.replace(segment_file)
        except (OSError, TypeError, ValueError) as e:
            try:
                temp_file.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning(f"Failed to remove temporary file {temp_file}: {cleanup_error}")
            raise ArchiveWriteError(f"Failed to write archive segment {segment_file}: {e}") from e

        logger.info(f"Archived {len(segment.records)} price points for {day.isoformat()} to {segment_file}")
        return segment_file

    def load_segment(self, day: date) -> ArchiveSegment:
        """
        Load the segment for a date.

        Raises:
            ArchiveLoadError: If the segment does not exist or cannot be parsed
        """
        segment_file = self.get_segment_path(day)
        if not segment_file.exists():
            raise ArchiveLoadError(f"No archive segment for {day.isoformat()}: {segment_file}", not_found=True)

        try:
            with open(segment_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return ArchiveSegment.model_validate(data)
        except json.JSONDecodeError as e:
            raise ArchiveLoadError(f"Invalid JSON in archive segment {segment_file}: {e}") from e
        except (OSError, ValidationError) as e:
            raise ArchiveLoadError(f"Failed to load archive segment {segment_file}: {e}") from e

    def list_dates(self) -> List[date]:
        """List the dates that have a segment, oldest first."""
        if not self._archive_dir.is_dir():
            return []

        dates = []
        for segment_file in self._archive_dir.glob(f"{self.FILE_PREFIX}*{self.FILE_SUFFIX}"):
            date_str = segment_file.name[len(self.FILE_PREFIX):-len(self.FILE_SUFFIX)]
            try:
                dates.append(date.fromisoformat(date_str))
            except ValueError:
                continue  # not a segment file
        return sorted(dates)
