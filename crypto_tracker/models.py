"""
Shared data models for the crypto tracker.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PricePoint(BaseModel):
    """A single normalized quote for the tracked instrument."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(description="Unix timestamp in seconds")
    price: float
    high_24h: float
    low_24h: float
    volume_24h: float


class AlertCategory(Enum):
    """Presentation category handed to an alert sink."""

    ALERT = "alert"
    DIGEST = "digest"


class RolloverState(BaseModel):
    """Date of the last day the store has archived (or started on)."""

    model_config = ConfigDict(frozen=True)

    last_archived_date: date


class MovingAverageState(BaseModel):
    """Cached moving average; stays populated once it has been computed."""

    model_config = ConfigDict(frozen=True)

    current_average: Optional[float] = None
    last_computed_at: Optional[int] = None


class AlertRecord(BaseModel):
    """The last deviation alert that was dispatched."""

    model_config = ConfigDict(frozen=True)

    message: str
    timestamp: int


class AnalyzerState(BaseModel):
    """Deduplication state for deviation alerts."""

    model_config = ConfigDict(frozen=True)

    last_alert: Optional[AlertRecord] = None
