"""
Configuration models using Pydantic for validation.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramConfig(BaseModel):
    """Credentials and transport settings for the Telegram alert sink."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid"
    )

    bot_token: Optional[str] = Field(default=None, description="Bot token obtained from BotFather")
    chat_id: Optional[str] = Field(default=None, description="Chat that receives alerts and digests")
    timeout_seconds: float = Field(default=10.0, gt=0.0, description="HTTP timeout per message")

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)


class TrackerConfig(BaseModel):
    """Configuration model for the price tracker."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid"
    )

    symbol: str = Field(default="BTCUSDT", description="Exchange symbol of the tracked instrument")
    asset_name: str = Field(default="Bitcoin", description="Human readable asset name used in alerts")
    base_asset: str = Field(default="BTC", description="Unit of the 24h volume figure")

    deviation_threshold: float = Field(
        default=0.02,
        gt=0.0,
        lt=1.0,
        description="Fractional deviation from the SMA that triggers an alert"
    )
    alert_cooldown_seconds: int = Field(
        default=300,
        ge=0,
        description="Seconds during which an identical deviation alert is suppressed"
    )
    sma_window_seconds: int = Field(
        default=300,
        ge=1,
        description="Lookback of the simple moving average"
    )
    sma_interval_ms: int = Field(default=1000, ge=1, description="SMA recalculation cadence")
    analysis_interval_ms: int = Field(default=1000, ge=1, description="Deviation/extremes check cadence")
    digest_interval_ms: int = Field(default=60000, ge=1, description="Digest cadence")
    rollover_check_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="How often the store checks for a UTC date change"
    )
    hot_retention_seconds: int = Field(
        default=86400,
        ge=1,
        description="Age after which points are evicted from the hot window at rollover"
    )
    latest_lookback_seconds: int = Field(
        default=60,
        ge=1,
        description="Lookback used to find the most recent price point"
    )
    save_interval_ms: int = Field(
        default=1000,
        ge=0,
        description="Minimum interval between two stored ticker messages"
    )
    archive_dir: Optional[str] = Field(
        default=None,
        description="Directory for daily archive segments"
    )
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)

    def get_archive_dir(self) -> Path:
        """Resolve the archive directory, defaulting to ~/.crypto_tracker/price_archives."""
        if self.archive_dir:
            return Path(self.archive_dir).expanduser()
        return Path(os.path.expanduser("~")) / ".crypto_tracker" / "price_archives"
