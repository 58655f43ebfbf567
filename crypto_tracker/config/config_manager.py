"""
Configuration manager for loading and validating YAML configuration files.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import TrackerConfig


logger = logging.getLogger(__name__)


class ConfigurationManager:
    """Manages loading and validation of YAML configuration files."""

    DEFAULT_CONFIG_FILENAME = "config.yaml"
    TELEGRAM_ENV_VARS = {
        "bot_token": "TELEGRAM_BOT_TOKEN",
        "chat_id": "TELEGRAM_CHAT_ID",
    }

    def load_config(self, config_path: Optional[str] = None) -> TrackerConfig:
        """
        Load and validate configuration from YAML file.

        Missing or invalid files fall back to the defaults. Telegram
        credentials not present in the file are read from the environment.

        Args:
            config_path: Path to configuration file. If None, uses default.

        Returns:
            Validated TrackerConfig instance.
        """
        if config_path is None:
            config_path = self.get_default_config_path()

        try:
            config_dict = self._load_yaml_file(config_path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default configuration")
            config_dict = {}

        return self.validate_config(self._apply_env_overrides(config_dict))

    def validate_config(self, config: Dict[str, Any]) -> TrackerConfig:
        """
        Validate configuration dictionary using Pydantic.

        Args:
            config: Configuration dictionary to validate.

        Returns:
            Validated TrackerConfig instance.
        """
        try:
            return TrackerConfig(**config)
        except ValidationError as e:
            logger.warning(f"Configuration validation failed: {e}")
            logger.info("Using default configuration")
            return TrackerConfig()

    def get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        return self.DEFAULT_CONFIG_FILENAME

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        telegram = config.get("telegram")
        if not isinstance(telegram, dict):
            telegram = {}
        telegram = dict(telegram)

        for field, env_var in self.TELEGRAM_ENV_VARS.items():
            value = os.environ.get(env_var)
            if value and not telegram.get(field):
                telegram[field] = value

        merged = dict(config)
        if telegram:
            merged["telegram"] = telegram
        return merged

    def _load_yaml_file(self, file_path: str) -> Dict[str, Any]:
        """Load YAML file and return as dictionary."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r', encoding='utf-8') as file:
            data = yaml.safe_load(file) or {}

        if not isinstance(data, dict):
            raise yaml.YAMLError(f"Top level of {file_path} must be a mapping")
        return data
