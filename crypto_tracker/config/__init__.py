"""
Configuration management module for the crypto tracker.

This module handles loading, validating, and managing YAML configuration files
using Pydantic for robust validation and type safety.
"""

from .config_manager import ConfigurationManager
from .models import TelegramConfig, TrackerConfig

__all__ = ["ConfigurationManager", "TelegramConfig", "TrackerConfig"]
