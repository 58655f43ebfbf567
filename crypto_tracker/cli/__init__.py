"""
Command-line interface module for the crypto tracker.

This module provides the CLI for running the tracker against a ticker feed
and for inspecting archived daily price snapshots.
"""

from .cli import main

__all__ = ["main"]
