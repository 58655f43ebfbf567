"""
Exception hierarchy for the crypto tracker.

None of these are fatal to the process: every failure degrades to skipping
the current tick and trying again on the next one.
"""


class CryptoTrackerError(Exception):
    """Base class for all tracker errors."""


class DecodeError(CryptoTrackerError):
    """Raised when an upstream ticker message cannot be turned into a price point."""


class InsufficientDataError(CryptoTrackerError):
    """Raised when a cycle has no recent price point or no moving average yet."""


class ArchiveWriteError(CryptoTrackerError):
    """Raised when a cold archive segment could not be written."""


class ArchiveLoadError(CryptoTrackerError):
    """Raised when a cold archive segment is missing or unreadable."""

    def __init__(self, message: str, not_found: bool = False):
        super().__init__(message)
        self.not_found = not_found


class DispatchError(CryptoTrackerError):
    """Raised by an alert sink when a message could not be delivered."""
