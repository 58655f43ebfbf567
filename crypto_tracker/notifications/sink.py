"""
Alert sink interface and a log-only implementation.
"""

import logging
from abc import ABC, abstractmethod

from ..models import AlertCategory


logger = logging.getLogger(__name__)


class AlertSink(ABC):
    """Delivers alert and digest text to an outside channel."""

    @abstractmethod
    def send(self, category: AlertCategory, text: str) -> None:
        """
        Deliver a message.

        Args:
            category: Selects presentation at the sink's discretion
            text: Plain message content

        Raises:
            DispatchError: If the message could not be delivered
        """


class LoggingAlertSink(AlertSink):
    """Writes messages to the log, used when no messaging API is configured."""

    def send(self, category: AlertCategory, text: str) -> None:
        logger.info(f"[{category.value}] {text.strip()}")
