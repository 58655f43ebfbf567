"""
Notification delivery for alerts and digests.

Sinks deliver plain-text messages; the dispatcher hands messages to a sink on
background workers so slow or failing delivery never holds up analysis.
"""

from .dispatcher import AlertDispatcher
from .sink import AlertSink, LoggingAlertSink
from .telegram import TelegramAlertSink

__all__ = ["AlertDispatcher", "AlertSink", "LoggingAlertSink", "TelegramAlertSink"]
