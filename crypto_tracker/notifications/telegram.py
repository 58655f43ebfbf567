"""
Telegram Bot API alert sink.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from ..exceptions import DispatchError
from ..models import AlertCategory
from .sink import AlertSink


logger = logging.getLogger(__name__)


class TelegramAlertSink(AlertSink):
    """Sends formatted HTML messages to a Telegram chat."""

    BASE_URL = "https://api.telegram.org"

    HEADERS = {
        AlertCategory.ALERT: "🚨 <b>CRYPTO ALERT</b> 🚨",
        AlertCategory.DIGEST: "🔔 <b>Minute digest</b> 🔔",
    }

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not bot_token or not chat_id:
            raise ValueError("Telegram bot_token and chat_id are required")

        self.chat_id = chat_id
        self.timeout = timeout
        self._url = f"{self.BASE_URL}/bot{bot_token}/sendMessage"
        self.session = session or requests.Session()

    def format_message(self, category: AlertCategory, content: str, now: Optional[datetime] = None) -> str:
        """Wrap content with the category header and a UTC timestamp footer."""
        now = now or datetime.now(timezone.utc)
        timestamp = now.replace(microsecond=0).strftime("%Y-%m-%d %H:%M:%SZ")
        return f"{self.HEADERS[category]}\n{content.strip()}\n<i>{timestamp}</i>\n"

    def send(self, category: AlertCategory, text: str) -> None:
        body = {
            "chat_id": self.chat_id,
            "text": self.format_message(category, text),
            "parse_mode": "HTML",
        }
        logger.debug(f"Sending Telegram message: {body}")

        try:
            resp = self.session.post(self._url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise DispatchError(f"Request failed: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code != 200 or not isinstance(payload, dict) or payload.get("ok") is not True:
            raise DispatchError(f"Telegram API error (status {resp.status_code}): {payload or resp.text}")

        logger.info("Successfully sent message to Telegram")
