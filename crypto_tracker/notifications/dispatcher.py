"""
Fire-and-forget dispatch of messages onto an alert sink.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from ..models import AlertCategory
from .sink import AlertSink


logger = logging.getLogger(__name__)


class AlertDispatcher:
    """
    Submits each message to a worker pool and returns immediately.

    Failures are logged and never retried; callers never see the outcome.
    """

    def __init__(self, sink: AlertSink, max_workers: int = 4):
        self.sink = sink
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="AlertDispatch")

    def dispatch(self, category: AlertCategory, text: str) -> Future:
        """
        Hand a message to the sink on a background worker.

        Returns:
            Future of the delivery, resolved once the sink returns or fails
        """
        return self._executor.submit(self._deliver, category, text)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _deliver(self, category: AlertCategory, text: str) -> bool:
        try:
            self.sink.send(category, text)
            return True
        except Exception as e:
            logger.error(f"Failed to send {category.value}: {e}")
            return False
