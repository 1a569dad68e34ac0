"""
Logging-backed notifier.

Stands in for toast notifications wherever there is no UI (CLI, scripts).
"""

import logging

logger = logging.getLogger("hypertroq.notifications")


class LoggingNotifier:
    """Notifier that writes every message to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)
