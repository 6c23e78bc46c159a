# notifiers/log.py
import logging

from notifiers.base import BaseNotifier


class LogNotifier(BaseNotifier):
    """Always-on backend: writes notifications to the bot log."""

    def __init__(self, logger: logging.Logger = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger("notifications")
        self.level = level

    async def send(self, text: str) -> None:
        self.logger.log(self.level, "🔔 %s", text)
