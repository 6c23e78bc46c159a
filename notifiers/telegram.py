# notifiers/telegram.py
import logging
from telegram import Bot
from telegram.error import TelegramError
from notifiers.base import BaseNotifier

logger = logging.getLogger(__name__)


class TelegramNotifier(BaseNotifier):
    def __init__(self, token: str, chat_id: str, bot: Bot = None):
        self.chat_id = chat_id
        self.bot = bot or Bot(token=token)

    async def send(self, text: str) -> None:
        if self.bot is None:
            return
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=text)
        except TelegramError as exc:
            logger.warning("Telegram send failed: %s", exc)
