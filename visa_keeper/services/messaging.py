from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

from telegram import Bot, InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove

from visa_keeper.utils.formatting import split_message

LOGGER = logging.getLogger(__name__)

ReplyMarkup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove]


class Messenger(Protocol):
    async def send(
        self, chat_id: int, text: str, reply_markup: Optional[ReplyMarkup] = None
    ) -> None:
        ...


class TelegramMessenger:
    """Deliver texts through the PTB bot, splitting them at Telegram's size limit.

    The keyboard is attached to the last chunk only.
    """

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def send(
        self, chat_id: int, text: str, reply_markup: Optional[ReplyMarkup] = None
    ) -> None:
        chunks = split_message(text)
        for index, chunk in enumerate(chunks):
            markup = reply_markup if index == len(chunks) - 1 else None
            await self.bot.send_message(chat_id=chat_id, text=chunk, reply_markup=markup)


__all__ = ["Messenger", "ReplyMarkup", "TelegramMessenger"]
