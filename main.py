"""Entrypoint for the visa keeper Telegram bot."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import sys

from telegram.error import InvalidToken as TelegramInvalidToken
from telegram.error import NetworkError as TelegramNetworkError
from telegram.error import TimedOut as TelegramTimedOut

from visa_keeper.app import VisaKeeperBot
from visa_keeper.config import BotConfig

LOGGER = logging.getLogger(__name__)


def main() -> None:  # pragma: no cover - thin wrapper
    if sys.platform.startswith("win"):
        # python-telegram-bot relies on selector event loops which are not the
        # default on Windows.
        try:
            asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
        except AttributeError:
            pass

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("telegram.ext").setLevel(logging.WARNING)

    try:
        config = BotConfig.load()
    except RuntimeError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(1) from exc

    try:
        bot = VisaKeeperBot(config)
        bot.bootstrap()
    except (sqlite3.Error, OSError) as exc:
        LOGGER.exception("Failed to initialise the database at %s", config.database_path)
        raise SystemExit(1) from exc

    application = bot.build_application()
    LOGGER.info("Bot started")
    try:
        application.run_polling()
    except TelegramInvalidToken as exc:
        LOGGER.error("Telegram rejected the configured token. Check BOT_TOKEN.")
        raise SystemExit(1) from exc
    except TelegramTimedOut as exc:
        LOGGER.error("Timed out while connecting to Telegram: %s", exc)
        raise SystemExit(1) from exc
    except TelegramNetworkError as exc:
        LOGGER.error("Network failure while talking to Telegram: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - module executable guard
    main()
