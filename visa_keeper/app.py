"""python-telegram-bot wiring for the visa keeper bot.

This module only translates PTB updates into calls on
:class:`~visa_keeper.handlers.ConversationEngine` and registers the daily
expiry job; all conversation logic lives in the engine.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from telegram import Update
from telegram.ext import (
    AIORateLimiter,
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from visa_keeper.config import BotConfig
from visa_keeper.database import Database
from visa_keeper.handlers import ConversationEngine
from visa_keeper.services.messaging import TelegramMessenger
from visa_keeper.services.notifier import ExpiryNotifier
from visa_keeper.services.registry import RecordStore
from visa_keeper.states import ConversationStore

LOGGER = logging.getLogger(__name__)

NOTIFIER_JOB_NAME = "visa-expiry-notifier"


class VisaKeeperBot:
    """Owns the database, the engine and the PTB application built around them."""

    def __init__(self, config: BotConfig, database: Optional[Database] = None) -> None:
        self.config = config
        self.database = database if database is not None else Database(config.database_path)
        self.store = RecordStore(self.database, today=self.today, timezone=config.timezone)
        self.conversations = ConversationStore()
        self.engine: Optional[ConversationEngine] = None
        self.notifier: Optional[ExpiryNotifier] = None

    def today(self) -> date:
        return datetime.now(self.config.timezone).date()

    def bootstrap(self) -> None:
        if self.database.bootstrap(self.config.bootstrap_admin_id):
            LOGGER.info("Seeded bootstrap administrator %s", self.config.bootstrap_admin_id)
        elif self.config.bootstrap_admin_id is None:
            LOGGER.info("BOOTSTRAP_ADMIN_ID is not set; skipping admin seeding")

    def build_application(self) -> Application:
        """Construct the PTB application."""

        builder = ApplicationBuilder().token(self.config.token).concurrent_updates(True)

        limiter = self._build_rate_limiter()
        if limiter is not None:
            builder = builder.rate_limiter(limiter)

        application = builder.build()
        messenger = TelegramMessenger(application.bot)
        self.engine = ConversationEngine(
            self.store,
            messenger,
            self.conversations,
            today=self.today,
            check_days=self.config.check_days,
        )
        self.notifier = ExpiryNotifier(
            self.store,
            messenger,
            admin_chat_id=self.config.admin_chat_id,
            days=self.config.notify_days,
        )
        self._register_handlers(application)
        self._schedule_jobs(application)
        return application

    def _build_rate_limiter(self) -> Optional[AIORateLimiter]:
        try:
            return AIORateLimiter()
        except RuntimeError as exc:  # pragma: no cover - depends on installation
            LOGGER.warning(
                "Failed to initialise the AIORateLimiter: %s. Running without a rate limiter.",
                exc,
            )
            return None

    def _register_handlers(self, application: Application) -> None:
        application.add_handler(CommandHandler("start", self._on_start))
        application.add_handler(
            MessageHandler((filters.TEXT & ~filters.COMMAND) | filters.CONTACT, self._on_message)
        )
        application.add_handler(CallbackQueryHandler(self._on_callback))
        application.add_error_handler(self._on_error)

    def _schedule_jobs(self, application: Application) -> None:
        if application.job_queue is None:
            LOGGER.warning(
                "python-telegram-bot was installed without the job-queue extra. "
                "Daily visa expiry notifications are disabled."
            )
            return
        run_at = self.config.notify_time.replace(tzinfo=self.config.timezone)
        application.job_queue.run_daily(self._on_schedule, time=run_at, name=NOTIFIER_JOB_NAME)
        LOGGER.info(
            "Visa expiry check scheduled daily at %s (%s)",
            self.config.notify_time.strftime("%H:%M"),
            self.config.timezone_name,
        )

    # ------------------------------------------------------------------
    # PTB callbacks

    async def _on_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        assert self.engine is not None
        if update.effective_chat is None:
            return
        await self.engine.start(update.effective_chat.id)

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        assert self.engine is not None
        message = update.effective_message
        if message is None or update.effective_chat is None:
            return
        contact_phone = message.contact.phone_number if message.contact else None
        await self.engine.handle_message(update.effective_chat.id, message.text, contact_phone)

    async def _on_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        assert self.engine is not None
        query = update.callback_query
        if query is None or query.message is None:
            return
        try:
            await self.engine.handle_callback(query.message.chat.id, query.data or "")
        finally:
            try:
                await query.answer()
            except Exception as exc:  # pragma: no cover - network/runtime specific
                LOGGER.debug("Unable to answer callback query: %s", exc)

    async def _on_schedule(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        assert self.notifier is not None
        await self.notifier.run()

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        LOGGER.error("Telegram update %r caused an error", update, exc_info=context.error)


__all__ = ["VisaKeeperBot", "NOTIFIER_JOB_NAME"]
