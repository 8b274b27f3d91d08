from __future__ import annotations

import logging
from typing import Iterable, Optional

from visa_keeper import messages
from visa_keeper.database import UserRecord
from visa_keeper.errors import PersistenceError
from visa_keeper.services.messaging import Messenger
from visa_keeper.services.registry import RecordStore
from visa_keeper.utils.formatting import format_user_record

LOGGER = logging.getLogger(__name__)


def format_expiry_alert(users: Iterable[UserRecord]) -> str:
    return "\n".join(
        messages.EXPIRY_ALERT_HEADER
        + format_user_record(user, expiry_label="expires")
        for user in users
    ).rstrip("\n")


class ExpiryNotifier:
    """Daily job that warns administrators about visas expiring soon."""

    def __init__(
        self,
        store: RecordStore,
        messenger: Messenger,
        *,
        admin_chat_id: Optional[int] = None,
        days: int = 3,
    ) -> None:
        self.store = store
        self.messenger = messenger
        self.admin_chat_id = admin_chat_id
        self.days = days

    async def _recipients(self) -> list[int]:
        if self.admin_chat_id is not None:
            return [self.admin_chat_id]
        return [admin.telegram_id for admin in await self.store.list_admins()]

    async def run(self) -> int:
        """Send the alert and return the number of chats it reached."""
        try:
            expiring = await self.store.list_expiring(self.days)
            if not expiring:
                LOGGER.info("No visas expire within %s days", self.days)
                return 0
            recipients = await self._recipients()
        except PersistenceError:
            LOGGER.exception("Error checking visa expiration")
            return 0

        text = format_expiry_alert(expiring)
        delivered = 0
        for chat_id in recipients:
            try:
                await self.messenger.send(chat_id, text)
                delivered += 1
            except Exception as exc:  # pragma: no cover - network/runtime specific
                LOGGER.warning("Failed to notify admin %s: %s", chat_id, exc)
        LOGGER.info(
            "Sent expiry alert for %s visa(s) to %s chat(s)", len(expiring), delivered
        )
        return delivered


__all__ = ["ExpiryNotifier", "format_expiry_alert"]
