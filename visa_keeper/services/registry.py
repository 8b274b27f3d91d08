from __future__ import annotations

import asyncio
import logging
import sqlite3
from dataclasses import asdict, dataclass, replace
from datetime import date, datetime, tzinfo
from typing import Any, Callable, Optional, TypeVar

import pytz

from visa_keeper.database import AdminRecord, Database, UserRecord
from visa_keeper.errors import PersistenceError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class UserFields:
    phone_number: str
    first_name: str
    last_name: str
    passport_number: str
    visa_expiry_date: date


class RecordStore:
    """Asynchronous facade over :class:`Database` used by the conversation engine.

    The blocking sqlite calls run in a worker thread so handlers only suspend
    while waiting for the store.  Any ``sqlite3.Error`` surfaces as
    :class:`PersistenceError`.  SQLite stamps rows in UTC; records leave the
    store with ``created_at``/``added_at`` converted to ``timezone``.
    """

    def __init__(
        self,
        database: Database,
        *,
        today: Callable[[], date] = date.today,
        timezone: tzinfo = pytz.utc,
    ) -> None:
        self.database = database
        self._today = today
        self._timezone = timezone

    async def _run(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.to_thread(operation, *args, **kwargs)
        except sqlite3.Error as exc:
            LOGGER.warning("Record store operation %s failed: %s", operation.__name__, exc)
            raise PersistenceError(str(exc), details=operation.__name__) from exc

    def _local(self, stamp: datetime) -> datetime:
        if stamp.tzinfo is None:
            stamp = pytz.utc.localize(stamp)
        return stamp.astimezone(self._timezone)

    def _user(self, user: Optional[UserRecord]) -> Optional[UserRecord]:
        if user is None:
            return None
        return replace(user, created_at=self._local(user.created_at))

    def _admin(self, admin: Optional[AdminRecord]) -> Optional[AdminRecord]:
        if admin is None:
            return None
        return replace(admin, added_at=self._local(admin.added_at))

    # Users ---------------------------------------------------------------
    async def upsert_user(self, identity: int, fields: UserFields) -> UserRecord:
        return self._user(await self._run(self.database.upsert_user, identity, **asdict(fields)))

    async def get_user(self, identity: int) -> Optional[UserRecord]:
        return self._user(await self._run(self.database.get_user, identity))

    async def list_users(self) -> list[UserRecord]:
        return [self._user(user) for user in await self._run(self.database.list_users)]

    async def list_expiring(self, days: int) -> list[UserRecord]:
        users = await self._run(self.database.list_expiring, self._today(), days)
        return [self._user(user) for user in users]

    async def list_by_date_range(self, start: date, end: date) -> list[UserRecord]:
        users = await self._run(self.database.list_by_date_range, start, end)
        return [self._user(user) for user in users]

    # Admins --------------------------------------------------------------
    async def add_admin(
        self, identity: int, username: Optional[str], added_by: int
    ) -> AdminRecord:
        return self._admin(await self._run(self.database.add_admin, identity, username, added_by))

    async def remove_admin(self, identity: int) -> Optional[AdminRecord]:
        return self._admin(await self._run(self.database.remove_admin, identity))

    async def is_admin(self, identity: int) -> bool:
        return await self._run(self.database.is_admin, identity)

    async def list_admins(self) -> list[AdminRecord]:
        return [self._admin(admin) for admin in await self._run(self.database.list_admins)]


__all__ = ["RecordStore", "UserFields"]
