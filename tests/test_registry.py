import asyncio
import sqlite3
from datetime import date, timedelta

import pytest
import pytz

from visa_keeper.errors import PersistenceError
from visa_keeper.services.registry import RecordStore, UserFields
from visa_keeper.utils.formatting import format_own_data

from conftest import TODAY


def fields(**overrides) -> UserFields:
    values = dict(
        phone_number="+998942052525",
        first_name="Jane",
        last_name="Doe",
        passport_number="AB12345",
        visa_expiry_date=date(2024, 6, 3),
    )
    values.update(overrides)
    return UserFields(**values)


def test_round_trip_through_async_store(store):
    async def scenario():
        stored = await store.upsert_user(7, fields())
        fetched = await store.get_user(7)
        return stored, fetched

    stored, fetched = asyncio.run(scenario())

    assert fetched == stored
    assert fetched.first_name == "Jane"


def test_expiring_uses_injected_today(store):
    async def scenario():
        await store.upsert_user(1, fields(visa_expiry_date=TODAY))
        await store.upsert_user(2, fields(visa_expiry_date=date(2024, 6, 8)))
        await store.upsert_user(3, fields(visa_expiry_date=date(2024, 6, 9)))
        return await store.list_expiring(7)

    users = asyncio.run(scenario())

    assert [user.telegram_id for user in users] == [1, 2]


def test_admin_operations(store):
    async def scenario():
        await store.add_admin(3, "ops", 1)
        before = await store.is_admin(3)
        removed = await store.remove_admin(3)
        after = await store.is_admin(3)
        missing = await store.remove_admin(3)
        return before, removed, after, missing

    before, removed, after, missing = asyncio.run(scenario())

    assert before is True
    assert removed.telegram_id == 3
    assert after is False
    assert missing is None


def test_concurrent_upserts_on_one_identity_do_not_mix_fields(store):
    async def scenario():
        await asyncio.gather(
            *(
                store.upsert_user(
                    9,
                    fields(first_name=name, last_name=name, passport_number=f"{name}12345"),
                )
                for name in ("Alpha", "Bravo", "Charlie", "Delta")
            )
        )
        return await store.get_user(9)

    user = asyncio.run(scenario())

    assert user.first_name == user.last_name
    assert user.passport_number == f"{user.first_name}12345"


def test_sqlite_errors_become_persistence_errors(database):
    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    database.get_user = broken
    store = RecordStore(database)

    with pytest.raises(PersistenceError):
        asyncio.run(store.get_user(1))


def test_timestamps_are_shown_in_the_bot_timezone(database):
    store = RecordStore(database, today=lambda: TODAY, timezone=pytz.timezone("Asia/Tashkent"))
    asyncio.run(store.upsert_user(5, fields()))
    with sqlite3.connect(database.path) as conn:
        conn.execute("UPDATE users SET created_at = '2024-06-01 22:30:00' WHERE telegram_id = 5")
    asyncio.run(store.add_admin(6, None, 5))
    with sqlite3.connect(database.path) as conn:
        conn.execute("UPDATE admins SET added_at = '2024-06-01 19:00:00' WHERE telegram_id = 6")

    user = asyncio.run(store.get_user(5))
    [admin] = asyncio.run(store.list_admins())

    assert user.created_at.date() == date(2024, 6, 2)
    assert user.created_at.hour == 3
    assert "Дата добавления: 2 июня 2024" in format_own_data(user)
    assert admin.added_at.date() == date(2024, 6, 2)


def test_default_timezone_is_utc(store):
    asyncio.run(store.upsert_user(5, fields()))

    user = asyncio.run(store.get_user(5))

    assert user.created_at.utcoffset() == timedelta(0)
