import asyncio
from datetime import date

from visa_keeper.errors import PersistenceError
from visa_keeper.services.notifier import ExpiryNotifier
from visa_keeper.services.registry import UserFields


def add(store, identity, expiry):
    fields = UserFields(
        phone_number="+998942052525",
        first_name="Jane",
        last_name="Doe",
        passport_number=f"AB{identity:05d}",
        visa_expiry_date=expiry,
    )
    asyncio.run(store.upsert_user(identity, fields))


def test_alert_goes_to_configured_admin_chat(store, messenger):
    add(store, 1, date(2024, 6, 3))
    add(store, 2, date(2024, 6, 10))
    notifier = ExpiryNotifier(store, messenger, admin_chat_id=-100500, days=3)

    delivered = asyncio.run(notifier.run())

    assert delivered == 1
    assert [m.chat_id for m in messenger.sent] == [-100500]
    text = messenger.last.text
    assert text.startswith("⌛️Внимание! Истекает виза пользователя:")
    assert "AB00001" in text
    assert "AB00002" not in text
    assert "Истекает: 3 июня 2024" in text


def test_alert_falls_back_to_every_admin(store, messenger, database):
    database.add_admin(11, "a", 11)
    database.add_admin(12, "b", 11)
    add(store, 1, date(2024, 6, 1))
    notifier = ExpiryNotifier(store, messenger)

    assert asyncio.run(notifier.run()) == 2
    assert sorted(m.chat_id for m in messenger.sent) == [11, 12]


def test_nothing_is_sent_without_expiring_visas(store, messenger):
    add(store, 1, date(2024, 9, 1))
    notifier = ExpiryNotifier(store, messenger, admin_chat_id=1)

    assert asyncio.run(notifier.run()) == 0
    assert messenger.sent == []


def test_store_failures_are_logged_not_raised(store, messenger):
    async def failing(days):
        raise PersistenceError("unreachable")

    store.list_expiring = failing
    notifier = ExpiryNotifier(store, messenger, admin_chat_id=1)

    assert asyncio.run(notifier.run()) == 0
    assert messenger.sent == []


def test_every_expiring_user_is_listed(store, messenger):
    for identity in range(1, 4):
        add(store, identity, date(2024, 6, identity))
    notifier = ExpiryNotifier(store, messenger, admin_chat_id=1)

    asyncio.run(notifier.run())

    assert messenger.last.text.count("Внимание!") == 3
