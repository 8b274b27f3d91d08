from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

import pytest

from visa_keeper.database import Database
from visa_keeper.handlers import ConversationEngine
from visa_keeper.services.registry import RecordStore
from visa_keeper.states import ConversationStore

TODAY = date(2024, 6, 1)
ADMIN_ID = 1000
USER_ID = 2000


@dataclass
class SentMessage:
    chat_id: int
    text: str
    reply_markup: Any = None


@dataclass
class FakeMessenger:
    sent: list[SentMessage] = field(default_factory=list)

    async def send(self, chat_id: int, text: str, reply_markup: Optional[Any] = None) -> None:
        self.sent.append(SentMessage(chat_id, text, reply_markup))

    def texts(self, chat_id: Optional[int] = None) -> list[str]:
        return [m.text for m in self.sent if chat_id is None or m.chat_id == chat_id]

    @property
    def last(self) -> SentMessage:
        return self.sent[-1]


@pytest.fixture
def database(tmp_path) -> Database:
    return Database(tmp_path / "visa.sqlite")


@pytest.fixture
def store(database) -> RecordStore:
    return RecordStore(database, today=lambda: TODAY)


@pytest.fixture
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture
def conversations() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def engine(store, messenger, conversations, database) -> ConversationEngine:
    database.bootstrap(ADMIN_ID)
    counter = itertools.count(1_717_000_000_000)
    return ConversationEngine(
        store,
        messenger,
        conversations,
        today=lambda: TODAY,
        synthetic_identity=lambda: next(counter),
    )
