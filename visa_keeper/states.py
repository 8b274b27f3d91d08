"""Per-chat conversation state for the data-entry wizards.

A chat with no entry in :class:`ConversationStore` is idle.  Entries are
never expired automatically: a wizard abandoned half-way stays in memory
until the chat starts another flow, presses a menu reset or completes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from visa_keeper.database import UserRecord


class Flow(str, Enum):
    SELF_SERVICE = "self_service"
    ADMIN_ENTRY = "admin_entry"
    ADD_ADMIN = "add_admin"
    REMOVE_ADMIN = "remove_admin"
    REPORT = "report"


class Step(str, Enum):
    PHONE = "phone"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    PASSPORT = "passport"
    VISA_EXPIRY = "visaExpiry"

    ADMIN_PHONE = "admin_phone"
    ADMIN_FIRST_NAME = "admin_firstName"
    ADMIN_LAST_NAME = "admin_lastName"
    ADMIN_PASSPORT = "admin_passport"
    ADMIN_VISA_EXPIRY = "admin_visaExpiry"

    ADD_ADMIN_ID = "add_admin_id"
    ADD_ADMIN_USERNAME = "add_admin_username"
    REMOVE_ADMIN_ID = "remove_admin_id"

    VIEW_WEEKS = "view_weeks"

    @property
    def next_step(self) -> Optional["Step"]:
        """The step that follows this one in its flow, ``None`` when terminal."""
        return _NEXT_STEP.get(self)


_FLOW_ORDER: dict[Flow, tuple[Step, ...]] = {
    Flow.SELF_SERVICE: (
        Step.PHONE,
        Step.FIRST_NAME,
        Step.LAST_NAME,
        Step.PASSPORT,
        Step.VISA_EXPIRY,
    ),
    Flow.ADMIN_ENTRY: (
        Step.ADMIN_PHONE,
        Step.ADMIN_FIRST_NAME,
        Step.ADMIN_LAST_NAME,
        Step.ADMIN_PASSPORT,
        Step.ADMIN_VISA_EXPIRY,
    ),
    Flow.ADD_ADMIN: (Step.ADD_ADMIN_ID, Step.ADD_ADMIN_USERNAME),
    Flow.REMOVE_ADMIN: (Step.REMOVE_ADMIN_ID,),
    Flow.REPORT: (Step.VIEW_WEEKS,),
}

_NEXT_STEP: dict[Step, Step] = {
    current: following
    for steps in _FLOW_ORDER.values()
    for current, following in zip(steps, steps[1:])
}


@dataclass(slots=True)
class ConversationState:
    step: Step
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    passport: Optional[str] = None
    admin_id: Optional[int] = None
    # Only populated while ``step`` is ``Step.VIEW_WEEKS``.
    weeks: dict[str, list[UserRecord]] = field(default_factory=dict)
    records: list[UserRecord] = field(default_factory=list)


class ConversationStore:
    """Keyed store of :class:`ConversationState` objects, one per chat."""

    def __init__(self) -> None:
        self._states: dict[int, ConversationState] = {}

    def get(self, chat_id: int) -> Optional[ConversationState]:
        return self._states.get(chat_id)

    def set(self, chat_id: int, state: ConversationState) -> ConversationState:
        self._states[chat_id] = state
        return state

    def start(self, chat_id: int, step: Step) -> ConversationState:
        return self.set(chat_id, ConversationState(step=step))

    def clear(self, chat_id: int) -> None:
        self._states.pop(chat_id, None)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[int]:
        return iter(self._states)


__all__ = ["Flow", "Step", "ConversationState", "ConversationStore"]
