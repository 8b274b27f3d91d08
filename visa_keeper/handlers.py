"""Conversation engine driving the visa data wizards.

The engine is transport agnostic: it receives chat ids and texts, keeps one
:class:`~visa_keeper.states.ConversationState` per chat and answers through
a :class:`~visa_keeper.services.messaging.Messenger`.  Every incoming step
is dispatched to exactly one handler chosen by the chat's current
:class:`~visa_keeper.states.Step`.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Awaitable, Callable, Optional

from visa_keeper import messages
from visa_keeper.errors import PersistenceError
from visa_keeper.keyboards.admin import (
    admin_management_keyboard,
    admin_menu_keyboard,
    week_selection_keyboard,
)
from visa_keeper.keyboards.user import contact_request_keyboard, main_menu_keyboard
from visa_keeper.services.messaging import Messenger, ReplyMarkup
from visa_keeper.services.registry import RecordStore, UserFields
from visa_keeper.services.reporting import (
    render_expiring,
    render_selection,
    start_report_session,
)
from visa_keeper.states import ConversationState, ConversationStore, Step
from visa_keeper.utils.formatting import format_admin_list, format_own_data
from visa_keeper.utils.validation import (
    ValidationResult,
    normalize_contact_phone,
    parse_identity,
    validate_date,
    validate_name,
    validate_passport,
    validate_phone,
)

LOGGER = logging.getLogger(__name__)

StepHandler = Callable[[int, ConversationState, str, Optional[str]], Awaitable[None]]
MenuAction = Callable[[int], Awaitable[None]]

_PROMPTS: dict[Step, str] = {
    Step.PHONE: messages.USER_PROMPTS["phone"],
    Step.FIRST_NAME: messages.USER_PROMPTS["first_name"],
    Step.LAST_NAME: messages.USER_PROMPTS["last_name"],
    Step.PASSPORT: messages.USER_PROMPTS["passport"],
    Step.VISA_EXPIRY: messages.USER_PROMPTS["visa_expiry"],
    Step.ADMIN_PHONE: messages.ADMIN_PROMPTS["phone"],
    Step.ADMIN_FIRST_NAME: messages.ADMIN_PROMPTS["first_name"],
    Step.ADMIN_LAST_NAME: messages.ADMIN_PROMPTS["last_name"],
    Step.ADMIN_PASSPORT: messages.ADMIN_PROMPTS["passport"],
    Step.ADMIN_VISA_EXPIRY: messages.ADMIN_PROMPTS["visa_expiry"],
    Step.ADD_ADMIN_ID: messages.ADMIN_PROMPTS["admin_id"],
    Step.ADD_ADMIN_USERNAME: messages.ADMIN_PROMPTS["admin_username"],
    Step.REMOVE_ADMIN_ID: messages.ADMIN_PROMPTS["remove_admin_id"],
}


def _millisecond_clock() -> int:
    return time.time_ns() // 1_000_000


class ConversationEngine:
    def __init__(
        self,
        store: RecordStore,
        messenger: Messenger,
        conversations: Optional[ConversationStore] = None,
        *,
        today: Callable[[], date] = date.today,
        check_days: int = 7,
        synthetic_identity: Callable[[], int] = _millisecond_clock,
    ) -> None:
        self.store = store
        self.messenger = messenger
        self.conversations = conversations if conversations is not None else ConversationStore()
        self._today = today
        self.check_days = check_days
        # Records typed in by an admin have no chat of their own; they are
        # keyed by the entry time and are never matched to a later
        # self-registration of the same person.
        self._synthetic_identity = synthetic_identity

        self._user_actions: dict[str, MenuAction] = {
            messages.MENU_LABELS["add_data"]: self._start_self_service,
            messages.MENU_LABELS["my_data"]: self._show_own_data,
        }
        self._admin_actions: dict[str, MenuAction] = {
            messages.ADMIN_MENU_LABELS["get_data"]: self._show_report,
            messages.ADMIN_MENU_LABELS["add_data"]: self._start_admin_entry,
            messages.ADMIN_MENU_LABELS["check_expiry"]: self._show_expiring,
            messages.ADMIN_MENU_LABELS["manage_admins"]: self._show_admin_management,
            messages.ADMIN_MANAGEMENT_LABELS["add_admin"]: self._start_add_admin,
            messages.ADMIN_MANAGEMENT_LABELS["remove_admin"]: self._start_remove_admin,
            messages.ADMIN_MANAGEMENT_LABELS["list_admins"]: self._show_admins,
            messages.ADMIN_MANAGEMENT_LABELS["back"]: self._back_to_main_menu,
        }
        self._step_handlers: dict[Step, StepHandler] = {
            Step.PHONE: self._on_phone,
            Step.FIRST_NAME: self._on_first_name,
            Step.LAST_NAME: self._on_last_name,
            Step.PASSPORT: self._on_passport,
            Step.VISA_EXPIRY: self._on_visa_expiry,
            Step.ADMIN_PHONE: self._on_admin_phone,
            Step.ADMIN_FIRST_NAME: self._on_first_name,
            Step.ADMIN_LAST_NAME: self._on_last_name,
            Step.ADMIN_PASSPORT: self._on_passport,
            Step.ADMIN_VISA_EXPIRY: self._on_admin_visa_expiry,
            Step.ADD_ADMIN_ID: self._on_add_admin_id,
            Step.ADD_ADMIN_USERNAME: self._on_add_admin_username,
            Step.REMOVE_ADMIN_ID: self._on_remove_admin_id,
            Step.VIEW_WEEKS: self._on_report_text,
        }
        missing = set(Step) - set(self._step_handlers)
        if missing:
            raise RuntimeError(f"No handler registered for steps: {sorted(missing)}")

    # ------------------------------------------------------------------
    # Entry points

    async def start(self, chat_id: int) -> None:
        """Reset the chat and show the menu matching its role."""
        try:
            self.conversations.clear(chat_id)
            if await self.store.is_admin(chat_id):
                await self._send(chat_id, messages.ADMIN_WELCOME_MESSAGE, admin_menu_keyboard())
            else:
                await self._send(chat_id, messages.WELCOME_MESSAGE, main_menu_keyboard())
        except Exception:
            await self._report_failure(chat_id, "start")

    async def handle_message(
        self, chat_id: int, text: Optional[str], contact_phone: Optional[str] = None
    ) -> None:
        try:
            await self._dispatch_message(chat_id, text or "", contact_phone)
        except Exception:
            await self._report_failure(chat_id, "message")

    async def handle_callback(self, chat_id: int, token: str) -> None:
        try:
            text = render_selection(self.conversations.get(chat_id), token)
            if text is None:
                LOGGER.info("Unresolved report token %r for chat %s", token, chat_id)
                text = messages.REPORT_NOT_FOUND
            await self._send(chat_id, text)
        except Exception:
            await self._report_failure(chat_id, "callback")

    async def _dispatch_message(
        self, chat_id: int, text: str, contact_phone: Optional[str]
    ) -> None:
        is_admin = await self.store.is_admin(chat_id)

        action = self._user_actions.get(text)
        if action is None and is_admin:
            action = self._admin_actions.get(text)
        if action is not None:
            await action(chat_id)
            return

        state = self.conversations.get(chat_id)
        if state is None:
            return

        handler = self._step_handlers[state.step]
        await handler(chat_id, state, text, contact_phone)

    # ------------------------------------------------------------------
    # Messaging helpers

    async def _send(
        self, chat_id: int, text: str, reply_markup: Optional[ReplyMarkup] = None
    ) -> None:
        await self.messenger.send(chat_id, text, reply_markup)

    async def _report_failure(self, chat_id: int, kind: str) -> None:
        LOGGER.exception("Unhandled error while processing %s for chat %s", kind, chat_id)
        try:
            await self._send(chat_id, messages.GENERIC_ERROR)
        except Exception as exc:  # pragma: no cover - network/runtime specific
            LOGGER.warning("Unable to deliver error message to %s: %s", chat_id, exc)

    async def _send_main_menu(self, chat_id: int, *, admin: bool) -> None:
        keyboard = admin_menu_keyboard() if admin else main_menu_keyboard()
        await self._send(chat_id, messages.CHOOSE_ACTION, keyboard)

    # ------------------------------------------------------------------
    # Menu actions

    async def _start_self_service(self, chat_id: int) -> None:
        self.conversations.start(chat_id, Step.PHONE)
        await self._send(chat_id, _PROMPTS[Step.PHONE], contact_request_keyboard())

    async def _show_own_data(self, chat_id: int) -> None:
        try:
            user = await self.store.get_user(chat_id)
        except PersistenceError:
            LOGGER.exception("Error getting user data for %s", chat_id)
            await self._send(chat_id, messages.OWN_DATA_FAILED)
            return
        if user is None:
            await self._send(chat_id, messages.NO_OWN_DATA)
            return
        await self._send(chat_id, format_own_data(user))

    async def _show_report(self, chat_id: int) -> None:
        try:
            users = await self.store.list_users()
        except PersistenceError:
            LOGGER.exception("Error loading report data for %s", chat_id)
            await self._send(chat_id, messages.REPORT_FAILED)
            return
        if not users:
            await self._send(chat_id, messages.NO_USERS)
            return
        state = self.conversations.set(chat_id, start_report_session(users))
        await self._send(chat_id, messages.CHOOSE_WEEK, week_selection_keyboard(state.weeks))

    async def _start_admin_entry(self, chat_id: int) -> None:
        self.conversations.start(chat_id, Step.ADMIN_PHONE)
        await self._send(chat_id, _PROMPTS[Step.ADMIN_PHONE])

    async def _show_expiring(self, chat_id: int) -> None:
        try:
            users = await self.store.list_expiring(self.check_days)
        except PersistenceError:
            LOGGER.exception("Error checking expiring visas")
            await self._send(chat_id, messages.EXPIRING_FAILED)
            return
        await self._send(chat_id, render_expiring(users, self.check_days))

    async def _show_admin_management(self, chat_id: int) -> None:
        await self._send(chat_id, messages.CHOOSE_ACTION, admin_management_keyboard())

    async def _start_add_admin(self, chat_id: int) -> None:
        self.conversations.start(chat_id, Step.ADD_ADMIN_ID)
        await self._send(chat_id, _PROMPTS[Step.ADD_ADMIN_ID])

    async def _start_remove_admin(self, chat_id: int) -> None:
        self.conversations.start(chat_id, Step.REMOVE_ADMIN_ID)
        await self._send(chat_id, _PROMPTS[Step.REMOVE_ADMIN_ID])

    async def _show_admins(self, chat_id: int) -> None:
        try:
            admins = await self.store.list_admins()
        except PersistenceError:
            LOGGER.exception("Error listing admins")
            await self._send(chat_id, messages.ADMIN_LIST_FAILED)
            return
        await self._send(chat_id, format_admin_list(admins))

    async def _back_to_main_menu(self, chat_id: int) -> None:
        self.conversations.clear(chat_id)
        await self._send(chat_id, messages.MAIN_MENU_TITLE, admin_menu_keyboard())

    # ------------------------------------------------------------------
    # Step handlers

    async def _advance(
        self,
        chat_id: int,
        state: ConversationState,
        result: ValidationResult,
        attribute: str,
    ) -> None:
        if not result.valid:
            await self._send(chat_id, result.message or messages.GENERIC_ERROR)
            return
        setattr(state, attribute, result.value)
        next_step = state.step.next_step
        assert next_step is not None, f"{state.step} is a terminal step"
        state.step = next_step
        await self._send(chat_id, _PROMPTS[next_step])

    async def _on_phone(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        if contact_phone:
            result = ValidationResult.accept(normalize_contact_phone(contact_phone))
        else:
            result = validate_phone(text)
        await self._advance(chat_id, state, result, "phone")

    async def _on_admin_phone(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        await self._advance(chat_id, state, validate_phone(text), "phone")

    async def _on_first_name(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        await self._advance(chat_id, state, validate_name(text), "first_name")

    async def _on_last_name(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        await self._advance(chat_id, state, validate_name(text), "last_name")

    async def _on_passport(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        await self._advance(chat_id, state, validate_passport(text), "passport")

    def _collected_fields(self, state: ConversationState, visa_expiry: date) -> UserFields:
        assert state.phone and state.first_name and state.last_name and state.passport
        return UserFields(
            phone_number=state.phone,
            first_name=state.first_name,
            last_name=state.last_name,
            passport_number=state.passport,
            visa_expiry_date=visa_expiry,
        )

    async def _on_visa_expiry(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        result = validate_date(text, today=self._today())
        if not result.valid:
            await self._send(chat_id, result.message or messages.GENERIC_ERROR)
            return
        try:
            await self.store.upsert_user(chat_id, self._collected_fields(state, result.value))
        except PersistenceError:
            LOGGER.exception("Error saving user data for %s", chat_id)
            await self._send(chat_id, messages.USER_SAVE_FAILED)
            return
        self.conversations.clear(chat_id)
        await self._send(chat_id, messages.USER_SAVED)
        await self._send_main_menu(chat_id, admin=False)

    async def _on_admin_visa_expiry(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        result = validate_date(text, today=self._today())
        if not result.valid:
            await self._send(chat_id, result.message or messages.GENERIC_ERROR)
            return
        identity = self._synthetic_identity()
        try:
            await self.store.upsert_user(identity, self._collected_fields(state, result.value))
        except PersistenceError:
            LOGGER.exception("Error adding user data on behalf of admin %s", chat_id)
            await self._send(chat_id, messages.ADMIN_USER_SAVE_FAILED)
            return
        LOGGER.info("Admin %s added visa record %s", chat_id, identity)
        self.conversations.clear(chat_id)
        await self._send(chat_id, messages.ADMIN_USER_SAVED)
        await self._send_main_menu(chat_id, admin=True)

    async def _on_add_admin_id(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        await self._advance(chat_id, state, parse_identity(text), "admin_id")

    async def _on_add_admin_username(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        assert state.admin_id is not None
        username = text.strip().lstrip("@").strip() or None
        self.conversations.clear(chat_id)
        try:
            await self.store.add_admin(state.admin_id, username, chat_id)
        except PersistenceError:
            LOGGER.exception("Error adding admin %s", state.admin_id)
            await self._send(chat_id, messages.ADMIN_ADD_FAILED)
        else:
            LOGGER.info("Admin %s granted admin rights to %s", chat_id, state.admin_id)
            await self._send(
                chat_id,
                messages.ADMIN_ADDED_TEMPLATE.format(admin_id=state.admin_id, username=username or "—"),
            )
        await self._show_admin_management(chat_id)

    async def _on_remove_admin_id(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        result = parse_identity(text)
        if not result.valid:
            await self._send(chat_id, result.message or messages.GENERIC_ERROR)
            return
        self.conversations.clear(chat_id)
        try:
            removed = await self.store.remove_admin(result.value)
        except PersistenceError:
            LOGGER.exception("Error removing admin %s", result.value)
            await self._send(chat_id, messages.ADMIN_REMOVE_FAILED)
        else:
            if removed is None:
                await self._send(chat_id, messages.ADMIN_NOT_FOUND)
            else:
                LOGGER.info("Admin %s revoked admin rights of %s", chat_id, result.value)
                await self._send(chat_id, messages.ADMIN_REMOVED_TEMPLATE.format(admin_id=result.value))
        await self._show_admin_management(chat_id)

    async def _on_report_text(
        self, chat_id: int, state: ConversationState, text: str, contact_phone: Optional[str]
    ) -> None:
        # The report session only reacts to inline selections.
        return None


__all__ = ["ConversationEngine"]
