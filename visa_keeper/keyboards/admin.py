from __future__ import annotations

from typing import Iterable

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, ReplyKeyboardMarkup

from visa_keeper import messages
from visa_keeper.services.reporting import ALL_TOKEN, week_token


def admin_menu_keyboard() -> ReplyKeyboardMarkup:
    buttons = [
        [messages.ADMIN_MENU_LABELS["get_data"]],
        [messages.ADMIN_MENU_LABELS["add_data"]],
        [messages.ADMIN_MENU_LABELS["check_expiry"]],
        [messages.ADMIN_MENU_LABELS["manage_admins"]],
    ]
    return ReplyKeyboardMarkup(buttons, resize_keyboard=True)


def admin_management_keyboard() -> ReplyKeyboardMarkup:
    buttons = [
        [messages.ADMIN_MANAGEMENT_LABELS["add_admin"]],
        [messages.ADMIN_MANAGEMENT_LABELS["remove_admin"]],
        [messages.ADMIN_MANAGEMENT_LABELS["list_admins"]],
        [messages.ADMIN_MANAGEMENT_LABELS["back"]],
    ]
    return ReplyKeyboardMarkup(buttons, resize_keyboard=True)


def week_selection_keyboard(week_keys: Iterable[str]) -> InlineKeyboardMarkup:
    buttons = [[InlineKeyboardButton(messages.ALL_DATA_BUTTON, callback_data=ALL_TOKEN)]]
    buttons.extend(
        [InlineKeyboardButton(key, callback_data=week_token(key))] for key in week_keys
    )
    return InlineKeyboardMarkup(buttons)
