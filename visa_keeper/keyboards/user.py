from __future__ import annotations

from telegram import KeyboardButton, ReplyKeyboardMarkup

from visa_keeper import messages


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    buttons = [
        [messages.MENU_LABELS["add_data"]],
        [messages.MENU_LABELS["my_data"]],
    ]
    return ReplyKeyboardMarkup(buttons, resize_keyboard=True)


def contact_request_keyboard() -> ReplyKeyboardMarkup:
    buttons = [[KeyboardButton(messages.SHARE_PHONE_BUTTON, request_contact=True)]]
    return ReplyKeyboardMarkup(buttons, resize_keyboard=True, one_time_keyboard=True)
