from __future__ import annotations

from typing import Iterable

from visa_keeper.database import AdminRecord, UserRecord
from visa_keeper.messages import (
    ADMIN_LIST_EMPTY,
    ADMIN_LIST_HEADER,
    OWN_DATA_FOOTER,
    OWN_DATA_HEADER,
    RECORD_LABELS,
)
from visa_keeper.utils.dates import format_display_date

MESSAGE_LIMIT = 4096
RECORD_SEPARATOR = "\n"


def format_user_record(
    user: UserRecord,
    *,
    include_created: bool = False,
    expiry_label: str = "visa_expiry",
) -> str:
    lines = [
        f"{RECORD_LABELS['phone']}: {user.phone_number}",
        f"{RECORD_LABELS['first_name']}: {user.first_name}",
        f"{RECORD_LABELS['last_name']}: {user.last_name}",
        f"{RECORD_LABELS['passport']}: {user.passport_number}",
        f"{RECORD_LABELS[expiry_label]}: {format_display_date(user.visa_expiry_date)}",
    ]
    if include_created:
        lines.append(f"{RECORD_LABELS['created_at']}: {format_display_date(user.created_at)}")
    return "\n".join(lines) + "\n"


def format_own_data(user: UserRecord) -> str:
    body = format_user_record(user, include_created=True).rstrip("\n")
    return OWN_DATA_HEADER + body + OWN_DATA_FOOTER


def format_user_list(
    header: str,
    users: Iterable[UserRecord],
    *,
    include_created: bool = False,
    expiry_label: str = "visa_expiry",
) -> str:
    rows = [
        format_user_record(user, include_created=include_created, expiry_label=expiry_label)
        for user in users
    ]
    return header + RECORD_SEPARATOR.join(rows)


def format_admin_list(admins: Iterable[AdminRecord]) -> str:
    rows = [
        f"ID: {admin.telegram_id}\n"
        f"Username: {admin.username or '—'}\n"
        f"{RECORD_LABELS['admin_added']}: {format_display_date(admin.added_at)}\n"
        for admin in admins
    ]
    if not rows:
        return ADMIN_LIST_EMPTY
    return ADMIN_LIST_HEADER + "\n".join(rows)


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split ``text`` into Telegram-sized chunks, preferring blank-line breaks."""
    if len(text) <= limit:
        return [text]

    chunks: list[str] = []
    current = ""
    for block in text.split("\n\n"):
        candidate = f"{current}\n\n{block}" if current else block
        if len(candidate) <= limit:
            current = candidate
            continue
        if current:
            chunks.append(current)
        while len(block) > limit:
            chunks.append(block[:limit])
            block = block[limit:]
        current = block
    if current:
        chunks.append(current)
    return chunks


__all__ = [
    "MESSAGE_LIMIT",
    "format_user_record",
    "format_own_data",
    "format_user_list",
    "format_admin_list",
    "split_message",
]
