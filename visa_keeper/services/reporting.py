from __future__ import annotations

from typing import Iterable, Optional

from visa_keeper import messages
from visa_keeper.database import UserRecord
from visa_keeper.states import ConversationState, Step
from visa_keeper.utils.dates import week_key
from visa_keeper.utils.formatting import format_user_list

ALL_TOKEN = "all"
WEEK_TOKEN_PREFIX = "week_"


def week_token(key: str) -> str:
    return f"{WEEK_TOKEN_PREFIX}{key}"


def group_by_week(records: Iterable[UserRecord]) -> dict[str, list[UserRecord]]:
    """Bucket ``records`` by the Monday–Sunday week of their visa expiry.

    Keys keep the order in which their first record was seen.
    """
    grouped: dict[str, list[UserRecord]] = {}
    for record in records:
        grouped.setdefault(week_key(record.visa_expiry_date), []).append(record)
    return grouped


def start_report_session(records: list[UserRecord]) -> ConversationState:
    return ConversationState(
        step=Step.VIEW_WEEKS,
        weeks=group_by_week(records),
        records=list(records),
    )


def render_selection(state: Optional[ConversationState], token: str) -> Optional[str]:
    """Render the report text for a selection token, ``None`` if it cannot be resolved."""
    if state is None or state.step is not Step.VIEW_WEEKS:
        return None

    if token == ALL_TOKEN:
        if not state.records:
            return messages.NO_USERS
        return format_user_list(
            messages.ALL_USERS_HEADER, state.records, include_created=True
        )

    if token.startswith(WEEK_TOKEN_PREFIX):
        key = token[len(WEEK_TOKEN_PREFIX):]
        if key not in state.weeks:
            return None
        users = state.weeks[key]
        if not users:
            return messages.EMPTY_WEEK_TEMPLATE.format(week=key)
        return format_user_list(messages.WEEK_HEADER_TEMPLATE.format(week=key), users)

    return None


def render_expiring(records: list[UserRecord], days: int) -> str:
    if not records:
        return messages.NO_EXPIRING_TEMPLATE.format(days=days)
    return format_user_list(
        messages.EXPIRING_HEADER_TEMPLATE.format(days=days), records, expiry_label="expires"
    )


__all__ = [
    "ALL_TOKEN",
    "WEEK_TOKEN_PREFIX",
    "week_token",
    "group_by_week",
    "start_report_session",
    "render_selection",
    "render_expiring",
]
