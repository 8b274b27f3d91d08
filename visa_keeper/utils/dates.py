from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union

from visa_keeper.messages import MONTHS_GENITIVE

WEEK_KEY_SEPARATOR = " - "


def week_bounds(day: date) -> tuple[date, date]:
    """Return the Monday and Sunday of the ISO week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def format_short_date(day: date) -> str:
    return f"{day.day}.{day.month}.{day.year}"


def week_key(day: date) -> str:
    start, end = week_bounds(day)
    return f"{format_short_date(start)}{WEEK_KEY_SEPARATOR}{format_short_date(end)}"


def format_display_date(value: Union[date, datetime]) -> str:
    return f"{value.day} {MONTHS_GENITIVE[value.month - 1]} {value.year}"


__all__ = [
    "week_bounds",
    "format_short_date",
    "week_key",
    "format_display_date",
]
