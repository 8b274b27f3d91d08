"""Validators for the values collected by the data-entry wizards.

Every validator is a pure function of its input (and, for dates, of the
supplied ``today``) and returns a :class:`ValidationResult` instead of
raising, so the caller can re-prompt with ``result.message``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from visa_keeper.messages import VALIDATION_MESSAGES

COUNTRY_PREFIX = "+998"

_PHONE_RE = re.compile(r"^(?:\+?998)?([0-9]{2})([0-9]{3})([0-9]{2})([0-9]{2})$")
_NAME_RE = re.compile(r"^[A-Za-zА-Яа-яЁёЎўҚқҒғҲҳ\s-]{2,50}$")
_PASSPORT_RE = re.compile(r"^[A-Za-z0-9]{5,15}$")
_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_IDENTITY_RE = re.compile(r"^-?[0-9]+$")
_WHITESPACE_RE = re.compile(r"\s+")

# SQLite INTEGER columns hold signed 64-bit values.
_IDENTITY_MIN = -(2**63)
_IDENTITY_MAX = 2**63 - 1


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    value: Any = None
    message: Optional[str] = None

    @classmethod
    def accept(cls, value: Any) -> "ValidationResult":
        return cls(valid=True, value=value)

    @classmethod
    def reject(cls, message: str) -> "ValidationResult":
        return cls(valid=False, message=message)


def validate_phone(raw: str) -> ValidationResult:
    compact = _WHITESPACE_RE.sub("", raw or "")
    match = _PHONE_RE.match(compact)
    if not match:
        return ValidationResult.reject(VALIDATION_MESSAGES["phone"])
    return ValidationResult.accept(COUNTRY_PREFIX + "".join(match.groups()))


def normalize_contact_phone(raw: str) -> str:
    """Normalise a phone number shared through Telegram's contact button."""
    compact = _WHITESPACE_RE.sub("", raw or "")
    return compact if compact.startswith("+") else f"+{compact}"


def validate_name(raw: str) -> ValidationResult:
    value = (raw or "").strip()
    if not _NAME_RE.match(value):
        return ValidationResult.reject(VALIDATION_MESSAGES["name"])
    return ValidationResult.accept(value)


def validate_passport(raw: str) -> ValidationResult:
    value = (raw or "").strip()
    if not _PASSPORT_RE.match(value):
        return ValidationResult.reject(VALIDATION_MESSAGES["passport"])
    return ValidationResult.accept(value.upper())


def validate_date(raw: str, today: Optional[date] = None) -> ValidationResult:
    """Accept a ``YYYY-MM-DD`` date that is not earlier than ``today``."""
    value = (raw or "").strip()
    if not _DATE_RE.match(value):
        return ValidationResult.reject(VALIDATION_MESSAGES["date_format"])
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return ValidationResult.reject(VALIDATION_MESSAGES["date_invalid"])
    if parsed < (today or date.today()):
        return ValidationResult.reject(VALIDATION_MESSAGES["date_past"])
    return ValidationResult.accept(parsed)


def parse_identity(raw: str) -> ValidationResult:
    value = (raw or "").strip()
    if not _IDENTITY_RE.match(value):
        return ValidationResult.reject(VALIDATION_MESSAGES["identity"])
    identity = int(value)
    if not _IDENTITY_MIN <= identity <= _IDENTITY_MAX:
        return ValidationResult.reject(VALIDATION_MESSAGES["identity"])
    return ValidationResult.accept(identity)


__all__ = [
    "ValidationResult",
    "validate_phone",
    "normalize_contact_phone",
    "validate_name",
    "validate_passport",
    "validate_date",
    "parse_identity",
]
