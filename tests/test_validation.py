from datetime import date

import pytest

from visa_keeper.messages import VALIDATION_MESSAGES
from visa_keeper.utils.validation import (
    normalize_contact_phone,
    parse_identity,
    validate_date,
    validate_name,
    validate_passport,
    validate_phone,
)

TODAY = date(2024, 6, 1)


@pytest.mark.parametrize(
    "raw",
    ["+998 94 205 25 25", "94 205 25 25", "942052525", "998942052525", " +998942052525 "],
)
def test_phone_is_normalised_to_international_format(raw):
    result = validate_phone(raw)

    assert result.valid is True
    assert result.value == "+998942052525"


@pytest.mark.parametrize("raw", ["123", "", "+7 999 123 45 67", "94 205 25 2a", "+998 94 205 25 255"])
def test_phone_rejects_wrong_shape(raw):
    result = validate_phone(raw)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["phone"]


def test_contact_phone_gets_leading_plus():
    assert normalize_contact_phone("998942052525") == "+998942052525"
    assert normalize_contact_phone("+998 94 205 25 25") == "+998942052525"


def test_name_is_trimmed():
    result = validate_name("  Jane Doe ")

    assert result.valid is True
    assert result.value == "Jane Doe"


@pytest.mark.parametrize("raw", ["Анна-Мария", "Ёлкин", "Ўткир", "O-Neil"])
def test_name_accepts_cyrillic_latin_and_hyphen(raw):
    assert validate_name(raw).valid is True


@pytest.mark.parametrize("raw", ["J@ne", "J", "a" * 51, "Agent 007", "   "])
def test_name_rejections(raw):
    result = validate_name(raw)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["name"]


def test_name_length_bounds():
    assert validate_name("Al").valid is True
    assert validate_name("a" * 50).valid is True


def test_passport_is_upper_cased():
    result = validate_passport("ab123")

    assert result.valid is True
    assert result.value == "AB123"


@pytest.mark.parametrize("raw", ["abcd", "A" * 16, "AB 1234", "AB-12345"])
def test_passport_rejections(raw):
    result = validate_passport(raw)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["passport"]


def test_date_today_is_accepted():
    result = validate_date("2024-06-01", today=TODAY)

    assert result.valid is True
    assert result.value == date(2024, 6, 1)


def test_date_in_the_past_is_rejected():
    result = validate_date("2024-05-31", today=TODAY)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["date_past"]


@pytest.mark.parametrize("raw", ["2024-13-01", "2024-02-30", "2023-02-29"])
def test_impossible_calendar_dates_are_rejected(raw):
    result = validate_date(raw, today=date(2020, 1, 1))

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["date_invalid"]


@pytest.mark.parametrize("raw", ["06-01-2024", "2024/06/01", "2024-6-1", "tomorrow"])
def test_date_shape_is_strict(raw):
    result = validate_date(raw, today=TODAY)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["date_format"]


def test_leap_day_is_a_real_date():
    assert validate_date("2028-02-29", today=TODAY).valid is True


def test_identity_parsing():
    assert parse_identity(" 123456 ").value == 123456
    assert parse_identity("-100200").value == -100200

    rejected = parse_identity("12ab")
    assert rejected.valid is False
    assert rejected.message == VALIDATION_MESSAGES["identity"]


@pytest.mark.parametrize("raw", ["٩٤ ٢٠٥ ٢٥ ٢٥", "۹۴۲۰۵۲۵۲۵", "+998 ９４ ２０５ ２５ ２５"])
def test_phone_rejects_non_ascii_digits(raw):
    result = validate_phone(raw)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["phone"]


def test_date_rejects_non_ascii_digits():
    result = validate_date("٢٠٢٤-٠٦-٠١", today=TODAY)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["date_format"]


@pytest.mark.parametrize("raw", ["٤٢", "9" * 25, str(2**63), str(-(2**63) - 1)])
def test_identity_rejects_non_ascii_and_out_of_range_values(raw):
    result = parse_identity(raw)

    assert result.valid is False
    assert result.message == VALIDATION_MESSAGES["identity"]


def test_identity_accepts_signed_64_bit_bounds():
    assert parse_identity(str(2**63 - 1)).value == 2**63 - 1
    assert parse_identity(str(-(2**63))).value == -(2**63)
