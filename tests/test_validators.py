import base64
from datetime import date

import pytest

from dumpster_rental.shared.validators import (
    extract_base64_from_data_url,
    extract_zipcode,
    format_long_date,
    format_phone_number,
    format_short_date,
    get_base64_size,
    is_valid_base64,
    normalize_zipcode,
    phone_digits,
    validate_email,
)


def test_validate_email_normalizes_case():
    assert validate_email("  Jane@Example.COM ") == "jane@example.com"


def test_validate_email_rejects_bad_format():
    with pytest.raises(ValueError):
        validate_email("not-an-email")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("7605551234", "(760) 555-1234"),
        ("760-555-1234", "(760) 555-1234"),
        ("76055512349", "(760) 555-1234 ext 9"),
        ("760555", "(760) 555"),
        ("", ""),
    ],
)
def test_format_phone_number(raw, expected):
    assert format_phone_number(raw) == expected


def test_phone_digits():
    assert phone_digits("(760) 555-1234") == "7605551234"
    assert phone_digits("---") is None
    assert phone_digits(None) is None


def test_zip_code_helpers():
    assert normalize_zipcode("92082-1234") == "92082"
    assert normalize_zipcode("9208") is None
    assert extract_zipcode("123 Main St, Valley Center, CA 92082") == "92082"
    assert extract_zipcode("123 Main St") is None


def test_date_formats():
    assert format_long_date(date(2025, 3, 5)) == "March 5, 2025"
    assert format_short_date(date(2025, 3, 5)) == "Mar 05, 2025"


def test_base64_helpers():
    payload = base64.b64encode(b"\x89PNG" + b"\x00" * 96).decode()
    data_url = f"data:image/png;base64,{payload}"

    assert extract_base64_from_data_url(data_url) == payload
    assert extract_base64_from_data_url(payload) == payload
    assert is_valid_base64(payload)
    assert not is_valid_base64("not base64!!")
    assert get_base64_size(payload) == 100
