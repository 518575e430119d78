"""Shared validation and formatting utilities"""

import base64
import binascii
import re
from datetime import date
from typing import Optional


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def phone_digits(phone: Optional[str]) -> Optional[str]:
    """Strip a phone number down to its digits (profiles store digits only)"""
    if not phone:
        return None
    digits = re.sub(r"\D", "", phone)
    return digits or None


def format_phone_number(value: Optional[str]) -> str:
    """Format a phone number for display as (XXX) XXX-XXXX, with ext for longer input"""
    if not value:
        return ""

    digits = re.sub(r"\D", "", value)

    if len(digits) == 0:
        return ""
    if len(digits) <= 3:
        return f"({digits}"
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    if len(digits) <= 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"

    return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]} ext {digits[10:]}"


def normalize_zipcode(zipcode: Optional[str]) -> Optional[str]:
    """Return the 5-digit ZIP from inputs like '92082' or '92082-1234', else None"""
    if not zipcode:
        return None
    match = re.match(r"^\s*(\d{5})(?:-\d{4})?\s*$", zipcode)
    return match.group(1) if match else None


def extract_zipcode(address: Optional[str]) -> Optional[str]:
    """Pull the trailing ZIP code out of a '<street>, <city>, <state> <zip>' address"""
    if not address:
        return None
    match = re.search(r"(\d{5})(?:-\d{4})?\s*$", address.strip())
    return match.group(1) if match else None


# ----------------------------------------------------------------------------
# Base64 / data URL helpers for signature images
# ----------------------------------------------------------------------------

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.+)$", re.DOTALL)


def extract_base64_from_data_url(data_url: str) -> str:
    """Return the base64 payload of a data URL (input without a prefix is returned as-is)"""
    match = DATA_URL_PATTERN.match(data_url.strip())
    if match:
        return match.group("data")
    return data_url.strip()


def is_valid_base64(base64_data: str) -> bool:
    if not base64_data:
        return False
    try:
        base64.b64decode(base64_data, validate=True)
        return True
    except (binascii.Error, ValueError):
        return False


def get_base64_size(base64_data: str) -> int:
    """Decoded size in bytes of a base64 string"""
    padding = base64_data.count("=", -2)
    return (len(base64_data) * 3) // 4 - padding


def format_long_date(value: date) -> str:
    """'March 5, 2025' style dates used in customer emails"""
    return f"{value:%B} {value.day}, {value.year}"


def format_short_date(value: date) -> str:
    """'Mar 05, 2025' style dates used in booking notes"""
    return value.strftime("%b %d, %Y")
