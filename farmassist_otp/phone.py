"""
Phone Entry Utilities
=====================
Validation and display formatting for the phone number that an OTP is sent to.
"""

import re
from typing import NamedTuple, Optional

from .exceptions import InvalidPhoneError

PHONE_DIGITS = 10
DEFAULT_COUNTRY_CODE = "+91"


class Country(NamedTuple):
    code: str
    flag: str
    name: str


COUNTRY_CODES = (
    Country("+91", "🇮🇳", "India"),
    Country("+1", "🇺🇸", "United States"),
    Country("+44", "🇬🇧", "United Kingdom"),
    Country("+61", "🇦🇺", "Australia"),
    Country("+86", "🇨🇳", "China"),
    Country("+81", "🇯🇵", "Japan"),
    Country("+49", "🇩🇪", "Germany"),
    Country("+33", "🇫🇷", "France"),
    Country("+971", "🇦🇪", "UAE"),
    Country("+65", "🇸🇬", "Singapore"),
    Country("+880", "🇧🇩", "Bangladesh"),
    Country("+92", "🇵🇰", "Pakistan"),
    Country("+977", "🇳🇵", "Nepal"),
    Country("+94", "🇱🇰", "Sri Lanka"),
)


def clean_phone(raw: Optional[str], max_digits: int = PHONE_DIGITS) -> str:
    """Keep only digits, truncated to ``max_digits``."""
    return re.sub(r'\D', '', raw or '')[:max_digits]


def validate_phone(raw: Optional[str]) -> str:
    """
    Clean and validate a phone number before requesting an OTP.

    Raises:
        InvalidPhoneError: Fewer than 10 digits were entered

    Returns:
        The cleaned 10-digit number
    """
    digits = re.sub(r'\D', '', raw or '')
    if len(digits) < PHONE_DIGITS:
        raise InvalidPhoneError()
    return digits[:PHONE_DIGITS]


def find_country(code: str) -> Optional[Country]:
    for country in COUNTRY_CODES:
        if country.code == code:
            return country
    return None


def format_display_phone(phone: Optional[str], country_code: Optional[str] = None) -> str:
    """
    Format a number for the "We sent a 6-digit code to ..." line.

    Example:
        format_display_phone("9876543210", "+91") -> "+91 98765 43210"
    """
    if not phone:
        return ""
    return f"{country_code or DEFAULT_COUNTRY_CODE} {phone[:5]} {phone[5:]}"
