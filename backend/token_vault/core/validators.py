"""Format checks applied before a value is tokenized."""

from __future__ import annotations

import re

_ID_WEIGHTS = (7, 9, 10, 5, 8, 4, 2, 1, 6, 3, 7, 9, 10, 5, 8, 4, 2)
_ID_CHECK_CHARS = ("1", "0", "X", "9", "8", "7", "6", "5", "4", "3", "2")
_ID_LENGTH = 18
_DIGITS = frozenset("0123456789")

_PHONE_PATTERN = re.compile(r"1[3-9][0-9]{9}")


def id_check_char(body: str) -> str:
    """Return the expected check character for the first 17 digits of an ID number."""
    total = sum(int(digit) * weight for digit, weight in zip(body, _ID_WEIGHTS, strict=True))
    return _ID_CHECK_CHARS[total % 11]


def is_valid_id_number(value: object) -> bool:
    """Validate an 18-character national identity number against its check digit.

    Returns False for anything malformed (wrong type, length, or characters)
    instead of raising.
    """
    if not isinstance(value, str) or len(value) != _ID_LENGTH:
        return False
    body, check = value[:17], value[17]
    if not all(ch in _DIGITS for ch in body):
        return False
    if check not in _DIGITS and check not in ("X", "x"):
        return False
    return check.upper() == id_check_char(body)


def is_valid_phone(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return _PHONE_PATTERN.fullmatch(value) is not None
