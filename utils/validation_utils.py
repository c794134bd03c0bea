"""
utils/validation_utils.py

Purpose: Input validation

- Phone number normalization to international digits
- WhatsApp destination canonicalization
- Masking of phone numbers for logs
"""

import re
from typing import Optional


_SEPARATORS = re.compile(r"[\s\-\(\)]")
_CHANNEL_PREFIX = "whatsapp:"
_ASCII_DIGITS = re.compile(r"[0-9]+")

MIN_LOCAL_DIGITS = 9
MIN_INTERNATIONAL_DIGITS = 10
MAX_DIGITS = 15


def normalize_phone_number(raw: Optional[str], default_country_code: str = "250") -> Optional[str]:
    """
    Normalizes a phone number to international digits (no leading +).

    Handles the formats customers and operators actually type:
        "+250 792 875 310" -> "250792875310"
        "0792875310"       -> "250792875310"  (local trunk prefix)
        "792875310"        -> "250792875310"  (local, no trunk prefix)

    Args:
        raw: Phone number as entered
        default_country_code: Dialling code for local-format numbers

    Returns:
        Canonical digit string, or None if the input is not a phone number
    """
    if not raw:
        return None

    cleaned = _SEPARATORS.sub("", raw).lstrip("+")

    if not _ASCII_DIGITS.fullmatch(cleaned) or not MIN_LOCAL_DIGITS <= len(cleaned) <= MAX_DIGITS:
        return None

    if cleaned.startswith("0") and len(cleaned) == 10:
        cleaned = default_country_code + cleaned[1:]
    elif len(cleaned) == MIN_LOCAL_DIGITS:
        cleaned = default_country_code + cleaned

    if not _ASCII_DIGITS.fullmatch(cleaned) or not MIN_INTERNATIONAL_DIGITS <= len(cleaned) <= MAX_DIGITS:
        return None

    return cleaned


def canonicalize_destination(destination: str) -> Optional[str]:
    """
    Strips a "whatsapp:" channel prefix, separators and the leading +.

    Returns the digit string when it is 10-15 digits long, None otherwise.
    """
    value = destination.strip()
    if value.lower().startswith(_CHANNEL_PREFIX):
        value = value[len(_CHANNEL_PREFIX):]

    value = _SEPARATORS.sub("", value).lstrip("+")

    if re.fullmatch(r"[0-9]{10,15}", value):
        return value
    return None


def mask_phone_number(phone: Optional[str]) -> str:
    """
    Masks all but the last four digits, for logging.
    """
    if not phone:
        return "<none>"
    digits = re.sub(r"\D", "", phone)
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]
