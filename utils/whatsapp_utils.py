"""
utils/whatsapp_utils.py

Purpose: WhatsApp contact link builders

- Click-to-chat (wa.me) links with a pre-filled message
- Display and tel: formats of the public contact number
- Handles URL encoding
"""

import urllib.parse

from utils.constants import DEFAULT_INQUIRY_MESSAGE


def _digits_only(phone_number: str) -> str:
    return phone_number.strip().lstrip("+")


def create_click_to_chat_link(phone_number: str, message: str = DEFAULT_INQUIRY_MESSAGE) -> str:
    """
    Creates a link that opens a WhatsApp chat with the business and
    pre-fills the message box.

    Args:
        phone_number: Business number in international format
        message: Pre-filled message text

    Returns:
        wa.me link
    """
    encoded_message = urllib.parse.quote(message, safe="")
    return f"https://wa.me/{_digits_only(phone_number)}?text={encoded_message}"


def format_display_number(phone_number: str) -> str:
    """Returns the number with a leading +."""
    return f"+{_digits_only(phone_number)}"


def create_tel_link(phone_number: str) -> str:
    """Returns a tel: link for click-to-call."""
    return f"tel:+{_digits_only(phone_number)}"
