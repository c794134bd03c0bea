"""
utils/message_utils.py

Purpose: WhatsApp text builders for pickup orders

- Renders the new-order notification sent to the dry cleaner
- Renders the confirmation sent back to the customer
- Formats pickup times, echoing unparseable input verbatim

Builders never truncate; length is enforced by the messaging gateway.
"""

from datetime import datetime
from typing import Optional

from app.schemas.order import PickupOrderRequest
from utils.constants import (
    CONFIRMATION_TIME_NOT_SPECIFIED,
    CUSTOMER_CONFIRMATION_MESSAGE,
    NEW_ORDER_DETAILS,
    NEW_ORDER_FOOTER,
    NEW_ORDER_HEADER,
    NEW_ORDER_ITEM_LINE,
    NEW_ORDER_ITEMS,
    NEW_ORDER_NOTES,
    PICKUP_TIME_NOT_SPECIFIED,
)


def parse_pickup_time(value: str) -> Optional[datetime]:
    """
    Parses an ISO-like timestamp ("2024-05-01T10:00", "2024-05-01T10:00:00Z").

    Returns None when the value is not a date.
    """
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_pickup_time(value: Optional[str], placeholder: str, long_form: bool = False) -> str:
    """
    Human-readable pickup time.

    Short form: "Wed, May 1, 2024, 10:00 AM"
    Long form:  "Wednesday, May 1, 2024 at 10:00 AM"
    """
    if not value:
        return placeholder

    parsed = parse_pickup_time(value)
    if parsed is None:
        return value

    if long_form:
        return f"{parsed:%A}, {parsed:%B} {parsed.day}, {parsed.year} at {parsed:%I:%M %p}"
    return f"{parsed:%a}, {parsed:%b} {parsed.day}, {parsed.year}, {parsed:%I:%M %p}"


def format_pickup_order_message(order: PickupOrderRequest, received_at: Optional[datetime] = None) -> str:
    """
    Builds the new-order notification for the dry cleaner.

    Args:
        order: Validated pickup order
        received_at: Composition time (defaults to now)

    Returns:
        WhatsApp-formatted text
    """
    received_at = received_at or datetime.now()

    items = "\n".join(
        NEW_ORDER_ITEM_LINE.format(quantity=item.quantity, name=item.name)
        for item in order.items
    )

    sections = [
        NEW_ORDER_HEADER,
        NEW_ORDER_DETAILS.format(
            customer_name=order.customer_name,
            pickup_address=order.pickup_address,
            pickup_time=format_pickup_time(order.pickup_date_time, PICKUP_TIME_NOT_SPECIFIED),
        ),
        NEW_ORDER_ITEMS.format(items=items),
    ]

    notes = (order.customer_notes or "").strip()
    if notes:
        sections.append(NEW_ORDER_NOTES.format(notes=notes))

    sections.append(NEW_ORDER_FOOTER.format(received_at=received_at.strftime("%Y-%m-%d %H:%M:%S")))

    return "\n\n".join(sections)


def format_customer_confirmation_message(
    customer_name: str,
    pickup_date_time: Optional[str],
    business_name: str = "LaundryPro",
) -> str:
    """Builds the confirmation sent to the customer."""
    return CUSTOMER_CONFIRMATION_MESSAGE.format(
        customer_name=customer_name,
        business_name=business_name,
        pickup_time=format_pickup_time(pickup_date_time, CONFIRMATION_TIME_NOT_SPECIFIED, long_form=True),
    )
