from datetime import datetime

from app.schemas.order import PickupOrderRequest
from utils.constants import MAX_MESSAGE_LENGTH
from utils.message_utils import format_customer_confirmation_message, format_pickup_order_message


def make_order(**overrides):
    data = {
        "customerName": "Amahoro",
        "pickupAddress": "KG 11 Ave, Kigali",
        "pickupDateTime": "2024-05-01T10:00:00Z",
        "items": [
            {"name": "Shirt", "quantity": 3},
            {"name": "Suit", "quantity": 1},
            {"name": "Duvet", "quantity": 2},
        ],
    }
    data.update(overrides)
    return PickupOrderRequest.model_validate(data)


def test_order_message_lists_items_in_order():
    message = format_pickup_order_message(make_order())

    shirt = message.index("3x Shirt")
    suit = message.index("1x Suit")
    duvet = message.index("2x Duvet")
    assert shirt < suit < duvet
    assert message.count("Shirt") == 1
    assert message.count("Suit") == 1
    assert message.count("Duvet") == 1


def test_order_message_contains_customer_details():
    message = format_pickup_order_message(make_order())

    assert "NEW PICKUP ORDER" in message
    assert "Amahoro" in message
    assert "KG 11 Ave, Kigali" in message
    assert "May 1, 2024" in message
    assert len(message) <= MAX_MESSAGE_LENGTH


def test_unparseable_pickup_time_is_echoed():
    message = format_pickup_order_message(make_order(pickupDateTime="not-a-date"))
    assert "not-a-date" in message


def test_missing_pickup_time_uses_placeholder():
    message = format_pickup_order_message(make_order(pickupDateTime=None))
    assert "Not specified" in message


def test_notes_block_only_when_notes_present():
    without_notes = format_pickup_order_message(make_order(customerNotes="   "))
    with_notes = format_pickup_order_message(make_order(customerNotes="  Gate code 1234  "))

    assert "Notes" not in without_notes
    assert "Notes" in with_notes
    assert "Gate code 1234" in with_notes


def test_order_message_is_stable_apart_from_timestamp():
    order = make_order(customerNotes="Fragile")
    first = format_pickup_order_message(order, received_at=datetime(2024, 5, 1, 9, 0))
    second = format_pickup_order_message(order, received_at=datetime(2024, 5, 2, 18, 30))

    assert first.rsplit("\n\n", 1)[0] == second.rsplit("\n\n", 1)[0]
    assert "2024-05-01 09:00:00" in first


def test_confirmation_message():
    message = format_customer_confirmation_message("Amahoro", "2024-05-01T10:00:00Z")

    assert "Amahoro" in message
    assert "May 1, 2024" in message
    assert "Wednesday" in message
    assert "LaundryPro" in message


def test_confirmation_without_pickup_time():
    message = format_customer_confirmation_message("Amahoro", None, business_name="CleanCo")

    assert "your preferred time" in message
    assert "CleanCo" in message


def test_confirmation_with_free_text_time():
    message = format_customer_confirmation_message("Amahoro", "tomorrow morning")
    assert "tomorrow morning" in message
