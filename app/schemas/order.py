"""
app/schemas/order.py

Pydantic models for the pickup order endpoint.
Field names follow the website's JSON (camelCase) through aliases.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError
from typing import Any, List, Optional


# Friendlier messages for required fields that are absent altogether
REQUIRED_FIELD_MESSAGES = {
    "customerName": "Customer name is required",
    "pickupAddress": "Pickup address is required",
    "items": "At least one item is required",
    "name": "Item name is required",
    "quantity": "Quantity must be a positive integer",
}


class OrderItem(BaseModel):
    """One line of the order: a garment type and how many of it."""

    name: str = Field(..., description="Item name, e.g. 'Shirt'")
    quantity: int = Field(..., description="Positive number of pieces")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("item_name", "Item name is required")
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        """Accepts positive integers and numeric strings such as "3"."""
        if isinstance(v, bool):
            raise PydanticCustomError("quantity", "Quantity must be a positive integer")
        if isinstance(v, str):
            v = v.strip()
            if not (v.isascii() and v.isdigit()):
                raise PydanticCustomError("quantity", "Quantity must be a positive integer")
            v = int(v)
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        if not isinstance(v, int) or v <= 0:
            raise PydanticCustomError("quantity", "Quantity must be a positive integer")
        return v


class PickupOrderRequest(BaseModel):
    """Order submitted from the website's pickup form."""

    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName")
    pickup_address: str = Field(..., alias="pickupAddress")
    pickup_date_time: Optional[str] = Field(default=None, alias="pickupDateTime")
    items: List[OrderItem] = Field(...)
    customer_notes: Optional[str] = Field(default=None, alias="customerNotes")
    customer_phone: Optional[str] = Field(default=None, alias="customerPhone")

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("customer_name", "Customer name is required")
        return v

    @field_validator("pickup_address")
    @classmethod
    def validate_pickup_address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("pickup_address", "Pickup address is required")
        return v

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: List[OrderItem]) -> List[OrderItem]:
        if not v:
            raise PydanticCustomError("items", "At least one item is required")
        return v

    @field_validator("customer_notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("pickup_date_time", "customer_phone")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class MessagingResult(BaseModel):
    """
    Outcome of one send through the messaging gateway.
    message_id is set only on success, error only on failure.
    """

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message_id: str) -> "MessagingResult":
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, error: str) -> "MessagingResult":
        return cls(success=False, error=error)


def format_validation_errors(exc: ValidationError) -> str:
    """
    Renders pydantic errors as "path: message" pairs joined by commas,
    e.g. "items.0.quantity: Quantity must be a positive integer".
    """
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        path = ".".join(loc)
        message = error.get("msg", "Invalid value")
        if error.get("type") == "missing" and loc:
            message = REQUIRED_FIELD_MESSAGES.get(loc[-1], message)
        messages.append(f"{path}: {message}" if path else message)
    return ", ".join(messages)
