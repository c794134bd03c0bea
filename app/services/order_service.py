"""
app/services/order_service.py

Purpose: Pickup order intake

- Parses and validates the raw request body
- Generates the order correlation ID
- Notifies the dry cleaner (critical) then the customer (best effort)
- Shapes the HTTP outcome
"""

import json
import secrets
import string
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastapi import Depends
from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.core.exceptions import ClientInputError, ConfigurationError, LaundryProError
from app.core.logging import get_logger, LogContext
from app.schemas.order import PickupOrderRequest, format_validation_errors
from app.schemas.response import OrderSubmissionResponse
from app.services.messaging_providers import build_provider_client
from app.services.whatsapp_service import MessagingGateway
from utils.constants import (
    GENERIC_ERROR_MESSAGE,
    MAX_MESSAGE_LENGTH,
    ORDER_FORWARD_FAILED_MESSAGE,
    ORDER_SUBMITTED_MESSAGE,
)
from utils.message_utils import format_customer_confirmation_message, format_pickup_order_message
from utils.validation_utils import mask_phone_number, normalize_phone_number

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_order_id() -> str:
    """
    Correlation ID: millisecond timestamp and a random token, both base36.

    Example: ORD-LVN2K8Q1-7F3KQZ
    """
    timestamp = _to_base36(int(time.time() * 1000))
    random_part = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"ORD-{timestamp}-{random_part}".upper()


def parse_order_payload(body: Any) -> PickupOrderRequest:
    """
    Turns a raw request body into a validated order.

    Args:
        body: bytes/str holding JSON, or an already decoded object

    Raises:
        ClientInputError: Malformed JSON, non-object body, or invalid fields
    """
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            raise ClientInputError("Invalid JSON")

    if isinstance(body, str):
        if not body.strip():
            raise ClientInputError("Request body is required")
        try:
            body = json.loads(body)
        except ValueError:
            raise ClientInputError("Invalid JSON")

    if not isinstance(body, dict):
        raise ClientInputError("Request body must be a JSON object")

    try:
        return PickupOrderRequest.model_validate(body)
    except ValidationError as e:
        raise ClientInputError(format_validation_errors(e))


@dataclass
class IntakeOutcome:
    """HTTP status plus response body for one submission."""

    status_code: int
    response: OrderSubmissionResponse


class OrderIntakeService:
    """Forwards pickup orders to the dry cleaner over WhatsApp"""

    def __init__(
        self,
        gateway: MessagingGateway,
        dry_cleaner_number: str,
        default_country_code: str = "250",
        business_name: str = "LaundryPro",
    ):
        self.gateway = gateway
        self.dry_cleaner_number = dry_cleaner_number
        self.default_country_code = default_country_code
        self.business_name = business_name

    @classmethod
    def from_settings(cls, config: Settings, gateway: Optional[MessagingGateway] = None) -> "OrderIntakeService":
        """
        Builds the service from configuration.

        Raises:
            ConfigurationError: Destination number or provider credentials missing
        """
        raw_number = (config.DRY_CLEANER_WHATSAPP_NUMBER or "").strip()
        if not raw_number:
            raise ConfigurationError("DRY_CLEANER_WHATSAPP_NUMBER environment variable is not set")

        dry_cleaner_number = normalize_phone_number(raw_number, config.DEFAULT_COUNTRY_CODE)
        if dry_cleaner_number is None:
            raise ConfigurationError("DRY_CLEANER_WHATSAPP_NUMBER is not a valid phone number")

        if gateway is None:
            gateway = MessagingGateway(
                build_provider_client(config),
                timeout=config.MESSAGING_TIMEOUT_SECONDS,
            )

        return cls(
            gateway=gateway,
            dry_cleaner_number=dry_cleaner_number,
            default_country_code=config.DEFAULT_COUNTRY_CODE,
            business_name=config.BUSINESS_NAME,
        )

    async def submit(self, order: PickupOrderRequest) -> IntakeOutcome:
        """
        Runs the order through notification and returns the HTTP outcome.
        Unexpected faults become a generic 500 carrying the order ID.
        """
        order_id = generate_order_id()

        with LogContext(order_id=order_id, provider=self.gateway.provider_name):
            try:
                return await self._process(order_id, order)
            except LaundryProError as e:
                logger.warning(f"Order rejected: {e.message}")
                return IntakeOutcome(
                    status_code=e.status_code,
                    response=OrderSubmissionResponse(success=False, order_id=order_id, error=e.message),
                )
            except Exception as e:
                logger.error(f"Unexpected error while processing order: {e}", exc_info=True)
                return IntakeOutcome(
                    status_code=500,
                    response=OrderSubmissionResponse(
                        success=False,
                        order_id=order_id,
                        error=GENERIC_ERROR_MESSAGE,
                    ),
                )

    async def _process(self, order_id: str, order: PickupOrderRequest) -> IntakeOutcome:
        logger.info(f"📥 New pickup order from {order.customer_name} with {len(order.items)} item(s)")

        message = format_pickup_order_message(order)
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ClientInputError(
                f"Order is too large to send ({len(message)} characters, maximum is {MAX_MESSAGE_LENGTH}). "
                "Please shorten the notes or item list."
            )

        dry_cleaner_result = await self.gateway.send(self.dry_cleaner_number, message)

        if not dry_cleaner_result.success:
            logger.error(f"❌ Failed to send order to dry cleaner: {dry_cleaner_result.error}")
            return IntakeOutcome(
                status_code=500,
                response=OrderSubmissionResponse(
                    success=False,
                    order_id=order_id,
                    error=ORDER_FORWARD_FAILED_MESSAGE.format(order_id=order_id),
                ),
            )

        logger.info(f"✅ Order forwarded to dry cleaner: message_id={dry_cleaner_result.message_id}")

        if order.customer_phone:
            await self._send_customer_confirmation(order)

        return IntakeOutcome(
            status_code=200,
            response=OrderSubmissionResponse(
                success=True,
                order_id=order_id,
                message_id=dry_cleaner_result.message_id,
                message=ORDER_SUBMITTED_MESSAGE,
            ),
        )

    async def _send_customer_confirmation(self, order: PickupOrderRequest) -> None:
        """Best effort; failures are only logged."""
        customer_number = normalize_phone_number(order.customer_phone, self.default_country_code)
        if customer_number is None:
            logger.warning(
                f"Skipping customer confirmation: invalid phone {mask_phone_number(order.customer_phone)}"
            )
            return

        message = format_customer_confirmation_message(
            order.customer_name,
            order.pickup_date_time,
            business_name=self.business_name,
        )
        result = await self.gateway.send(customer_number, message)

        if result.success:
            logger.info(f"✅ Customer confirmation sent: message_id={result.message_id}")
        else:
            logger.warning(f"Customer confirmation failed (order still accepted): {result.error}")


ServiceFactory = Callable[[], OrderIntakeService]


def get_order_intake_factory(config: Settings = Depends(get_settings)) -> ServiceFactory:
    """
    FastAPI dependency returning a factory for the intake service.

    The service is built only after the body validates, so malformed
    requests get their 400 even when configuration is incomplete.
    """
    return lambda: OrderIntakeService.from_settings(config)


async def handle_pickup_order(body: Any, service_factory: ServiceFactory) -> IntakeOutcome:
    """
    Shared pipeline for the HTTP route and the serverless adapter:
    validate, build the service, submit.

    Client and configuration errors are returned as outcomes.
    """
    try:
        order = parse_order_payload(body)
        service = service_factory()
    except LaundryProError as e:
        if e.status_code >= 500:
            logger.error(f"Order intake unavailable: {e.message}")
        else:
            logger.info(f"Rejected pickup order: {e.message}")
        return IntakeOutcome(
            status_code=e.status_code,
            response=OrderSubmissionResponse(success=False, error=e.message),
        )

    return await service.submit(order)
