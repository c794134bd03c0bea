"""
app/services/whatsapp_service.py

Purpose: Messaging gateway

- Validates destination and body before any network call
- Sends through the configured provider client with a bounded timeout
- Retries once with a "+" prefixed destination on allowed-list rejections
- Translates provider faults into readable MessagingResult errors

Never raises: every outcome is a MessagingResult.
"""

import asyncio
import json
import httpx
from typing import List, Optional

from app.core.exceptions import ProviderError
from app.core.logging import get_logger
from app.schemas.order import MessagingResult
from app.services.messaging_providers import MessagingProviderClient
from utils.constants import (
    MAX_MESSAGE_LENGTH,
    META_AUTH_CODES,
    META_INVALID_REQUEST_CODES,
    META_NOT_ALLOWED_CODES,
    NOT_ALLOWED_MARKER,
    TWILIO_AUTH_CODES,
    TWILIO_INVALID_REQUEST_CODES,
    TWILIO_NOT_ALLOWED_CODES,
)
from utils.validation_utils import canonicalize_destination, mask_phone_number

logger = get_logger(__name__)


def is_not_allowed_error(error: ProviderError) -> bool:
    """Recipient is not on the provider's allowed recipient list."""
    return (
        error.provider_code in META_NOT_ALLOWED_CODES
        or error.provider_code in TWILIO_NOT_ALLOWED_CODES
        or NOT_ALLOWED_MARKER in (error.message or "").lower()
    )


def is_auth_error(error: ProviderError) -> bool:
    return (
        error.http_status == 401
        or error.provider_code in META_AUTH_CODES
        or error.provider_code in TWILIO_AUTH_CODES
    )


def is_invalid_request_error(error: ProviderError) -> bool:
    return (
        error.http_status == 400
        or error.provider_code in META_INVALID_REQUEST_CODES
        or error.provider_code in TWILIO_INVALID_REQUEST_CODES
    )


def not_allowed_message(digits: str, error: ProviderError, retried: bool = False) -> str:
    """
    Single actionable message for an allowed-list rejection. When the
    "+" prefixed form was also tried, both forms are listed.
    """
    details = json.dumps(error.details) if error.details else error.message
    if retried:
        attempted = (
            f"Number sent to the API: {digits}\n"
            f"Number with + prefix: +{digits}\n\n"
            "Both forms were rejected."
        )
    else:
        attempted = (
            f"Number sent to the API: {digits}\n\n"
            "The provider rejected this number."
        )
    return (
        "Recipient number not in allowed list.\n\n"
        f"{attempted} Add the number to the provider's allowed recipient list:\n"
        "1. Open WhatsApp > API Setup in Meta Business Suite (or join the Twilio sandbox from this number)\n"
        f"2. Add the number as {digits} (digits only, without + prefix)\n"
        "3. Wait a few minutes after adding before trying again\n\n"
        f"Local formats such as 0XXXXXXXXX are converted to {digits} automatically.\n\n"
        f"Full API error: {details}"
    )


def describe_provider_error(error: ProviderError, digits: str, retried: bool = False) -> str:
    """Maps a provider rejection to a human-readable explanation."""
    if is_not_allowed_error(error):
        return not_allowed_message(digits, error, retried)
    if is_auth_error(error):
        return (
            "Messaging provider authentication failed. "
            "Check the access token or account credentials."
        )
    if is_invalid_request_error(error):
        return f"Messaging provider rejected the request as invalid: {error.message}"
    return error.message


class MessagingGateway:
    """Delivers WhatsApp text messages through one provider client"""

    def __init__(self, client: MessagingProviderClient, timeout: float = 30.0):
        self.client = client
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return self.client.name

    async def _attempt(self, to: str, body: str) -> Optional[str]:
        return await asyncio.wait_for(
            self.client.send(self.client.sender, to, body),
            timeout=self.timeout,
        )

    async def _deliver(self, digits: str, body: str, attempted: List[str]) -> Optional[str]:
        attempted.append(digits)
        try:
            return await self._attempt(digits, body)
        except ProviderError as first_error:
            if not (self.client.retry_with_plus_prefix and is_not_allowed_error(first_error)):
                raise
            logger.warning(
                f"Recipient {mask_phone_number(digits)} not in allowed list, retrying with + prefix"
            )

        attempted.append(f"+{digits}")
        return await self._attempt(f"+{digits}", body)

    async def send(self, destination: Optional[str], body: Optional[str]) -> MessagingResult:
        """
        Sends a WhatsApp message

        Args:
            destination: Recipient (digits, +digits or whatsapp:+digits)
            body: Message text, at most 4096 characters

        Returns:
            MessagingResult with message_id on success, error on failure
        """
        if not destination or not destination.strip():
            return MessagingResult.failed("Destination phone number is required")

        if not body or not body.strip():
            return MessagingResult.failed("Message body is required")

        if len(body) > MAX_MESSAGE_LENGTH:
            return MessagingResult.failed(
                f"Message is too long ({len(body)} characters, maximum is {MAX_MESSAGE_LENGTH})"
            )

        digits = canonicalize_destination(destination)
        if digits is None:
            return MessagingResult.failed(
                f"Invalid phone number format: {destination}. "
                "Expected 10-15 digits in international format (e.g., 250792875310)."
            )

        logger.info(f"📤 Sending WhatsApp message to {mask_phone_number(digits)} via {self.provider_name}")

        attempted: List[str] = []
        try:
            message_id = await self._deliver(digits, body, attempted)

        except ProviderError as e:
            logger.error(
                f"❌ {self.provider_name} rejected message: "
                f"status={e.http_status} code={e.provider_code} error={e.message}"
            )
            return MessagingResult.failed(describe_provider_error(e, digits, retried=len(attempted) > 1))

        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.error(f"{self.provider_name} API timeout after {self.timeout:g}s")
            return MessagingResult.failed(
                f"Messaging provider timed out after {self.timeout:g} seconds"
            )

        except httpx.HTTPError as e:
            logger.error(f"Could not reach {self.provider_name}: {e}")
            return MessagingResult.failed(f"Could not reach messaging provider: {e}")

        except Exception as e:
            logger.error(f"Error sending WhatsApp message: {e}", exc_info=True)
            return MessagingResult.failed(
                str(e) or "Unknown error occurred while sending WhatsApp message"
            )

        if not message_id:
            logger.error(f"{self.provider_name} response had no message id")
            return MessagingResult.failed("invalid response (missing message id)")

        logger.info(f"✅ Message sent: id={message_id}")
        return MessagingResult.ok(message_id)
