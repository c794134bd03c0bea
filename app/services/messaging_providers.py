"""
app/services/messaging_providers.py

Purpose: WhatsApp provider clients

- Twilio WhatsApp via the Twilio REST API
- Meta WhatsApp Cloud API (Graph API)
- One send operation per client; provider rejections raise ProviderError
- Factory selects the client from settings
"""

import httpx
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from app.core.config import Settings, missing_provider_settings
from app.core.exceptions import ConfigurationError, ProviderError
from app.core.logging import get_logger

logger = get_logger(__name__)


class MessagingProviderClient(ABC):
    """
    A provider that can deliver one WhatsApp text message.
    """

    name: str = "provider"

    # Whether a "not in allowed list" rejection is worth retrying with "+<digits>"
    retry_with_plus_prefix: bool = False

    @property
    @abstractmethod
    def sender(self) -> str:
        """Sender identifier configured for this provider."""

    @abstractmethod
    async def send(self, sender: str, to: str, body: str) -> Optional[str]:
        """
        Sends a text message.

        Args:
            sender: Sender identifier (number or phone number id)
            to: Destination digits, optionally "+" prefixed
            body: Message text

        Returns:
            Provider message id, or None if the provider omitted it

        Raises:
            ProviderError: The provider rejected the message
        """


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class TwilioWhatsAppClient(MessagingProviderClient):
    """Sends WhatsApp messages via Twilio"""

    name = "twilio"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        whatsapp_number: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.whatsapp_number = whatsapp_number.strip()  # whatsapp:+14155238886
        self.base_url = f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}"
        self.timeout = timeout
        self.transport = transport

    @property
    def sender(self) -> str:
        if self.whatsapp_number.startswith("whatsapp:"):
            return self.whatsapp_number
        return f"whatsapp:{self.whatsapp_number}"

    async def send(self, sender: str, to: str, body: str) -> Optional[str]:
        to = to if to.startswith("+") else f"+{to}"

        data = {
            "From": sender,
            "To": f"whatsapp:{to}",
            "Body": body,
        }

        logger.debug(f"📤 Twilio send request from {sender}")

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/Messages.json",
                data=data,
                auth=(self.account_sid, self.auth_token),
            )

        result = _json_or_empty(response)

        if response.status_code not in (200, 201):
            raise ProviderError(
                result.get("message") or f"Twilio API error: {response.status_code}",
                provider_code=result.get("code"),
                http_status=response.status_code,
                details=result or None,
            )

        return result.get("sid")


class MetaWhatsAppClient(MessagingProviderClient):
    """Sends WhatsApp messages via the WhatsApp Cloud API"""

    name = "meta"
    retry_with_plus_prefix = True

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        api_version: str = "v18.0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.phone_number_id = phone_number_id
        self.base_url = f"https://graph.facebook.com/{api_version}/{phone_number_id}/messages"
        self.timeout = timeout
        self.transport = transport

    @property
    def sender(self) -> str:
        return self.phone_number_id

    async def send(self, sender: str, to: str, body: str) -> Optional[str]:
        # The sending number is part of the URL; sender is informational here
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to,
            "type": "text",
            "text": {
                "preview_url": False,
                "body": body,
            },
        }

        logger.debug(f"📤 Meta send request via phone number id {self.phone_number_id}")

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            response = await client.post(
                self.base_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.access_token}"},
            )

        data = _json_or_empty(response)

        if response.is_error:
            error = data.get("error") if isinstance(data.get("error"), dict) else {}
            raise ProviderError(
                error.get("message") or f"HTTP {response.status_code}: {response.reason_phrase}",
                provider_code=error.get("code"),
                http_status=response.status_code,
                details=error or None,
            )

        messages = data.get("messages") or []
        if messages and isinstance(messages[0], dict):
            return messages[0].get("id")
        return None


def build_provider_client(
    config: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> MessagingProviderClient:
    """
    Creates the provider client selected by MESSAGING_PROVIDER.

    Raises:
        ConfigurationError: Required credentials are missing
    """
    missing = missing_provider_settings(config)
    if missing:
        raise ConfigurationError(
            f"Missing required {config.MESSAGING_PROVIDER} environment variables: {', '.join(missing)}",
            details={"missing": missing},
        )

    if config.MESSAGING_PROVIDER == "meta":
        return MetaWhatsAppClient(
            access_token=config.WHATSAPP_ACCESS_TOKEN,
            phone_number_id=config.WHATSAPP_PHONE_NUMBER_ID,
            api_version=config.WHATSAPP_API_VERSION,
            timeout=config.MESSAGING_TIMEOUT_SECONDS,
            transport=transport,
        )

    return TwilioWhatsAppClient(
        account_sid=config.TWILIO_ACCOUNT_SID,
        auth_token=config.TWILIO_AUTH_TOKEN,
        whatsapp_number=config.TWILIO_WHATSAPP_NUMBER,
        timeout=config.MESSAGING_TIMEOUT_SECONDS,
        transport=transport,
    )
