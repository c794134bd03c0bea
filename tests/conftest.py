import asyncio

import pytest

from app.core.config import Settings
from app.services.messaging_providers import MessagingProviderClient


class FakeProviderClient(MessagingProviderClient):
    """
    In-memory provider. Each send consumes the next scripted outcome:
    a message id (str or None), an exception to raise, or a float meaning
    "sleep this many seconds".
    """

    name = "fake"

    def __init__(self, outcomes=None, retry_with_plus_prefix=False):
        self.outcomes = list(outcomes or ["SM-default"])
        self.retry_with_plus_prefix = retry_with_plus_prefix
        self.calls = []

    @property
    def sender(self) -> str:
        return "whatsapp:+14155238886"

    async def send(self, sender, to, body):
        self.calls.append({"sender": sender, "to": to, "body": body})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, float):
            await asyncio.sleep(outcome)
            return "SM-late"
        return outcome


@pytest.fixture
def fake_client_factory():
    return FakeProviderClient


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        DRY_CLEANER_WHATSAPP_NUMBER="0792875310",
        MESSAGING_PROVIDER="twilio",
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="secret-token",
        TWILIO_WHATSAPP_NUMBER="whatsapp:+14155238886",
    )


@pytest.fixture
def order_payload():
    return {
        "customerName": "Amahoro",
        "pickupAddress": "KG 11 Ave, Kigali",
        "pickupDateTime": "2024-05-01T10:00:00Z",
        "items": [{"name": "Shirt", "quantity": 2}],
    }
