import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.core.exceptions import ProviderError
from app.main import app
from app.services.order_service import OrderIntakeService, get_order_intake_factory, generate_order_id
from app.services.whatsapp_service import MessagingGateway
from utils.constants import GENERIC_ERROR_MESSAGE

client = TestClient(app)

URL = "/api/orders/pickup"


@pytest.fixture
def use_provider(fake_client_factory, test_settings):
    """Routes the endpoint through a fake provider scripted by the test."""
    def install(outcomes):
        provider = fake_client_factory(outcomes)
        service = OrderIntakeService.from_settings(test_settings, gateway=MessagingGateway(provider))
        app.dependency_overrides[get_order_intake_factory] = lambda: (lambda: service)
        return provider

    yield install
    app.dependency_overrides.clear()


def test_order_without_customer_phone_succeeds(use_provider, order_payload):
    provider = use_provider(["SM-dry-cleaner"])

    response = client.post(URL, json=order_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["orderId"].startswith("ORD-")
    assert data["messageId"] == "SM-dry-cleaner"
    assert data["message"] == "Order submitted successfully"
    assert len(provider.calls) == 1
    assert provider.calls[0]["to"] == "250792875310"
    assert "2x Shirt" in provider.calls[0]["body"]


def test_empty_items_rejected(use_provider, order_payload):
    provider = use_provider(["SM1"])
    order_payload["items"] = []

    response = client.post(URL, json=order_payload)

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert "At least one item" in data["error"]
    assert provider.calls == []


def test_field_errors_are_path_qualified(use_provider, order_payload):
    use_provider(["SM1"])
    order_payload["items"] = [{"name": "Shirt", "quantity": 0}]
    del order_payload["customerName"]

    response = client.post(URL, json=order_payload)

    assert response.status_code == 400
    error = response.json()["error"]
    assert "customerName: Customer name is required" in error
    assert "items.0.quantity: Quantity must be a positive integer" in error


def test_whitespace_only_fields_rejected(use_provider, order_payload):
    use_provider(["SM1"])
    order_payload["pickupAddress"] = "   "

    response = client.post(URL, json=order_payload)

    assert response.status_code == 400
    assert "Pickup address is required" in response.json()["error"]


def test_numeric_string_quantity_is_coerced(use_provider, order_payload):
    provider = use_provider(["SM1"])
    order_payload["items"] = [{"name": "Suit", "quantity": "4"}]

    response = client.post(URL, json=order_payload)

    assert response.status_code == 200
    assert "4x Suit" in provider.calls[0]["body"]


@pytest.mark.parametrize("quantity", ["²", "٣", "3.5"])
def test_non_ascii_or_fractional_string_quantity_rejected(use_provider, order_payload, quantity):
    provider = use_provider(["SM1"])
    order_payload["items"] = [{"name": "Suit", "quantity": quantity}]

    response = client.post(URL, json=order_payload)

    assert response.status_code == 400
    assert "items.0.quantity: Quantity must be a positive integer" in response.json()["error"]
    assert provider.calls == []


def test_malformed_json_rejected(use_provider):
    use_provider(["SM1"])

    response = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON"


def test_non_object_body_rejected(use_provider):
    use_provider(["SM1"])

    response = client.post(URL, json=[{"customerName": "Amahoro"}])

    assert response.status_code == 400
    assert response.json()["error"] == "Request body must be a JSON object"


def test_non_post_method_rejected():
    response = client.get(URL)

    assert response.status_code == 405
    data = response.json()
    assert data["success"] is False
    assert "error" in data


def test_oversized_body_rejected(use_provider, order_payload, test_settings):
    use_provider(["SM1"])
    app.dependency_overrides[get_settings] = lambda: test_settings.model_copy(update={"JSON_BODY_LIMIT": 64})

    response = client.post(URL, json=order_payload)

    assert response.status_code == 413
    assert response.json()["code"] == "PAYLOAD_TOO_LARGE"


def test_dry_cleaner_failure_returns_500_with_order_id(use_provider, order_payload):
    use_provider([ProviderError("Twilio internal failure XYZ-999", provider_code=30001, http_status=500)])

    response = client.post(URL, json=order_payload)

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["orderId"].startswith("ORD-")
    assert data["orderId"] in data["error"]
    assert "contact support" in data["error"]
    assert "XYZ-999" not in response.text


def test_unexpected_pipeline_fault_is_generic_500_with_order_id(use_provider, order_payload, monkeypatch):
    provider = use_provider(["SM1"])

    def explode(order, received_at=None):
        raise RuntimeError("formatter exploded at /srv/secret")

    monkeypatch.setattr("app.services.order_service.format_pickup_order_message", explode)

    response = client.post(URL, json=order_payload)

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["orderId"].startswith("ORD-")
    assert data["error"] == GENERIC_ERROR_MESSAGE
    assert "exploded" not in response.text
    assert "/srv/secret" not in response.text
    assert provider.calls == []


def test_customer_confirmation_failure_keeps_success(use_provider, order_payload):
    provider = use_provider(["SM-dry-cleaner", ProviderError("Customer unreachable", http_status=500)])
    order_payload["customerPhone"] = "0788123456"

    response = client.post(URL, json=order_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["messageId"] == "SM-dry-cleaner"
    assert [call["to"] for call in provider.calls] == ["250792875310", "250788123456"]
    assert "Amahoro" in provider.calls[1]["body"]


def test_invalid_customer_phone_skips_confirmation(use_provider, order_payload):
    provider = use_provider(["SM-dry-cleaner"])
    order_payload["customerPhone"] = "call me"

    response = client.post(URL, json=order_payload)

    assert response.status_code == 200
    assert len(provider.calls) == 1


def test_missing_dry_cleaner_number_is_configuration_error(order_payload):
    config = Settings(
        _env_file=None,
        DRY_CLEANER_WHATSAPP_NUMBER=None,
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="secret-token",
        TWILIO_WHATSAPP_NUMBER="whatsapp:+14155238886",
    )
    app.dependency_overrides[get_settings] = lambda: config
    try:
        response = client.post(URL, json=order_payload)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert "DRY_CLEANER_WHATSAPP_NUMBER" in data["error"]


def test_missing_provider_credentials_are_listed(order_payload):
    config = Settings(
        _env_file=None,
        DRY_CLEANER_WHATSAPP_NUMBER="0792875310",
        MESSAGING_PROVIDER="meta",
        WHATSAPP_ACCESS_TOKEN=None,
        WHATSAPP_PHONE_NUMBER_ID=None,
    )
    app.dependency_overrides[get_settings] = lambda: config
    try:
        response = client.post(URL, json=order_payload)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    error = response.json()["error"]
    assert "WHATSAPP_ACCESS_TOKEN" in error
    assert "WHATSAPP_PHONE_NUMBER_ID" in error


def test_order_ids_are_unique_and_uppercase():
    ids = {generate_order_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(order_id == order_id.upper() for order_id in ids)
    assert all(order_id.startswith("ORD-") for order_id in ids)
