import base64
import json

import pytest

from app.api.serverless import handle_event
from app.services.order_service import OrderIntakeService
from app.services.whatsapp_service import MessagingGateway


@pytest.fixture
def service_factory(fake_client_factory, test_settings):
    provider = fake_client_factory(["SM-lambda"])
    service = OrderIntakeService.from_settings(test_settings, gateway=MessagingGateway(provider))
    return lambda: service


@pytest.mark.asyncio
async def test_string_body_is_parsed(service_factory, order_payload, test_settings):
    event = {"httpMethod": "POST", "body": json.dumps(order_payload)}

    result = await handle_event(event, service_factory, test_settings)

    assert result["statusCode"] == 200
    assert result["headers"]["Content-Type"] == "application/json"
    body = json.loads(result["body"])
    assert body["success"] is True
    assert body["messageId"] == "SM-lambda"


@pytest.mark.asyncio
async def test_decoded_body_is_accepted(service_factory, order_payload, test_settings):
    event = {"requestContext": {"http": {"method": "post"}}, "body": order_payload}

    result = await handle_event(event, service_factory, test_settings)

    assert result["statusCode"] == 200


@pytest.mark.asyncio
async def test_base64_body_is_decoded(service_factory, order_payload, test_settings):
    encoded = base64.b64encode(json.dumps(order_payload).encode()).decode()
    event = {"httpMethod": "POST", "body": encoded, "isBase64Encoded": True}

    result = await handle_event(event, service_factory, test_settings)

    assert result["statusCode"] == 200


@pytest.mark.asyncio
async def test_non_post_is_405(service_factory, test_settings):
    result = await handle_event({"httpMethod": "GET"}, service_factory, test_settings)

    assert result["statusCode"] == 405
    assert json.loads(result["body"])["success"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("event", [{"requestContext": None}, {"requestContext": {"http": None}}, {}])
async def test_event_without_method_is_405(service_factory, test_settings, event):
    result = await handle_event(event, service_factory, test_settings)

    assert result["statusCode"] == 405
    assert json.loads(result["body"])["success"] is False


@pytest.mark.asyncio
async def test_invalid_json_is_400(service_factory, test_settings):
    result = await handle_event({"httpMethod": "POST", "body": "{oops"}, service_factory, test_settings)

    assert result["statusCode"] == 400
    assert json.loads(result["body"])["error"] == "Invalid JSON"


@pytest.mark.asyncio
async def test_missing_body_fails_validation(service_factory, test_settings):
    result = await handle_event({"httpMethod": "POST"}, service_factory, test_settings)

    assert result["statusCode"] == 400
    assert "customerName" in json.loads(result["body"])["error"]


@pytest.mark.asyncio
async def test_unexpected_fault_is_generic_500(order_payload, test_settings):
    def broken_factory():
        raise RuntimeError("database password is hunter2")

    result = await handle_event(
        {"httpMethod": "POST", "body": json.dumps(order_payload)},
        broken_factory,
        test_settings,
    )

    assert result["statusCode"] == 500
    assert "hunter2" not in result["body"]
