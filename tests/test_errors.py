from fastapi.testclient import TestClient
from app.main import app
from app.core.exceptions import ClientInputError, ConfigurationError

client = TestClient(app)


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert "error" in data
    assert data["code"] == "HTTP_ERROR"


def test_validation_error_structure():
    # Temporary route with declared body to exercise request validation
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        quantity: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "Shirt", "quantity": "many"})
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["success"] is False
    assert len(data["details"]) > 0


def test_client_input_error():
    @app.get("/test-client-error")
    def trigger_client_error():
        raise ClientInputError(message="Pickup address is required")

    response = client.get("/test-client-error")
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "INVALID_REQUEST"
    assert data["error"] == "Pickup address is required"


def test_configuration_error_names_setting():
    @app.get("/test-config-error")
    def trigger_config_error():
        raise ConfigurationError(message="DRY_CLEANER_WHATSAPP_NUMBER environment variable is not set")

    response = client.get("/test-config-error")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "CONFIGURATION_ERROR"
    assert "DRY_CLEANER_WHATSAPP_NUMBER" in data["error"]


def test_unhandled_exception_is_generic():
    @app.get("/test-unhandled")
    def trigger_unhandled():
        raise RuntimeError("secret internals")

    safe_client = TestClient(app, raise_server_exceptions=False)
    response = safe_client.get("/test-unhandled")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert "secret internals" not in response.text
