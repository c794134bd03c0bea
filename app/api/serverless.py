"""
app/api/serverless.py

Purpose: Serverless entry point for pickup orders

- Accepts API Gateway / Vercel style events
- Normalizes method and body (string, base64 or already decoded)
- Runs the same intake pipeline as POST /api/orders/pickup
- Returns {statusCode, headers, body} with a JSON body
"""

import asyncio
import base64
import binascii
import json
from typing import Any, Dict, Optional

from app.core.config import Settings, settings
from app.core.exceptions import ClientInputError, LaundryProError, MethodNotAllowedError, PayloadTooLargeError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse
from app.services.order_service import OrderIntakeService, ServiceFactory, handle_pickup_order
from utils.constants import GENERIC_ERROR_MESSAGE

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def _response(status_code: int, content: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(content),
    }


def _error_response(exc: LaundryProError) -> Dict[str, Any]:
    return _response(exc.status_code, ErrorResponse(error=exc.message, code=exc.code).to_content())


def event_method(event: Dict[str, Any]) -> str:
    """HTTP method from a v1 (httpMethod) or v2 (requestContext.http.method) event."""
    method = event.get("httpMethod") or event.get("method")
    if not method:
        http = (event.get("requestContext") or {}).get("http") or {}
        method = http.get("method") or ""
    return str(method).upper()


def event_body(event: Dict[str, Any], limit: int) -> Any:
    """
    Body as the intake pipeline expects it: decoded text or an object.
    A missing body is treated as an empty JSON object.
    """
    body = event.get("body")
    if body is None:
        return "{}"

    if isinstance(body, str):
        if event.get("isBase64Encoded"):
            try:
                body = base64.b64decode(body, validate=True)
            except (binascii.Error, ValueError):
                raise ClientInputError("Invalid JSON")
        if len(body) > limit:
            raise PayloadTooLargeError(f"Request body exceeds {limit} bytes")

    return body


async def handle_event(
    event: Dict[str, Any],
    service_factory: Optional[ServiceFactory] = None,
    config: Optional[Settings] = None,
) -> Dict[str, Any]:
    config = config or settings
    if service_factory is None:
        service_factory = lambda: OrderIntakeService.from_settings(config)

    try:
        if event_method(event) != "POST":
            raise MethodNotAllowedError()

        body = event_body(event, config.JSON_BODY_LIMIT)
        outcome = await handle_pickup_order(body, service_factory)
        return _response(outcome.status_code, outcome.response.to_content())

    except LaundryProError as e:
        return _error_response(e)

    except Exception as e:
        logger.error(f"Unhandled exception in serverless handler: {e}", exc_info=True)
        return _response(500, ErrorResponse(error=GENERIC_ERROR_MESSAGE, code="INTERNAL_ERROR").to_content())


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Synchronous entry point invoked by the serverless runtime."""
    return asyncio.run(handle_event(event))
