"""
app/api/orders.py

Purpose: Pickup order endpoint

- Receives the website's pickup form as JSON
- Enforces the body size limit
- Delegates to the intake pipeline and returns its outcome
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.exceptions import PayloadTooLargeError
from app.core.logging import get_logger
from app.services.order_service import ServiceFactory, get_order_intake_factory, handle_pickup_order

logger = get_logger(__name__)
router = APIRouter()


async def read_limited_body(request: Request, limit: int) -> bytes:
    """
    Reads the request body, refusing anything over `limit` bytes.
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise PayloadTooLargeError(f"Request body exceeds {limit} bytes")

    body = await request.body()
    if len(body) > limit:
        raise PayloadTooLargeError(f"Request body exceeds {limit} bytes")
    return body


@router.post("/orders/pickup")
async def submit_pickup_order(
    request: Request,
    service_factory: ServiceFactory = Depends(get_order_intake_factory),
    config: Settings = Depends(get_settings),
):
    """
    Pickup order submission

    Body:
        {customerName, pickupAddress, pickupDateTime?, items: [{name, quantity}],
         customerNotes?, customerPhone?}

    Returns:
        200 {success, orderId, messageId, message}
        400/500 {success: false, orderId?, error}
    """
    body = await read_limited_body(request, config.JSON_BODY_LIMIT)

    outcome = await handle_pickup_order(body, service_factory)

    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.response.to_content(),
    )
