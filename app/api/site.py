"""
app/api/site.py

Purpose: Small endpoints used by the marketing site

- Ping
- Public WhatsApp contact card (click-to-chat, display number, tel link)
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.core.config import Settings, get_settings
from app.schemas.response import ContactCard
from utils.constants import DEFAULT_INQUIRY_MESSAGE
from utils.whatsapp_utils import create_click_to_chat_link, create_tel_link, format_display_number

router = APIRouter()


@router.get("/ping")
async def ping(config: Settings = Depends(get_settings)):
    return {"message": config.PING_MESSAGE}


@router.get("/contact")
async def contact_card(
    message: Optional[str] = Query(default=None, max_length=1000),
    config: Settings = Depends(get_settings),
):
    """
    Contact details for the "Chat on WhatsApp" and "Call us" buttons.
    `message` overrides the pre-filled inquiry text.
    """
    card = ContactCard(
        business_name=config.BUSINESS_NAME,
        phone_number=format_display_number(config.PUBLIC_CONTACT_NUMBER),
        whatsapp_link=create_click_to_chat_link(
            config.PUBLIC_CONTACT_NUMBER,
            message or DEFAULT_INQUIRY_MESSAGE,
        ),
        tel_link=create_tel_link(config.PUBLIC_CONTACT_NUMBER),
    )
    return card.model_dump(by_alias=True)
