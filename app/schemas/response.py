from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    code: str
    order_id: Optional[str] = Field(default=None, alias="orderId")
    details: Optional[Any] = None

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderSubmissionResponse(BaseModel):
    """
    Body returned by the pickup order endpoint.
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    order_id: Optional[str] = Field(default=None, alias="orderId")
    message_id: Optional[str] = Field(default=None, alias="messageId")
    message: Optional[str] = None
    error: Optional[str] = None

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ContactCard(BaseModel):
    """
    Public contact details rendered by the marketing site.
    """
    model_config = ConfigDict(populate_by_name=True)

    business_name: str = Field(..., alias="businessName")
    phone_number: str = Field(..., alias="phoneNumber")
    whatsapp_link: str = Field(..., alias="whatsappLink")
    tel_link: str = Field(..., alias="telLink")
