"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (provider credentials, destination number, CORS)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Built once at startup and handed to the services that need it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Business
    BUSINESS_NAME: str = Field(
        default="LaundryPro",
        description="Business name used in customer-facing messages"
    )
    DRY_CLEANER_WHATSAPP_NUMBER: Optional[str] = Field(
        default=None,
        description="Operator WhatsApp number that receives every new order"
    )
    DEFAULT_COUNTRY_CODE: str = Field(
        default="250",
        description="Country code applied to local-format phone numbers"
    )
    PUBLIC_CONTACT_NUMBER: str = Field(
        default="250784123456",
        description="Public WhatsApp contact number shown on the website"
    )

    # Messaging
    MESSAGING_PROVIDER: Literal["twilio", "meta"] = Field(
        default="twilio",
        description="Which WhatsApp integration delivers messages"
    )
    MESSAGING_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Upper bound for a single outbound send"
    )

    # Twilio
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_WHATSAPP_NUMBER: Optional[str] = Field(
        default=None,
        description="Sender, e.g. whatsapp:+14155238886"
    )

    # WhatsApp Cloud API (Meta)
    WHATSAPP_ACCESS_TOKEN: Optional[str] = None
    WHATSAPP_PHONE_NUMBER_ID: Optional[str] = None
    WHATSAPP_API_VERSION: str = "v18.0"

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api",
        description="API route prefix"
    )
    PING_MESSAGE: str = "ping"
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:8080,http://127.0.0.1:8080",
        description="Comma separated CORS allow-list"
    )
    JSON_BODY_LIMIT: int = Field(
        default=1024 * 1024,
        description="Maximum accepted request body size in bytes"
    )

    @field_validator("DEFAULT_COUNTRY_CODE")
    @classmethod
    def validate_country_code(cls, v: str) -> str:
        """Country code is dialled digits only (no leading +)."""
        v = v.strip().lstrip("+")
        if not (v.isascii() and v.isdigit()) or not 1 <= len(v) <= 3:
            raise ValueError("DEFAULT_COUNTRY_CODE must be 1-3 digits")
        return v

    @field_validator("MESSAGING_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("MESSAGING_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings


def missing_provider_settings(config: Settings) -> List[str]:
    """
    Lists the environment variables the selected messaging provider
    still needs. Empty list means the provider is fully configured.
    """
    if config.MESSAGING_PROVIDER == "meta":
        required = {
            "WHATSAPP_ACCESS_TOKEN": config.WHATSAPP_ACCESS_TOKEN,
            "WHATSAPP_PHONE_NUMBER_ID": config.WHATSAPP_PHONE_NUMBER_ID,
        }
    else:
        required = {
            "TWILIO_ACCOUNT_SID": config.TWILIO_ACCOUNT_SID,
            "TWILIO_AUTH_TOKEN": config.TWILIO_AUTH_TOKEN,
            "TWILIO_WHATSAPP_NUMBER": config.TWILIO_WHATSAPP_NUMBER,
        }
    return [name for name, value in required.items() if not (value and value.strip())]


def validate_settings(config: Optional[Settings] = None) -> List[str]:
    """
    Collects configuration problems.

    Returns the list of problems found. In production an incomplete
    configuration raises ValueError so the process refuses to start.
    """
    config = config or settings
    errors = []

    if not (config.DRY_CLEANER_WHATSAPP_NUMBER and config.DRY_CLEANER_WHATSAPP_NUMBER.strip()):
        errors.append("DRY_CLEANER_WHATSAPP_NUMBER is required")

    missing = missing_provider_settings(config)
    if missing:
        errors.append(
            f"Missing required {config.MESSAGING_PROVIDER} environment variables: {', '.join(missing)}"
        )

    if errors and config.is_production:
        raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    return errors
