from typing import Optional, Any


class LaundryProError(Exception):
    """
    Base exception for the order intake service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ClientInputError(LaundryProError):
    """
    Raised when the request body is malformed or fails validation.
    Messages are safe to show to the client.
    """
    def __init__(self, message: str = "Invalid request", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_REQUEST", status_code=400, details=details)


class MethodNotAllowedError(LaundryProError):
    """
    Raised when an endpoint is called with an unsupported HTTP method.
    """
    def __init__(self, message: str = "Method not allowed", details: Optional[Any] = None):
        super().__init__(message, code="METHOD_NOT_ALLOWED", status_code=405, details=details)


class ConfigurationError(LaundryProError):
    """
    Raised when required environment configuration is missing.
    The message names the setting, never its value.
    """
    def __init__(self, message: str = "Server misconfiguration", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)


class ProviderError(LaundryProError):
    """
    Raised by a messaging provider client when the provider rejects a send.
    The gateway converts it into a MessagingResult; it never reaches HTTP.
    """
    def __init__(
        self,
        message: str = "Messaging provider error",
        provider_code: Optional[Any] = None,
        http_status: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        self.provider_code = provider_code
        self.http_status = http_status
        super().__init__(message, code="PROVIDER_ERROR", status_code=502, details=details)


class PayloadTooLargeError(LaundryProError):
    """
    Raised when a request body exceeds the configured size limit.
    """
    def __init__(self, message: str = "Request body too large", details: Optional[Any] = None):
        super().__init__(message, code="PAYLOAD_TOO_LARGE", status_code=413, details=details)
