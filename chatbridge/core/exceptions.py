"""
Custom Exceptions - Application-specific error classes.

Each exception carries an HTTP status code and an error code so the API
layer can render consistent error responses without leaking stack traces.

Transport and extraction failures in the OpenWebUI client are not raised;
they are returned as error-shaped results. Only configuration problems
and backend failures surface as exceptions.
"""
from typing import Optional


class ChatbridgeException(Exception):
    """
    Base exception for all application errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(ChatbridgeException):
    """Raised when a required configuration value is missing or invalid."""
    status_code = 500
    error_code = "configuration_error"

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message, details=f"setting={setting}" if setting else None)
        self.setting = setting


class ValidationError(ChatbridgeException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class DatabaseError(ChatbridgeException):
    """Raised when database operations fail."""
    status_code = 503
    error_code = "database_error"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)


class UpstreamUnavailableError(ChatbridgeException):
    """Raised when the OpenWebUI client cannot be used at all."""
    status_code = 503
    error_code = "upstream_unavailable"

    def __init__(self, message: str = "Chat service unavailable"):
        super().__init__(message)
