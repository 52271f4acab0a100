"""
Base exception classes for the SaaS Kit billing backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application: every
exception carries the HTTP status the API layer should answer with.
"""

from typing import Optional, Any


class SaaSKitError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging and diagnostics."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_response(self) -> dict[str, Any]:
        """Body returned to API clients."""
        return {"error": self.message}


class NotFoundError(SaaSKitError):
    """Resource not found."""

    status_code = 404


class ValidationError(SaaSKitError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(SaaSKitError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(SaaSKitError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class ServiceUnavailableError(SaaSKitError):
    """A feature is disabled in the current deployment."""

    status_code = 503


class ConfigurationError(SaaSKitError):
    """Required configuration is missing or an upstream account is not set up."""

    status_code = 500


class ExternalServiceError(SaaSKitError):
    """Error communicating with an external service."""

    status_code = 500

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
