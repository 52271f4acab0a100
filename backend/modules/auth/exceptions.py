"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    ServiceUnavailableError,
    ValidationError,
)


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class AccountLinkingDisabledError(ServiceUnavailableError):
    """Raised when the service-role key needed for linking is not configured."""

    def __init__(self):
        super().__init__(
            "Account linking is not available",
            code="ACCOUNT_LINKING_DISABLED",
        )


class InvalidLinkingTokenError(ValidationError):
    """Raised when a linking token is malformed, tampered or expired."""

    def __init__(self):
        super().__init__(
            "Invalid or expired linking token",
            code="INVALID_LINKING_TOKEN",
        )


class LinkingNotRequiredError(ValidationError):
    """Raised when a link is requested but no email account is waiting for it."""

    def __init__(self):
        super().__init__(
            "Account linking not required or existing user not found",
            code="LINKING_NOT_REQUIRED",
        )


class UserMismatchError(AuthorizationError):
    """Raised when the signed-in user is not the OAuth user being linked."""

    def __init__(self, message: str = "User ID mismatch"):
        super().__init__(message, code="USER_MISMATCH")


class AccountLinkFailedError(ExternalServiceError):
    """Raised when Supabase refuses the account merge."""

    def __init__(self, reason: str):
        super().__init__(reason, service="supabase", code="ACCOUNT_LINK_FAILED")
