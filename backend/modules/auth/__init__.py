"""
Authentication module.

Handles JWT validation and OAuth account linking.

Public API:
- IAuthService: Interface for token validation
- IAccountLinker: Interface for detecting and merging duplicate accounts
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService, IAccountLinker
from .models import (
    AccountLinkingResult,
    AuthAccount,
    ConflictType,
    JWTPayload,
    LinkAccountsResult,
    LinkingTokenData,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    AccountLinkingDisabledError,
    InvalidLinkingTokenError,
    LinkingNotRequiredError,
    UserMismatchError,
    AccountLinkFailedError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IAccountLinker",
    # Models
    "AccountLinkingResult",
    "AuthAccount",
    "ConflictType",
    "JWTPayload",
    "LinkAccountsResult",
    "LinkingTokenData",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "AccountLinkingDisabledError",
    "InvalidLinkingTokenError",
    "LinkingNotRequiredError",
    "UserMismatchError",
    "AccountLinkFailedError",
]
