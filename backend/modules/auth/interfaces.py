"""
Authentication module interfaces.

Other modules should depend on IAuthService and IAccountLinker, not the
concrete implementations. This enables testing with mocks.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser
from .models import (
    AccountLinkingResult,
    AuthAccount,
    LinkAccountsResult,
    LinkingTokenData,
)


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with user ID and basic info

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...


@runtime_checkable
class IAccountLinker(Protocol):
    """
    Detects and resolves email collisions between OAuth and password accounts.

    Lookups fail open: an error while enumerating accounts is reported as
    "no linking needed" so normal signup is never blocked.
    """

    def is_account_linking_enabled(self) -> bool:
        """True only when the service-role key is configured."""
        ...

    async def check_account_linking(
        self,
        email: str,
        provider: str,
    ) -> AccountLinkingResult:
        """
        Check whether an OAuth sign-in collides with an existing account.

        Args:
            email: Email reported by the OAuth provider
            provider: OAuth provider name (google, github, ...)

        Returns:
            needs_linking=True with a linking token when an email/password
            account exists without this provider; otherwise needs_linking=False,
            possibly with an informational message.
        """
        ...

    def generate_linking_token(self, email: str, provider: str) -> str:
        """Issue a short-lived signed token carrying email and provider."""
        ...

    def verify_linking_token(self, token: Optional[str]) -> Optional[LinkingTokenData]:
        """Decode a linking token; None when empty, malformed, tampered or expired."""
        ...

    async def link_oauth_to_existing_account(
        self,
        existing_user_id: str,
        oauth_user_id: str,
        provider: str,
    ) -> LinkAccountsResult:
        """Merge the OAuth identity into the existing account."""
        ...

    async def find_user_by_email(self, email: str) -> Optional[AuthAccount]:
        """
        Find an account by email (case-insensitive).

        Raises:
            Exception: Whatever the admin API raises; callers decide
                whether the lookup is best-effort
        """
        ...
