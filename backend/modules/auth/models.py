"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from enum import Enum
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field

from shared.models import CamelModel


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")
    email_confirmed_at: Optional[str] = Field(None, description="Email confirmation time")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)


class AuthAccount(BaseModel):
    """An account as reported by the Supabase admin API."""

    id: str
    email: Optional[str] = None
    providers: list[str] = Field(default_factory=list)
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_user(cls, user: Any) -> "AuthAccount":
        """Build from a gotrue User object or a plain dict."""
        if isinstance(user, dict):
            get = user.get
        else:
            def get(key: str, default: Any = None) -> Any:
                return getattr(user, key, default)

        app_metadata = get("app_metadata") or {}
        return cls(
            id=str(get("id")),
            email=get("email"),
            providers=list(app_metadata.get("providers") or []),
            app_metadata=dict(app_metadata),
            user_metadata=dict(get("user_metadata") or {}),
        )


class ConflictType(str, Enum):
    EMAIL_EXISTS = "email_exists"
    OAUTH_EXISTS = "oauth_exists"
    MULTIPLE_PROVIDERS = "multiple_providers"


class AccountLinkingResult(CamelModel):
    """
    Outcome of checking an OAuth sign-in against existing accounts.

    ``linking_token`` is only issued when ``needs_linking`` is True.
    """

    needs_linking: bool = False
    existing_user_id: Optional[str] = None
    existing_auth_method: Optional[Literal["email", "oauth"]] = None
    conflict_type: Optional[ConflictType] = None
    message: Optional[str] = None
    linking_token: Optional[str] = None


class LinkingTokenData(BaseModel):
    """Decoded contents of a valid linking token."""

    email: str
    provider: str
    timestamp: int = Field(..., description="Issuance time, Unix seconds")


class LinkAccountsResult(BaseModel):
    success: bool
    error: Optional[str] = None
    linked_user_id: Optional[str] = None


class LinkAccountRequest(CamelModel):
    """
    Body of POST /api/auth/link-account.

    ``check`` uses email/provider; ``link`` uses token/oauth_user_id/provider.
    """

    action: Optional[str] = None
    email: Optional[str] = None
    provider: Optional[str] = None
    user_id: Optional[str] = None
    token: Optional[str] = None
    oauth_user_id: Optional[str] = None


class LinkCheckResponse(CamelModel):
    result: AccountLinkingResult


class LinkAccountResponse(CamelModel):
    success: bool = True
    linked_user_id: str
    message: str = "Accounts linked successfully"
