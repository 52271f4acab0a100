"""
Session token validation.

Supabase signs access tokens with the project's JWT secret (HS256, audience
"authenticated"). Only the claims the billing API needs are mapped onto
AuthenticatedUser.
"""

from datetime import datetime, timezone
from typing import Any

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings
from shared.models import AuthenticatedUser

from .exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from .interfaces import IAuthService
from .models import JWTPayload

SESSION_TOKEN_AUDIENCE = "authenticated"
SESSION_TOKEN_ALGORITHMS = ["HS256"]


class AuthService(IAuthService):
    """Validates Supabase session tokens locally, without a network call."""

    def __init__(self, settings: Settings):
        self._secret = settings.supabase_jwt_secret

    async def validate_token(self, token: str) -> AuthenticatedUser:
        if not token:
            raise MissingTokenError()
        if not self._secret:
            raise InvalidTokenError("Token validation is not configured")

        try:
            claims = JWTPayload(**self._decode(token))
        except PydanticValidationError:
            raise InvalidTokenError("Token is missing required claims")
        return self._to_user(claims)

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=SESSION_TOKEN_ALGORITHMS,
                audience=SESSION_TOKEN_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Invalid authentication token: {e}")

    @staticmethod
    def _to_user(claims: JWTPayload) -> AuthenticatedUser:
        # Supabase puts "authenticated" in role for every signed-in user
        role = "user" if claims.role == SESSION_TOKEN_AUDIENCE else claims.role
        return AuthenticatedUser(
            id=claims.sub,
            email=claims.email or None,
            email_verified=claims.email_confirmed_at is not None,
            last_sign_in=datetime.fromtimestamp(claims.iat, tz=timezone.utc),
            role=role,
            app_metadata=claims.app_metadata,
            user_metadata=claims.user_metadata,
        )
