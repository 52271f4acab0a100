"""
Account linking for OAuth sign-ins.

When someone signs in with an OAuth provider using an email that already
belongs to an email/password account, the client is offered a link
instead of a second account. The intent is carried across the
confirmation redirect in a signed, short-lived token; nothing is stored.
"""

import logging
import time
from typing import Any, Optional

import jwt
from supabase import Client

from shared.config import Settings
from shared.exceptions import ConfigurationError
from .interfaces import IAccountLinker
from .models import (
    AccountLinkingResult,
    AuthAccount,
    ConflictType,
    LinkAccountsResult,
    LinkingTokenData,
)

logger = logging.getLogger(__name__)

LINKING_TOKEN_AUDIENCE = "account-linking"
LINKING_TOKEN_ALGORITHM = "HS256"

USERS_PAGE_SIZE = 1000
MAX_USER_PAGES = 50


class AccountLinker(IAccountLinker):
    """Account linker backed by the Supabase admin API."""

    def __init__(self, db: Client, settings: Settings):
        self._db = db
        self._settings = settings

    def is_account_linking_enabled(self) -> bool:
        # Enumerating users needs the service-role key
        return bool(self._settings.supabase_service_role_key)

    async def check_account_linking(
        self,
        email: str,
        provider: str,
    ) -> AccountLinkingResult:
        try:
            matches = self._find_accounts_by_email(email)
        except Exception as e:
            logger.error(f"Error checking existing users for linking: {e}")
            return AccountLinkingResult(needs_linking=False)

        if not matches:
            return AccountLinkingResult(needs_linking=False)

        if len(matches) > 1:
            return AccountLinkingResult(
                needs_linking=False,
                conflict_type=ConflictType.MULTIPLE_PROVIDERS,
                message="Multiple accounts found with this email. Please contact support.",
            )

        account = matches[0]
        has_email = "email" in account.providers
        has_oauth = provider in account.providers

        if has_email and not has_oauth:
            return AccountLinkingResult(
                needs_linking=True,
                existing_user_id=account.id,
                existing_auth_method="email",
                conflict_type=ConflictType.EMAIL_EXISTS,
                message=(
                    "An account with this email already exists. "
                    f"Would you like to link your {provider} account?"
                ),
                linking_token=self.generate_linking_token(email, provider),
            )

        if has_email and has_oauth:
            return AccountLinkingResult(
                needs_linking=False,
                existing_user_id=account.id,
                message=f"Your {provider} account is already linked. Please sign in.",
            )

        if has_oauth:
            message = f"You've already signed up with {provider}. Please sign in instead."
        else:
            message = (
                "An account with this email already exists. "
                "Please sign in with the method you used before."
            )
        return AccountLinkingResult(
            needs_linking=False,
            existing_user_id=account.id,
            existing_auth_method="oauth",
            conflict_type=ConflictType.OAUTH_EXISTS,
            message=message,
        )

    def generate_linking_token(self, email: str, provider: str) -> str:
        secret = self._settings.linking_secret
        if not secret:
            raise ConfigurationError(
                "Account linking secret not configured",
                code="LINKING_SECRET_MISSING",
            )

        issued_at = int(time.time())
        claims = {
            "email": email,
            "provider": provider,
            "aud": LINKING_TOKEN_AUDIENCE,
            "iat": issued_at,
            "exp": issued_at + self._settings.linking_token_ttl_seconds,
        }
        return jwt.encode(claims, secret, algorithm=LINKING_TOKEN_ALGORITHM)

    def verify_linking_token(self, token: Optional[str]) -> Optional[LinkingTokenData]:
        secret = self._settings.linking_secret
        if not token or not secret:
            return None

        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[LINKING_TOKEN_ALGORITHM],
                audience=LINKING_TOKEN_AUDIENCE,
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected linking token: {e}")
            return None

        email = claims.get("email")
        provider = claims.get("provider")
        if not isinstance(email, str) or not isinstance(provider, str):
            return None
        if not email or not provider:
            return None

        return LinkingTokenData(
            email=email,
            provider=provider,
            timestamp=int(claims["iat"]),
        )

    async def link_oauth_to_existing_account(
        self,
        existing_user_id: str,
        oauth_user_id: str,
        provider: str,
    ) -> LinkAccountsResult:
        admin = self._db.auth.admin

        try:
            existing = self._get_account(existing_user_id)
        except Exception as e:
            logger.error(f"Error fetching user {existing_user_id} for linking: {e}")
            existing = None
        if existing is None:
            return LinkAccountsResult(success=False, error="Existing user not found")

        try:
            oauth_account = self._get_account(oauth_user_id)
        except Exception as e:
            logger.warning(f"Could not fetch OAuth user {oauth_user_id}: {e}")
            oauth_account = None
        oauth_metadata = oauth_account.user_metadata if oauth_account else {}

        providers = list(dict.fromkeys([*existing.providers, provider]))
        attributes = {
            "app_metadata": {**existing.app_metadata, "providers": providers},
            # Existing values win; OAuth data only fills gaps (avatar, full name)
            "user_metadata": {**oauth_metadata, **existing.user_metadata},
        }

        try:
            admin.update_user_by_id(existing_user_id, attributes)
        except Exception as e:
            logger.error(f"Failed to update user {existing_user_id} while linking: {e}")
            return LinkAccountsResult(success=False, error="Failed to link accounts")

        try:
            admin.delete_user(oauth_user_id)
        except Exception as e:
            # The link itself succeeded
            logger.warning(f"Failed to delete OAuth user {oauth_user_id} after linking: {e}")

        logger.info(f"Linked {provider} identity into user {existing_user_id}")
        return LinkAccountsResult(success=True, linked_user_id=existing_user_id)

    async def find_user_by_email(self, email: str) -> Optional[AuthAccount]:
        matches = self._find_accounts_by_email(email)
        return matches[0] if matches else None

    def _get_account(self, user_id: str) -> Optional[AuthAccount]:
        response = self._db.auth.admin.get_user_by_id(user_id)
        user = getattr(response, "user", None)
        return AuthAccount.from_user(user) if user is not None else None

    def _find_accounts_by_email(self, email: str) -> list[AuthAccount]:
        wanted = email.strip().lower()
        return [
            account
            for account in self._list_accounts()
            if account.email and account.email.lower() == wanted
        ]

    def _list_accounts(self) -> list[AuthAccount]:
        accounts: list[AuthAccount] = []
        for page in range(1, MAX_USER_PAGES + 1):
            users: list[Any] = self._db.auth.admin.list_users(page=page, per_page=USERS_PAGE_SIZE)
            accounts.extend(AuthAccount.from_user(user) for user in users)
            if len(users) < USERS_PAGE_SIZE:
                break
        return accounts
