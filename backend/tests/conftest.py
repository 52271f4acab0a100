"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Stripe objects are represented as plain dicts: shared.stripe_client.stripe_value
reads both shapes, and dicts keep fields like ``items`` unambiguous.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.config import Settings


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def make_settings(**overrides) -> Settings:
    """Settings with every required value present."""
    values = {
        "supabase_url": "https://project.supabase.co",
        "supabase_anon_key": "anon-key",
        "supabase_service_role_key": "service-role-key",
        "supabase_jwt_secret": TEST_JWT_SECRET,
        "stripe_secret_key": "sk_test_123",
        "stripe_webhook_secret": "whsec_test_123",
        "app_url": "https://app.example.com",
        "account_linking_secret": "",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def reset_service_container():
    """Drop cached services before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def stripe_client() -> MagicMock:
    """A StripeClient stand-in; configure per test."""
    return MagicMock()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
