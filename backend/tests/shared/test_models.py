"""
Tests for shared models.
"""

import pytest
from datetime import datetime, timezone
from typing import Optional
from pydantic import ValidationError

from shared.models import AuthenticatedUser, CamelModel, OperationResult


class TestAuthenticatedUser:
    """Tests for the AuthenticatedUser model in shared."""

    def test_create_with_required_fields(self):
        user = AuthenticatedUser(id="user-123", email="test@example.com")
        assert user.id == "user-123"
        assert user.email == "test@example.com"

    def test_default_values(self):
        user = AuthenticatedUser(id="user-123")
        assert user.email is None
        assert user.email_verified is False
        assert user.role == "user"
        assert user.last_sign_in is None
        assert user.app_metadata == {}
        assert user.user_metadata == {}

    def test_all_fields(self):
        now = datetime.now(timezone.utc)
        user = AuthenticatedUser(
            id="user-123",
            email="test@example.com",
            email_verified=True,
            last_sign_in=now,
            role="admin",
            app_metadata={"providers": ["email"]},
        )
        assert user.email_verified is True
        assert user.last_sign_in == now
        assert user.role == "admin"
        assert user.app_metadata["providers"] == ["email"]

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            AuthenticatedUser(id="user-123", email="not-an-email")

    def test_is_frozen(self):
        user = AuthenticatedUser(id="user-123", email="test@example.com")
        with pytest.raises(ValidationError):
            user.role = "admin"

    def test_extra_claims_ignored(self):
        user = AuthenticatedUser(id="user-123", aud="authenticated")
        assert not hasattr(user, "aud")


class TestCamelModel:
    class Sample(CamelModel):
        user_id: str
        is_guest: bool = False
        plan_name: Optional[str] = None

    def test_accepts_camel_case(self):
        sample = self.Sample.model_validate({"userId": "u1", "isGuest": True})
        assert sample.user_id == "u1"
        assert sample.is_guest is True

    def test_accepts_snake_case(self):
        assert self.Sample(user_id="u1").user_id == "u1"

    def test_dumps_camel_case_by_alias(self):
        dumped = self.Sample(user_id="u1", plan_name="Pro").model_dump(by_alias=True)
        assert dumped == {"userId": "u1", "isGuest": False, "planName": "Pro"}


class TestOperationResult:
    def test_success(self):
        result = OperationResult(success=True)
        assert result.success is True
        assert result.error is None

    def test_failure_carries_error(self):
        result = OperationResult(success=False, error="boom")
        assert result.error == "boom"
