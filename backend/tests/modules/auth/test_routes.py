"""
Tests for the account linking endpoint.

POST /api/auth/link-account with action "check" or "link".
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_account_linker, get_auth_service
from modules.auth.models import (
    AccountLinkingResult,
    ConflictType,
    LinkAccountsResult,
    LinkingTokenData,
)
from modules.auth.linking import AccountLinker
from modules.auth.service import AuthService

from tests.conftest import create_test_token, make_settings

LINK_BODY = {
    "action": "link",
    "token": "linking-token",
    "oauthUserId": "oauth-1",
    "provider": "google",
}

PENDING = AccountLinkingResult(
    needs_linking=True,
    existing_user_id="user-1",
    existing_auth_method="email",
    conflict_type=ConflictType.EMAIL_EXISTS,
    linking_token="linking-token",
)


@pytest.fixture
def linker():
    accounts = MagicMock()
    accounts.is_account_linking_enabled.return_value = True
    accounts.check_account_linking = AsyncMock(return_value=PENDING)
    accounts.verify_linking_token.return_value = LinkingTokenData(
        email="ada@example.com", provider="google", timestamp=1767225600
    )
    accounts.link_oauth_to_existing_account = AsyncMock(
        return_value=LinkAccountsResult(success=True, linked_user_id="user-1")
    )
    return accounts


@pytest.fixture
def client(linker):
    app = create_app()
    app.dependency_overrides[get_account_linker] = lambda: linker
    app.dependency_overrides[get_auth_service] = lambda: AuthService(make_settings())
    return TestClient(app)


@pytest.fixture
def oauth_headers():
    return {
        "Authorization": f"Bearer {create_test_token(user_id='oauth-1', email='ada@example.com')}"
    }


class TestCheckAction:
    def test_reports_pending_link(self, client, linker):
        response = client.post(
            "/api/auth/link-account",
            json={"action": "check", "email": "ada@example.com", "provider": "google"},
        )

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["needsLinking"] is True
        assert result["existingUserId"] == "user-1"
        assert result["conflictType"] == "email_exists"
        assert result["linkingToken"] == "linking-token"
        linker.check_account_linking.assert_awaited_once_with("ada@example.com", "google")

    def test_requires_email_and_provider(self, client):
        response = client.post(
            "/api/auth/link-account", json={"action": "check", "email": "ada@example.com"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Email and provider are required"}

    def test_disabled(self, client, linker):
        linker.is_account_linking_enabled.return_value = False

        response = client.post(
            "/api/auth/link-account",
            json={"action": "check", "email": "ada@example.com", "provider": "google"},
        )

        assert response.status_code == 503
        assert response.json() == {"error": "Account linking is not available"}

    def test_invalid_action(self, client):
        response = client.post("/api/auth/link-account", json={"action": "merge"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid action"}


class TestLinkAction:
    def test_links_accounts(self, client, linker, oauth_headers):
        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=oauth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "linkedUserId": "user-1",
            "message": "Accounts linked successfully",
        }
        linker.link_oauth_to_existing_account.assert_awaited_once_with(
            "user-1", "oauth-1", "google"
        )

    def test_requires_fields(self, client, oauth_headers):
        response = client.post(
            "/api/auth/link-account",
            json={"action": "link", "provider": "google"},
            headers=oauth_headers,
        )

        assert response.status_code == 400

    def test_invalid_token(self, client, linker, oauth_headers):
        linker.verify_linking_token.return_value = None

        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=oauth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or expired linking token"}
        linker.link_oauth_to_existing_account.assert_not_awaited()

    def test_requires_authentication(self, client, linker):
        response = client.post("/api/auth/link-account", json=LINK_BODY)

        assert response.status_code == 401
        linker.link_oauth_to_existing_account.assert_not_awaited()

    def test_invalid_bearer_treated_as_anonymous(self, client, linker):
        response = client.post(
            "/api/auth/link-account",
            json=LINK_BODY,
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401

    def test_user_mismatch(self, client, linker):
        headers = {"Authorization": f"Bearer {create_test_token(user_id='someone-else')}"}

        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "User ID mismatch"}
        linker.link_oauth_to_existing_account.assert_not_awaited()

    def test_link_no_longer_needed(self, client, linker, oauth_headers):
        linker.check_account_linking.return_value = AccountLinkingResult(needs_linking=False)

        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=oauth_headers)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Account linking not required or existing user not found"
        }
        linker.link_oauth_to_existing_account.assert_not_awaited()

    def test_link_failure(self, client, linker, oauth_headers):
        linker.link_oauth_to_existing_account.return_value = LinkAccountsResult(
            success=False, error="Failed to link accounts"
        )

        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=oauth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to link accounts"}

    def test_email_compared_case_insensitively(self, client, linker):
        headers = {
            "Authorization": f"Bearer {create_test_token(user_id='oauth-1', email='Ada@Example.com')}"
        }

        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=headers)

        assert response.status_code == 200

    def test_provider_must_match_token(self, client, linker, oauth_headers):
        response = client.post(
            "/api/auth/link-account",
            json={**LINK_BODY, "provider": "github"},
            headers=oauth_headers,
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Provider does not match the linking token"}
        linker.link_oauth_to_existing_account.assert_not_awaited()

    def test_email_must_match_token(self, client, linker):
        headers = {
            "Authorization": f"Bearer {create_test_token(user_id='oauth-1', email='eve@example.com')}"
        }

        response = client.post("/api/auth/link-account", json=LINK_BODY, headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Email does not match the linking token"}
        linker.link_oauth_to_existing_account.assert_not_awaited()


class TestLinkWithIssuedToken:
    """Tokens minted by the linker for one address cannot be replayed by another user."""

    @pytest.fixture
    def real_linker(self):
        accounts = AccountLinker(MagicMock(), make_settings())
        accounts.check_account_linking = AsyncMock(return_value=PENDING)
        accounts.link_oauth_to_existing_account = AsyncMock(
            return_value=LinkAccountsResult(success=True, linked_user_id="user-1")
        )
        return accounts

    @pytest.fixture
    def token_client(self, real_linker):
        app = create_app()
        app.dependency_overrides[get_account_linker] = lambda: real_linker
        app.dependency_overrides[get_auth_service] = lambda: AuthService(make_settings())
        return TestClient(app)

    def test_other_user_cannot_claim_victim_account(self, token_client, real_linker):
        token = real_linker.generate_linking_token("victim@example.com", "google")
        headers = {
            "Authorization": f"Bearer {create_test_token(user_id='intruder-1', email='intruder@example.com')}"
        }

        response = token_client.post(
            "/api/auth/link-account",
            json={
                "action": "link",
                "token": token,
                "oauthUserId": "intruder-1",
                "provider": "github",
            },
            headers=headers,
        )

        assert response.status_code == 403
        real_linker.link_oauth_to_existing_account.assert_not_awaited()

    def test_owner_links_with_token_provider(self, token_client, real_linker):
        token = real_linker.generate_linking_token("victim@example.com", "google")
        headers = {
            "Authorization": f"Bearer {create_test_token(user_id='oauth-9', email='victim@example.com')}"
        }

        response = token_client.post(
            "/api/auth/link-account",
            json={"action": "link", "token": token, "oauthUserId": "oauth-9", "provider": "google"},
            headers=headers,
        )

        assert response.status_code == 200
        real_linker.link_oauth_to_existing_account.assert_awaited_once_with(
            "user-1", "oauth-9", "google"
        )
