"""
Tests for subscription sync endpoints.

POST /api/stripe/sync and POST /api/stripe/webhook.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

import stripe

from api.app import create_app
from api.dependencies import (
    get_customer_directory,
    get_subscription_synchronizer,
    get_webhook_handler,
)
from modules.customers.models import CustomerLookupResult
from modules.subscriptions.exceptions import (
    WebhookSecretMissingError,
    WebhookSignatureError,
)
from modules.subscriptions.models import SubscriptionData, SubscriptionStatus


@pytest.fixture
def directory():
    customers = MagicMock()
    customers.get_customer_by_user_id = AsyncMock(
        return_value=CustomerLookupResult(success=True, stripe_customer_id="cus_123")
    )
    return customers


@pytest.fixture
def synchronizer():
    sync = MagicMock()
    sync.sync_stripe_customer_data = AsyncMock(
        return_value=SubscriptionData(
            subscription_id="sub_123",
            status=SubscriptionStatus.ACTIVE,
            plan_name="Pro",
        )
    )
    return sync


@pytest.fixture
def webhook_handler():
    handler = MagicMock()
    handler.handle = AsyncMock(return_value=True)
    return handler


@pytest.fixture
def client(directory, synchronizer, webhook_handler):
    app = create_app()
    app.dependency_overrides[get_customer_directory] = lambda: directory
    app.dependency_overrides[get_subscription_synchronizer] = lambda: synchronizer
    app.dependency_overrides[get_webhook_handler] = lambda: webhook_handler
    return TestClient(app)


class TestForceSync:
    """Tests for POST /api/stripe/sync"""

    def test_sync_returns_subscription_data(self, client, synchronizer):
        response = client.post("/api/stripe/sync", json={"userId": "user-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Synchronization completed"
        assert body["subscriptionData"]["subscriptionId"] == "sub_123"
        assert body["subscriptionData"]["status"] == "active"
        assert body["subscriptionData"]["planName"] == "Pro"
        synchronizer.sync_stripe_customer_data.assert_awaited_once_with("cus_123")

    def test_missing_user_id(self, client, synchronizer):
        response = client.post("/api/stripe/sync", json={})

        assert response.status_code == 400
        synchronizer.sync_stripe_customer_data.assert_not_awaited()

    def test_user_without_customer(self, client, directory, synchronizer):
        directory.get_customer_by_user_id.return_value = CustomerLookupResult(
            success=True, stripe_customer_id=None
        )

        response = client.post("/api/stripe/sync", json={"userId": "user-1"})

        assert response.status_code == 404
        assert response.json() == {"error": "No billing account found"}
        synchronizer.sync_stripe_customer_data.assert_not_awaited()

    def test_sync_failure(self, client, synchronizer):
        synchronizer.sync_stripe_customer_data.side_effect = stripe.APIError("down")

        response = client.post("/api/stripe/sync", json={"userId": "user-1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to synchronize with Stripe"}


class TestWebhook:
    """Tests for POST /api/stripe/webhook"""

    def test_passes_raw_body_and_signature(self, client, webhook_handler):
        raw = b'{"id":"evt_1","type":"customer.subscription.updated"}'

        response = client.post(
            "/api/stripe/webhook",
            content=raw,
            headers={"stripe-signature": "t=1,v1=abc", "content-type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        webhook_handler.handle.assert_awaited_once_with(raw, "t=1,v1=abc")

    def test_ignored_event_still_acknowledged(self, client, webhook_handler):
        webhook_handler.handle.return_value = False

        response = client.post("/api/stripe/webhook", content=b"{}", headers={"stripe-signature": "s"})

        assert response.status_code == 200
        assert response.json() == {"received": True}

    def test_invalid_signature(self, client, webhook_handler):
        webhook_handler.handle.side_effect = WebhookSignatureError()

        response = client.post("/api/stripe/webhook", content=b"{}", headers={"stripe-signature": "bad"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid signature"}

    def test_missing_secret(self, client, webhook_handler):
        webhook_handler.handle.side_effect = WebhookSecretMissingError()

        response = client.post("/api/stripe/webhook", content=b"{}", headers={"stripe-signature": "s"})

        assert response.status_code == 500
        assert response.json() == {"error": "Webhook secret not configured"}

    def test_processing_failure(self, client, webhook_handler):
        webhook_handler.handle.side_effect = RuntimeError("database unreachable")

        response = client.post("/api/stripe/webhook", content=b"{}", headers={"stripe-signature": "s"})

        assert response.status_code == 500
        assert response.json() == {"error": "Webhook processing failed"}
