"""Tests for Stripe webhook handling."""

import pytest
from unittest.mock import AsyncMock, MagicMock

import stripe

from modules.subscriptions.exceptions import (
    WebhookSecretMissingError,
    WebhookSignatureError,
)
from modules.subscriptions.webhooks import StripeWebhookHandler

PAYLOAD = b'{"id": "evt_1"}'


def event(event_type: str, customer="cus_123") -> dict:
    return {
        "id": "evt_1",
        "type": event_type,
        "data": {"object": {"id": "sub_123", "customer": customer}},
    }


@pytest.fixture
def synchronizer():
    sync = MagicMock()
    sync.sync_stripe_customer_data = AsyncMock()
    return sync


@pytest.fixture
def handler(stripe_client, synchronizer):
    return StripeWebhookHandler(stripe_client, synchronizer, "whsec_test_123")


class TestHandle:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event_type",
        [
            "customer.subscription.created",
            "customer.subscription.updated",
            "customer.subscription.deleted",
        ],
    )
    async def test_subscription_events_trigger_sync(
        self, handler, stripe_client, synchronizer, event_type
    ):
        stripe_client.construct_event.return_value = event(event_type)

        handled = await handler.handle(PAYLOAD, "t=1,v1=abc")

        assert handled is True
        stripe_client.construct_event.assert_called_once_with(
            PAYLOAD, "t=1,v1=abc", "whsec_test_123"
        )
        synchronizer.sync_stripe_customer_data.assert_awaited_once_with("cus_123")

    @pytest.mark.asyncio
    async def test_expanded_customer_object(self, handler, stripe_client, synchronizer):
        stripe_client.construct_event.return_value = event(
            "customer.subscription.updated", customer={"id": "cus_456"}
        )

        await handler.handle(PAYLOAD, "sig")

        synchronizer.sync_stripe_customer_data.assert_awaited_once_with("cus_456")

    @pytest.mark.asyncio
    async def test_other_events_ignored(self, handler, stripe_client, synchronizer):
        stripe_client.construct_event.return_value = event("invoice.paid")

        assert await handler.handle(PAYLOAD, "sig") is False
        synchronizer.sync_stripe_customer_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_event_without_customer_ignored(self, handler, stripe_client, synchronizer):
        stripe_client.construct_event.return_value = event(
            "customer.subscription.updated", customer=None
        )

        assert await handler.handle(PAYLOAD, "sig") is False
        synchronizer.sync_stripe_customer_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_signature(self, handler, stripe_client):
        with pytest.raises(WebhookSignatureError, match="Missing stripe-signature header"):
            await handler.handle(PAYLOAD, None)
        stripe_client.construct_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_secret(self, stripe_client, synchronizer):
        handler = StripeWebhookHandler(stripe_client, synchronizer, "")

        with pytest.raises(WebhookSecretMissingError) as exc_info:
            await handler.handle(PAYLOAD, "sig")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Webhook secret not configured"

    @pytest.mark.asyncio
    async def test_invalid_signature(self, handler, stripe_client, synchronizer):
        stripe_client.construct_event.side_effect = stripe.SignatureVerificationError(
            "No signatures found", "sig"
        )

        with pytest.raises(WebhookSignatureError) as exc_info:
            await handler.handle(PAYLOAD, "sig")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid signature"
        synchronizer.sync_stripe_customer_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_payload(self, handler, stripe_client):
        stripe_client.construct_event.side_effect = ValueError("Invalid payload")

        with pytest.raises(WebhookSignatureError):
            await handler.handle(b"not json", "sig")

    @pytest.mark.asyncio
    async def test_sync_failure_propagates(self, handler, stripe_client, synchronizer):
        stripe_client.construct_event.return_value = event("customer.subscription.deleted")
        synchronizer.sync_stripe_customer_data.side_effect = stripe.APIError("down")

        with pytest.raises(stripe.APIError):
            await handler.handle(PAYLOAD, "sig")
