"""
Stripe webhook handling.

Subscription lifecycle events trigger a full re-sync of the affected
customer; the event payload itself is never trusted as subscription state.
"""

import logging
from typing import Optional

import stripe

from shared.stripe_client import stripe_id, stripe_value
from .exceptions import WebhookSecretMissingError, WebhookSignatureError
from .interfaces import ISubscriptionSynchronizer

logger = logging.getLogger(__name__)

RELEVANT_EVENTS = frozenset(
    {
        "customer.subscription.created",
        "customer.subscription.updated",
        "customer.subscription.deleted",
    }
)


class StripeWebhookHandler:
    """Verifies webhook signatures and dispatches subscription events."""

    def __init__(
        self,
        stripe_client: stripe.StripeClient,
        synchronizer: ISubscriptionSynchronizer,
        webhook_secret: Optional[str],
    ):
        self._stripe = stripe_client
        self._synchronizer = synchronizer
        self._secret = webhook_secret

    async def handle(self, payload: bytes, signature: Optional[str]) -> bool:
        """
        Verify and process one webhook delivery.

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the Stripe-Signature header

        Returns:
            True if the event caused a sync, False if it was ignored

        Raises:
            WebhookSignatureError: Missing or invalid signature
            WebhookSecretMissingError: STRIPE_WEBHOOK_SECRET is not set
            stripe.StripeError: If the triggered sync fails
        """
        if not signature:
            raise WebhookSignatureError("Missing stripe-signature header")
        if not self._secret:
            logger.error("Missing STRIPE_WEBHOOK_SECRET environment variable")
            raise WebhookSecretMissingError()

        try:
            event = self._stripe.construct_event(payload, signature, self._secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise WebhookSignatureError()

        event_type = stripe_value(event, "type")
        if event_type not in RELEVANT_EVENTS:
            logger.debug(f"Ignoring event type: {event_type}")
            return False

        subscription = stripe_value(stripe_value(event, "data"), "object")
        customer_id = stripe_id(stripe_value(subscription, "customer"))
        if not customer_id:
            logger.warning(f"Event {stripe_value(event, 'id')} carries no customer")
            return False

        logger.info(f"Processing {event_type} for customer: {customer_id}")
        await self._synchronizer.sync_stripe_customer_data(customer_id)
        return True
