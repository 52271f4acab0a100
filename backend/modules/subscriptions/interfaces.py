"""
Subscription synchronizer interface.

Checkout verification and the billing routes depend on
ISubscriptionSynchronizer rather than on the Stripe-backed implementation.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import SubscriptionData, SubscriptionRecord


@runtime_checkable
class ISubscriptionSynchronizer(Protocol):
    """Reconciles Stripe subscription state into the local mirror."""

    async def sync_stripe_customer_data(self, stripe_customer_id: str) -> SubscriptionData:
        """
        Fetch the customer's latest subscription from Stripe and overwrite
        the local mirror with it.

        Only the most recent subscription is considered. When the customer
        has none, a "none" record is stored instead.

        Args:
            stripe_customer_id: Stripe customer ID (cus_...)

        Returns:
            The synchronized state, without a second database read

        Raises:
            stripe.StripeError: If any Stripe call fails
        """
        ...

    async def get_subscription_for_user(self, user_id: str) -> Optional[SubscriptionRecord]:
        """Read the mirrored subscription for a user, if any."""
        ...
