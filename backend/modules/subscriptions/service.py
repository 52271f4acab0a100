"""
Subscription synchronizer implementation.

Stripe is the source of truth for subscription state. Every sync re-fetches
the customer's latest subscription and overwrites the local mirror row in
full, so concurrent syncs can race but never leave a half-merged row.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import stripe

from shared.stripe_client import stripe_id, stripe_value
from modules.customers.repository import ProfileRepository
from .interfaces import ISubscriptionSynchronizer
from .models import (
    PaymentMethodSummary,
    SubscriptionData,
    SubscriptionRecord,
)
from .repository import SubscriptionRepository

logger = logging.getLogger(__name__)

# Substituted when Stripe sends no usable period end. This fabricates an
# expiry locally; the next sync with real data overwrites it.
FALLBACK_PERIOD = timedelta(days=30)
DEFAULT_PLAN_NAME = "Subscription Plan"

SUBSCRIPTION_EXPANSIONS = ["data.default_payment_method", "data.items.data.price"]


def to_iso_timestamp(value: Any) -> Optional[str]:
    """
    Convert Unix seconds to an ISO-8601 UTC string.

    Returns None for null, non-positive or unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if seconds <= 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return None


class SubscriptionSynchronizer(ISubscriptionSynchronizer):
    """Synchronizer backed by the Stripe API and the Supabase mirror table."""

    def __init__(
        self,
        stripe_client: stripe.StripeClient,
        subscriptions: SubscriptionRepository,
        profiles: ProfileRepository,
    ):
        self._stripe = stripe_client
        self._subscriptions = subscriptions
        self._profiles = profiles

    async def sync_stripe_customer_data(self, stripe_customer_id: str) -> SubscriptionData:
        logger.info(f"Syncing subscription data for customer: {stripe_customer_id}")

        try:
            listing = self._stripe.subscriptions.list(
                params={
                    "customer": stripe_customer_id,
                    "limit": 1,
                    "status": "all",
                    "expand": SUBSCRIPTION_EXPANSIONS,
                }
            )
            subscriptions = stripe_value(listing, "data", [])

            if not subscriptions:
                data = SubscriptionData.none()
            else:
                # Only the most recent subscription is mirrored
                data = self._build_subscription_data(subscriptions[0])

            self._persist(stripe_customer_id, data)
        except Exception as e:
            logger.error(f"Error syncing customer {stripe_customer_id}: {e}")
            raise

        logger.info(
            f"Synced customer {stripe_customer_id}: status={data.status.value}"
        )
        return data

    async def get_subscription_for_user(self, user_id: str) -> Optional[SubscriptionRecord]:
        return self._subscriptions.get_by_user_id(user_id)

    def _build_subscription_data(self, subscription: Any) -> SubscriptionData:
        items = stripe_value(stripe_value(subscription, "items"), "data", [])
        first_item = items[0] if items else None

        price = self._resolve_price(stripe_value(first_item, "price"))
        recurring = stripe_value(price, "recurring")

        # Item-level periods are authoritative on current API versions
        period_start = stripe_value(first_item, "current_period_start") or stripe_value(
            subscription, "current_period_start"
        )
        period_end = stripe_value(first_item, "current_period_end") or stripe_value(
            subscription, "current_period_end"
        )

        return SubscriptionData(
            subscription_id=stripe_value(subscription, "id"),
            status=stripe_value(subscription, "status", "incomplete"),
            price_id=stripe_id(price),
            plan_name=self._resolve_plan_name(price),
            current_period_start=self._period_boundary(
                period_start, timedelta(0), subscription
            ),
            current_period_end=self._period_boundary(
                period_end, FALLBACK_PERIOD, subscription
            ),
            cancel_at_period_end=bool(stripe_value(subscription, "cancel_at_period_end", False)),
            trial_end=to_iso_timestamp(stripe_value(subscription, "trial_end")),
            currency=stripe_value(price, "currency"),
            unit_amount=stripe_value(price, "unit_amount"),
            interval=stripe_value(recurring, "interval"),
            payment_method=self._payment_method_summary(
                stripe_value(subscription, "default_payment_method")
            ),
        )

    def _period_boundary(self, value: Any, fallback: timedelta, subscription: Any) -> str:
        converted = to_iso_timestamp(value)
        if converted is not None:
            return converted

        logger.warning(
            f"Subscription {stripe_value(subscription, 'id')} has no usable period "
            f"timestamp ({value!r}); substituting now + {fallback.days} days"
        )
        return (datetime.now(timezone.utc) + fallback).isoformat()

    def _resolve_price(self, price: Any) -> Any:
        if isinstance(price, str):
            return self._stripe.prices.retrieve(price)
        return price

    def _resolve_plan_name(self, price: Any) -> Optional[str]:
        if price is None:
            return None

        product = stripe_value(price, "product")
        if isinstance(product, str):
            try:
                return stripe_value(self._stripe.products.retrieve(product), "name", DEFAULT_PLAN_NAME)
            except stripe.StripeError as e:
                logger.warning(f"Could not fetch product {product}: {e}")
                return DEFAULT_PLAN_NAME
        if product is not None:
            return stripe_value(product, "name")
        return stripe_value(price, "nickname")

    @staticmethod
    def _payment_method_summary(payment_method: Any) -> Optional[PaymentMethodSummary]:
        if payment_method is None or isinstance(payment_method, str):
            return None
        card = stripe_value(payment_method, "card")
        if card is None:
            return None
        return PaymentMethodSummary(
            brand=stripe_value(card, "brand"),
            last4=stripe_value(card, "last4"),
        )

    def _persist(self, stripe_customer_id: str, data: SubscriptionData) -> None:
        owner = self._resolve_owner(stripe_customer_id)
        if owner is None:
            logger.warning(f"No user found for customer: {stripe_customer_id}")
            return

        user_id, profile_id = owner
        record = SubscriptionRecord.from_sync(user_id, profile_id, stripe_customer_id, data)
        self._subscriptions.upsert(record)

    def _resolve_owner(self, stripe_customer_id: str) -> Optional[tuple[str, Optional[str]]]:
        existing = self._subscriptions.get_by_stripe_customer_id(stripe_customer_id)
        if existing is not None:
            return existing.user_id, existing.profile_id

        profile = self._profiles.get_by_stripe_customer_id(stripe_customer_id)
        if profile is not None:
            return profile.user_id, profile.id

        return None
