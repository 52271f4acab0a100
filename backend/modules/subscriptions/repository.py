"""
Subscription mirror repository.

Encapsulates Supabase access to the ``subscriptions`` table. Writes are
whole-row upserts keyed by ``user_id``; nothing is ever patched.
"""

from typing import Optional, Any

from shared.repository import BaseRepository
from .models import SubscriptionRecord


class SubscriptionRepository(BaseRepository[SubscriptionRecord]):
    """Repository for the local subscription mirror."""

    table_name = "subscriptions"

    def get_by_user_id(self, user_id: str) -> Optional[SubscriptionRecord]:
        """Get the mirrored subscription for a user."""
        row = self._first(self._table().select("*").eq("user_id", user_id))
        return self._map_to_record(row) if row else None

    def get_by_stripe_customer_id(self, stripe_customer_id: str) -> Optional[SubscriptionRecord]:
        """Get the mirrored subscription for a Stripe customer."""
        row = self._first(
            self._table().select("*").eq("stripe_customer_id", stripe_customer_id)
        )
        return self._map_to_record(row) if row else None

    def upsert(self, record: SubscriptionRecord) -> SubscriptionRecord:
        """
        Overwrite the user's mirror row with ``record``.

        Last write wins: concurrent syncs for one customer may land in any
        order, but each leaves a complete row behind.
        """
        rows = self._rows(self._table().upsert(record.to_row(), on_conflict="user_id"))
        return self._map_to_record(rows[0]) if rows else record

    def _map_to_record(self, data: dict[str, Any]) -> SubscriptionRecord:
        """Map database row to SubscriptionRecord model."""
        return SubscriptionRecord(
            user_id=str(data["user_id"]),
            profile_id=str(data["profile_id"]) if data.get("profile_id") else None,
            stripe_customer_id=data["stripe_customer_id"],
            stripe_subscription_id=data.get("stripe_subscription_id"),
            stripe_price_id=data.get("stripe_price_id"),
            status=data.get("status") or "none",
            plan_name=data.get("plan_name"),
            current_period_start=data.get("current_period_start"),
            current_period_end=data.get("current_period_end"),
            cancel_at_period_end=bool(data.get("cancel_at_period_end")),
            trial_end=data.get("trial_end"),
            currency=data.get("currency"),
            unit_amount=data.get("unit_amount"),
            interval=data.get("interval"),
            payment_method_brand=data.get("payment_method_brand"),
            payment_method_last4=data.get("payment_method_last4"),
            updated_at=data.get("updated_at"),
        )
