"""
Subscription mirror data models.

SubscriptionData is what a sync returns to callers; SubscriptionRecord is
the row stored in the local ``subscriptions`` table (one per user).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from shared.models import CamelModel


class SubscriptionStatus(str, Enum):
    """Stripe subscription statuses plus the local "none" sentinel."""

    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    UNPAID = "unpaid"
    PAUSED = "paused"
    NONE = "none"  # Customer has no subscription at all


class PaymentMethodSummary(CamelModel):
    """Card brand and last four digits of the default payment method."""

    brand: Optional[str] = None
    last4: Optional[str] = None


class SubscriptionData(CamelModel):
    """
    Synchronized subscription state for one Stripe customer.

    Timestamps are ISO-8601 strings in UTC.
    """

    subscription_id: Optional[str] = None
    status: SubscriptionStatus = SubscriptionStatus.NONE
    price_id: Optional[str] = None
    plan_name: Optional[str] = None
    current_period_start: Optional[str] = None
    current_period_end: Optional[str] = None
    cancel_at_period_end: bool = False
    trial_end: Optional[str] = None
    currency: Optional[str] = None
    unit_amount: Optional[int] = None
    interval: Optional[str] = None
    payment_method: Optional[PaymentMethodSummary] = None

    @classmethod
    def none(cls) -> "SubscriptionData":
        """State recorded for a customer without any subscription."""
        return cls(status=SubscriptionStatus.NONE)


class SubscriptionRecord(BaseModel):
    """Row of the ``subscriptions`` table."""

    user_id: str = Field(..., description="Owning Supabase user ID")
    profile_id: Optional[str] = Field(None, description="Owning profile ID")
    stripe_customer_id: str = Field(..., description="Stripe customer ID")
    stripe_subscription_id: Optional[str] = None
    stripe_price_id: Optional[str] = None
    status: SubscriptionStatus
    plan_name: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    trial_end: Optional[datetime] = None
    currency: Optional[str] = None
    unit_amount: Optional[int] = None
    interval: Optional[str] = None
    payment_method_brand: Optional[str] = None
    payment_method_last4: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_sync(
        cls,
        user_id: str,
        profile_id: Optional[str],
        stripe_customer_id: str,
        data: SubscriptionData,
    ) -> "SubscriptionRecord":
        """Build the complete row for a wholesale overwrite."""
        payment_method = data.payment_method or PaymentMethodSummary()
        return cls(
            user_id=user_id,
            profile_id=profile_id,
            stripe_customer_id=stripe_customer_id,
            stripe_subscription_id=data.subscription_id,
            stripe_price_id=data.price_id,
            status=data.status,
            plan_name=data.plan_name,
            current_period_start=data.current_period_start,
            current_period_end=data.current_period_end,
            cancel_at_period_end=data.cancel_at_period_end,
            trial_end=data.trial_end,
            currency=data.currency,
            unit_amount=data.unit_amount,
            interval=data.interval,
            payment_method_brand=payment_method.brand,
            payment_method_last4=payment_method.last4,
            updated_at=datetime.now(timezone.utc),
        )

    def to_row(self) -> dict[str, Any]:
        """Every column, nulls included, so an upsert never merges."""
        return self.model_dump(mode="json")


class SyncRequest(CamelModel):
    """Body of POST /api/stripe/sync."""

    user_id: Optional[str] = None


class SyncResponse(CamelModel):
    success: bool = True
    message: str = "Synchronization completed"
    subscription_data: SubscriptionData


class WebhookResponse(BaseModel):
    received: bool = True
