"""
Subscriptions module.

Keeps a local mirror of each user's Stripe subscription. Stripe stays
authoritative; the mirror is overwritten on every sync.

Public API:
- ISubscriptionSynchronizer: Interface for syncing and reading the mirror
- SubscriptionData, SubscriptionRecord, SubscriptionStatus: Data models
"""

from .interfaces import ISubscriptionSynchronizer
from .models import (
    PaymentMethodSummary,
    SubscriptionData,
    SubscriptionRecord,
    SubscriptionStatus,
)
from .exceptions import (
    SubscriptionError,
    StripeCustomerNotFoundError,
    WebhookSignatureError,
    WebhookSecretMissingError,
)

__all__ = [
    # Interface
    "ISubscriptionSynchronizer",
    # Models
    "PaymentMethodSummary",
    "SubscriptionData",
    "SubscriptionRecord",
    "SubscriptionStatus",
    # Exceptions
    "SubscriptionError",
    "StripeCustomerNotFoundError",
    "WebhookSignatureError",
    "WebhookSecretMissingError",
]
