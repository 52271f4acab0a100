"""
Subscription module exceptions.

Stripe errors raised during a sync are not wrapped here; they bubble up to
the route, which logs them and answers with a generic failure.
"""

from shared.exceptions import (
    SaaSKitError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)


class SubscriptionError(SaaSKitError):
    """Base exception for subscription-related errors."""

    pass


class StripeCustomerNotFoundError(NotFoundError):
    """Raised when a user has no Stripe customer to sync."""

    def __init__(self, user_id: str):
        super().__init__(
            "No billing account found",
            code="STRIPE_CUSTOMER_NOT_FOUND",
            details={"user_id": user_id},
        )


class WebhookSignatureError(ValidationError):
    """Raised when the Stripe-Signature header is missing or invalid."""

    def __init__(self, reason: str = "Invalid signature"):
        super().__init__(reason, code="WEBHOOK_SIGNATURE_INVALID")


class WebhookSecretMissingError(ConfigurationError):
    """Raised when STRIPE_WEBHOOK_SECRET is not configured."""

    def __init__(self):
        super().__init__(
            "Webhook secret not configured",
            code="WEBHOOK_SECRET_MISSING",
        )
