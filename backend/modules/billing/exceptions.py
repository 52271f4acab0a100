"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Any

from shared.exceptions import ConfigurationError, NotFoundError, SaaSKitError

PORTAL_SETTINGS_URL = "https://dashboard.stripe.com/test/settings/billing/portal"


class BillingError(SaaSKitError):
    """Base exception for billing-related errors."""

    pass


class BillingAccountNotFoundError(NotFoundError):
    """Raised when a user has no Stripe customer yet."""

    def __init__(self, user_id: str):
        super().__init__(
            "No billing account found. Please create a subscription first.",
            code="BILLING_ACCOUNT_NOT_FOUND",
            details={"user_id": user_id},
        )


class InvoiceNotFoundError(NotFoundError):
    """Raised when an invoice does not exist or has no viewable URL."""

    def __init__(self, invoice_id: str, message: str = "Invoice not found"):
        super().__init__(
            message,
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class PortalNotConfiguredError(ConfigurationError):
    """
    Raised when the Stripe Customer Portal has not been set up.

    Answered with a distinct ``type`` so the client can show setup
    instructions instead of a generic failure.
    """

    def __init__(self):
        super().__init__(
            "Stripe Customer Portal is not configured",
            code="PORTAL_NOT_CONFIGURED",
            details={
                "remediation": (
                    "Please configure the Customer Portal in the Stripe Dashboard at "
                    f"{PORTAL_SETTINGS_URL}"
                ),
            },
        )

    def to_response(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "details": self.details["remediation"],
            "type": "configuration_error",
        }
