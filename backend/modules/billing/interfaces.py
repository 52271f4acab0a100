"""
Billing module interface.

Routes depend on IBillingService, not the Stripe-backed implementation.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import (
    BillingAddress,
    InvoiceUrlResponse,
    PaymentRecord,
    PortalSessionResponse,
)


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for self-service billing operations.

    Every user-scoped call resolves the Stripe customer through the
    customer directory first.
    """

    async def create_portal_session(self, user_id: str) -> PortalSessionResponse:
        """
        Mint a Stripe Customer Portal session for the user.

        Raises:
            BillingAccountNotFoundError: User has no Stripe customer
            PortalNotConfiguredError: Portal not set up in the Stripe account
            stripe.StripeError: Any other provider failure
        """
        ...

    async def get_invoice_url(self, invoice_id: str) -> InvoiceUrlResponse:
        """
        Get a viewable URL for an invoice.

        Raises:
            InvoiceNotFoundError: No such invoice, or it has no URL
        """
        ...

    async def get_payment_history(self, user_id: str) -> list[PaymentRecord]:
        """Last 50 payments for the user; empty when there is no customer."""
        ...

    async def get_billing_address(self, user_id: str) -> Optional[BillingAddress]:
        """The customer's address, or None when unknown."""
        ...

    async def update_billing_address(
        self,
        user_id: str,
        address: BillingAddress,
    ) -> Optional[BillingAddress]:
        """
        Replace the customer's address in Stripe.

        Raises:
            BillingAccountNotFoundError: User has no Stripe customer
        """
        ...
