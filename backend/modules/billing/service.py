"""
Billing service implementation.

Thin wrappers over Stripe's customer-facing billing APIs. Provider errors
propagate to the routes, except the two cases callers can act on: an
unconfigured Customer Portal and a missing invoice.
"""

import logging
from typing import Any, Optional

import stripe

from shared.config import Settings
from shared.exceptions import ValidationError
from shared.stripe_client import stripe_value
from modules.customers.interfaces import ICustomerDirectory

from .exceptions import (
    BillingAccountNotFoundError,
    InvoiceNotFoundError,
    PortalNotConfiguredError,
)
from .interfaces import IBillingService
from .models import (
    BillingAddress,
    InvoiceUrlResponse,
    PaymentRecord,
    PortalSessionResponse,
)

logger = logging.getLogger(__name__)

PAYMENT_HISTORY_LIMIT = 50

# Stripe's wording when the Customer Portal has no saved configuration
PORTAL_NOT_CONFIGURED_MARKERS = (
    "No configuration provided",
    "default configuration has not been created",
)


def invoice_url(invoice: Any) -> Optional[str]:
    """Prefer the hosted invoice page; fall back to the PDF."""
    return stripe_value(invoice, "hosted_invoice_url") or stripe_value(invoice, "invoice_pdf")


class BillingService(IBillingService):
    """Billing service backed by the Stripe API."""

    def __init__(
        self,
        stripe_client: stripe.StripeClient,
        customers: ICustomerDirectory,
        settings: Settings,
    ):
        self._stripe = stripe_client
        self._customers = customers
        self._settings = settings

    async def create_portal_session(self, user_id: str) -> PortalSessionResponse:
        customer_id = await self._require_customer_id(user_id)

        try:
            session = self._stripe.billing_portal.sessions.create(
                params={
                    "customer": customer_id,
                    "return_url": self._settings.portal_return_url,
                }
            )
        except stripe.StripeError as e:
            if any(marker in str(e) for marker in PORTAL_NOT_CONFIGURED_MARKERS):
                logger.error(f"Stripe Customer Portal is not configured: {e}")
                raise PortalNotConfiguredError() from e
            raise

        logger.info(f"Portal session created: {stripe_value(session, 'id')}")
        return PortalSessionResponse(
            url=stripe_value(session, "url"),
            session_id=stripe_value(session, "id"),
        )

    async def get_invoice_url(self, invoice_id: str) -> InvoiceUrlResponse:
        if not invoice_id:
            raise ValidationError("Missing required field: invoiceId")

        try:
            invoice = self._stripe.invoices.retrieve(invoice_id)
        except stripe.InvalidRequestError as e:
            if e.code == "resource_missing":
                raise InvoiceNotFoundError(invoice_id) from e
            raise

        url = invoice_url(invoice)
        if not url:
            raise InvoiceNotFoundError(invoice_id, "Invoice URL not available")

        return InvoiceUrlResponse(
            invoice_url=url,
            invoice_id=stripe_value(invoice, "id", invoice_id),
            status=stripe_value(invoice, "status"),
        )

    async def get_payment_history(self, user_id: str) -> list[PaymentRecord]:
        customer_id = await self._find_customer_id(user_id)
        if customer_id is None:
            logger.info(f"No Stripe customer for user {user_id}; empty payment history")
            return []

        listing = self._stripe.payment_intents.list(
            params={"customer": customer_id, "limit": PAYMENT_HISTORY_LIMIT}
        )
        payments = [
            await self._payment_record(payment)
            for payment in stripe_value(listing, "data", [])
        ]

        logger.info(f"Found {len(payments)} payments for customer: {customer_id}")
        return payments

    async def get_billing_address(self, user_id: str) -> Optional[BillingAddress]:
        customer_id = await self._find_customer_id(user_id)
        if customer_id is None:
            return None

        customer = self._stripe.customers.retrieve(customer_id)
        if stripe_value(customer, "deleted", False):
            return None

        address = stripe_value(customer, "address")
        if address is None:
            return None
        return BillingAddress(
            line1=stripe_value(address, "line1", ""),
            line2=stripe_value(address, "line2", ""),
            city=stripe_value(address, "city", ""),
            state=stripe_value(address, "state", ""),
            postal_code=stripe_value(address, "postal_code", ""),
            country=stripe_value(address, "country", "US"),
        )

    async def update_billing_address(
        self,
        user_id: str,
        address: BillingAddress,
    ) -> Optional[BillingAddress]:
        missing = address.missing_required()
        if missing:
            raise ValidationError(
                "Missing required address fields: line1, city, state, postal_code, country",
                details={"missing": missing},
            )

        customer_id = await self._require_customer_id(user_id)
        updated = self._stripe.customers.update(
            customer_id,
            params={
                "address": {
                    "line1": address.line1,
                    "line2": address.line2 or "",
                    "city": address.city,
                    "state": address.state,
                    "postal_code": address.postal_code,
                    "country": address.country,
                }
            },
        )

        logger.info(f"Updated address for customer: {customer_id}")
        new_address = stripe_value(updated, "address")
        if new_address is None:
            return None
        return BillingAddress(
            **{field: stripe_value(new_address, field) for field in BillingAddress.model_fields}
        )

    async def _payment_record(self, payment: Any) -> PaymentRecord:
        metadata = stripe_value(payment, "metadata", {})
        record = PaymentRecord(
            id=stripe_value(payment, "id"),
            amount=stripe_value(payment, "amount", 0),
            currency=stripe_value(payment, "currency", ""),
            status=stripe_value(payment, "status", ""),
            created=stripe_value(payment, "created", 0),
            invoice_id=stripe_value(metadata, "invoice_id"),
            description=stripe_value(payment, "description"),
        )
        if not record.invoice_id:
            return record

        try:
            invoice = self._stripe.invoices.retrieve(record.invoice_id)
        except stripe.StripeError as e:
            logger.error(f"Error fetching invoice {record.invoice_id}: {e}")
            return record

        record.invoice_url = invoice_url(invoice)
        return record

    async def _find_customer_id(self, user_id: str) -> Optional[str]:
        if not user_id:
            raise ValidationError("Missing required field: userId")
        lookup = await self._customers.get_customer_by_user_id(user_id)
        if not lookup.success or not lookup.stripe_customer_id:
            return None
        return lookup.stripe_customer_id

    async def _require_customer_id(self, user_id: str) -> str:
        customer_id = await self._find_customer_id(user_id)
        if customer_id is None:
            logger.warning(f"No Stripe customer found for user: {user_id}")
            raise BillingAccountNotFoundError(user_id)
        return customer_id
