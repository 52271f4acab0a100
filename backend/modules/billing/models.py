"""
Billing module data models.

Request bodies and top-level responses are camelCase. Payment and address
records keep Stripe's snake_case keys, as the web client reads them
straight through.
"""

from typing import Optional

from pydantic import BaseModel, Field

from shared.models import CamelModel


class UserBillingRequest(CamelModel):
    """Body of the portal, payment-history and billing-address reads."""

    user_id: Optional[str] = None


class PortalSessionResponse(CamelModel):
    success: bool = True
    url: str
    session_id: str


class InvoiceRequest(CamelModel):
    invoice_id: Optional[str] = None


class InvoiceUrlResponse(CamelModel):
    """Viewable URL for an invoice; the hosted page wins over the PDF."""

    success: bool = True
    invoice_url: str
    invoice_id: str
    status: Optional[str] = None


class PaymentRecord(BaseModel):
    """One payment intent, as listed in the payment history."""

    id: str
    amount: int
    currency: str
    status: str
    created: int = Field(..., description="Unix seconds")
    invoice_id: Optional[str] = None
    description: Optional[str] = None
    invoice_url: Optional[str] = None


class PaymentHistoryResponse(BaseModel):
    success: bool = True
    payments: list[PaymentRecord] = Field(default_factory=list)


class BillingAddress(BaseModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    def missing_required(self) -> list[str]:
        """Names of required fields that are empty."""
        required = ("line1", "city", "state", "postal_code", "country")
        return [name for name in required if not getattr(self, name)]


class UpdateBillingAddressRequest(CamelModel):
    """Body of PUT /api/stripe/billing-address."""

    user_id: Optional[str] = None
    address: Optional[BillingAddress] = None


class BillingAddressResponse(BaseModel):
    success: bool = True
    address: Optional[BillingAddress] = None
