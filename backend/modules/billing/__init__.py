"""
Billing module.

Customer Portal sessions, invoice links, payment history and billing
address management on top of Stripe.

Public API:
- IBillingService: Interface for billing operations
- BillingAddress, PaymentRecord: Billing data models
- Billing exceptions: BillingAccountNotFoundError, PortalNotConfiguredError, etc.
"""

from .interfaces import IBillingService
from .models import (
    BillingAddress,
    InvoiceUrlResponse,
    PaymentRecord,
    PortalSessionResponse,
)
from .exceptions import (
    BillingError,
    BillingAccountNotFoundError,
    InvoiceNotFoundError,
    PortalNotConfiguredError,
)

__all__ = [
    # Interface
    "IBillingService",
    # Models
    "BillingAddress",
    "InvoiceUrlResponse",
    "PaymentRecord",
    "PortalSessionResponse",
    # Exceptions
    "BillingError",
    "BillingAccountNotFoundError",
    "InvoiceNotFoundError",
    "PortalNotConfiguredError",
]
