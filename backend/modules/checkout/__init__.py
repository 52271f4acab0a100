"""
Checkout module.

Creates Stripe Checkout Sessions and verifies completed ones for both
signed-in and guest buyers, and lets a guest buyer claim the purchase
once they have an account.

Public API:
- ICheckoutService: Interface for creating and verifying sessions
- CheckoutVerification: Verification result
- ReconciliationResult: Outcome of claiming a guest purchase
- Checkout exceptions: MissingFieldError, PaymentIncompleteError, etc.
"""

from .interfaces import ICheckoutService
from .models import (
    AccountStatus,
    CheckoutSessionResponse,
    CheckoutVerification,
    ReconciliationResult,
    VerifiedCustomer,
    VerifiedSubscription,
)
from .exceptions import (
    CheckoutError,
    MissingFieldError,
    PaymentIncompleteError,
    CustomerUnresolvableError,
    SessionUserMismatchError,
    CustomerEmailRequiredError,
    EmailMismatchError,
    GuestPaymentClaimedError,
    ReconciliationFailedError,
)

__all__ = [
    # Interface
    "ICheckoutService",
    # Models
    "AccountStatus",
    "CheckoutSessionResponse",
    "CheckoutVerification",
    "ReconciliationResult",
    "VerifiedCustomer",
    "VerifiedSubscription",
    # Exceptions
    "CheckoutError",
    "MissingFieldError",
    "PaymentIncompleteError",
    "CustomerUnresolvableError",
    "SessionUserMismatchError",
    "CustomerEmailRequiredError",
    "EmailMismatchError",
    "GuestPaymentClaimedError",
    "ReconciliationFailedError",
]
