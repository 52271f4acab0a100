"""
Checkout module exceptions.

Every terminal state of checkout verification other than success maps to
one of these; the API error handler turns them into ``{"error": ...}``.
"""

from typing import Any

from shared.exceptions import AuthorizationError, SaaSKitError, ValidationError


class CheckoutError(SaaSKitError):
    """Base exception for checkout-related errors."""

    pass


class MissingFieldError(ValidationError):
    """Raised when a required request field is absent or empty."""

    def __init__(self, field: str, context: str = ""):
        message = f"Missing required field: {field}"
        if context:
            message = f"{message} {context}"
        super().__init__(message, code="MISSING_FIELD", details={"field": field})


class PaymentIncompleteError(ValidationError):
    """Raised when the session's payment_status is anything but "paid"."""

    def __init__(self, payment_status: str = ""):
        super().__init__(
            "Payment was not successful",
            code="PAYMENT_INCOMPLETE",
            details={"payment_status": payment_status},
        )


class CustomerUnresolvableError(ValidationError):
    """Raised when the session has no usable customer or customer email."""

    def __init__(self, message: str):
        super().__init__(message, code="CUSTOMER_UNRESOLVABLE")


class SessionUserMismatchError(AuthorizationError):
    """Raised when a session is verified by a user other than its purchaser."""

    def __init__(self, session_id: str):
        super().__init__(
            "Unauthorized: Session does not belong to user",
            code="SESSION_USER_MISMATCH",
            details={"session_id": session_id},
        )


class CustomerEmailRequiredError(ValidationError):
    """Raised when a new Stripe customer is needed but no email was sent."""

    def __init__(self):
        super().__init__(
            "User email is required for new customer creation",
            code="CUSTOMER_EMAIL_REQUIRED",
        )


class EmailMismatchError(AuthorizationError):
    """Raised when a guest payment is claimed under a different email."""

    def __init__(self, message: str = "Email mismatch with authenticated user"):
        super().__init__(message, code="EMAIL_MISMATCH")


class GuestPaymentClaimedError(CheckoutError):
    """
    Raised when a guest payment already belongs to another account.

    Two accounts share the purchase email; this needs a person to resolve.
    """

    status_code = 409

    def __init__(self, session_id: str, owner_id: str):
        super().__init__(
            "Multiple accounts detected with this email. Please contact support for assistance.",
            code="GUEST_PAYMENT_CLAIMED",
            details={"session_id": session_id, "owner_id": owner_id},
        )

    def to_response(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "requiresSupport": True,
        }


class ReconciliationFailedError(ValidationError):
    """Raised when the guest customer could not be attached to the profile."""

    def __init__(self, message: str, reason: str = ""):
        super().__init__(message, code="RECONCILIATION_FAILED", details={"reason": reason})
