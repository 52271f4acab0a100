"""
Checkout module interface.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import CheckoutSessionResponse, CheckoutVerification, ReconciliationResult


@runtime_checkable
class ICheckoutService(Protocol):
    """Creates Stripe Checkout Sessions and verifies completed ones."""

    async def verify_checkout_session(
        self,
        session_id: Optional[str],
        user_id: Optional[str] = None,
        is_guest: bool = False,
    ) -> CheckoutVerification:
        """
        Confirm a completed Checkout Session and reconcile it.

        Authenticated verifications sync the subscription mirror; guest
        verifications persist nothing.

        Raises:
            MissingFieldError: No session ID, or no user ID for a non-guest
            PaymentIncompleteError: payment_status is not "paid"
            CustomerUnresolvableError: No customer, deleted customer or no email
            SessionUserMismatchError: Session metadata names another user
            stripe.StripeError: On any provider failure
        """
        ...

    async def create_checkout_session(
        self,
        price_id: Optional[str],
        user_id: Optional[str],
        user_email: Optional[str] = None,
        full_name: Optional[str] = None,
    ) -> CheckoutSessionResponse:
        """
        Start a subscription checkout for a user, creating their Stripe
        customer first if needed.
        """
        ...

    async def reconcile_guest_payment(
        self,
        session_id: Optional[str],
        user_email: Optional[str],
        user_id: str,
        account_email: Optional[str],
    ) -> ReconciliationResult:
        """
        Attach a paid guest checkout to the signed-in account that shares
        its email, then sync the subscription mirror.

        A repeat call by the same account is harmless.

        Raises:
            MissingFieldError: No session ID or no user email
            EmailMismatchError: The email differs from the account's or the payment's
            PaymentIncompleteError: payment_status is not "paid"
            GuestPaymentClaimedError: Another account already claimed the payment
            ReconciliationFailedError: The profile could not be linked
        """
        ...
